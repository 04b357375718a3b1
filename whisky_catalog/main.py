"""Command line entry point for the whisky catalog."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from . import config
from .emailer import SmtpTransport
from .errors import CatalogError, NotFoundError
from .models import Whisky
from .notifications import NotificationDispatcher
from .repository import WhiskyRepository
from .service import CatalogService


def setup_logging() -> None:
    level = getattr(logging, config.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_service(csv_path: Optional[str] = None) -> CatalogService:
    """Wire the repository and, when email is enabled, the dispatcher."""
    repository = WhiskyRepository(csv_path or config.WHISKY_CSV_PATH)
    dispatcher = None
    if config.EMAIL_ENABLED:
        dispatcher = NotificationDispatcher.from_config(SmtpTransport.from_config())
    else:
        logging.getLogger(__name__).info("Email notifications disabled.")
    return CatalogService(repository, dispatcher)


def _format_whisky(w: Whisky) -> str:
    if w.ratings:
        avg = sum(r.stars for r in w.ratings) / len(w.ratings)
        rated = f"{len(w.ratings)} rating(s), avg {avg:.1f}"
    else:
        rated = "no ratings"
    return f"{w.id}  {w.name} [{w.region_style}] ({rated})"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="whisky-catalog", description="Whisky catalog with email notifications")
    parser.add_argument("--csv", help=f"Path to the whisky CSV (default: {config.WHISKY_CSV_PATH})")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List whiskies")
    p_list.add_argument("--page", type=int, default=0)
    p_list.add_argument("--size", type=int, default=100)
    p_list.add_argument("--all", action="store_true", help="Ignore paging and list everything")

    p_show = sub.add_parser("show", help="Show one whisky and its ratings")
    p_show.add_argument("id")

    p_add = sub.add_parser("add", help="Add a whisky")
    p_add.add_argument("name")
    p_add.add_argument("region")

    p_update = sub.add_parser("update", help="Change the region of the whisky with this name")
    p_update.add_argument("name")
    p_update.add_argument("region")

    p_delete = sub.add_parser("delete", help="Delete a whisky")
    p_delete.add_argument("id")

    p_rate = sub.add_parser("rate", help="Add a rating")
    p_rate.add_argument("id")
    p_rate.add_argument("stars", type=int)
    p_rate.add_argument("message")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    setup_logging()
    logger = logging.getLogger(__name__)

    try:
        config.validate()
    except RuntimeError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    try:
        service = build_service(args.csv)

        if args.command == "list":
            if args.all:
                whiskies = service.list_whiskies(-1, -1)
            else:
                whiskies = service.list_whiskies(args.page, args.size)
            for w in whiskies:
                print(_format_whisky(w))
        elif args.command == "show":
            w = service.get_whisky(args.id)
            if w is None:
                raise NotFoundError(f"Whisky not found: {args.id}")
            print(_format_whisky(w))
            for r in w.ratings:
                print(f"  {r.stars}* {r.message}")
        elif args.command == "add":
            w = service.add_whisky(args.name, args.region)
            print(w.id)
        elif args.command == "update":
            service.update_whisky(args.name, args.region)
        elif args.command == "delete":
            service.delete_whisky(args.id)
        elif args.command == "rate":
            service.add_rating(args.id, args.stars, args.message)

    except NotFoundError as e:
        logger.error("%s", e)
        return 1
    except (CatalogError, OSError, ValueError):
        logger.exception("Command %s failed", args.command)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
