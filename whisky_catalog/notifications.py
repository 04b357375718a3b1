"""Subscription-driven email notifications.

Subscribers are read once from a JSON document.  Catalog events are turned
into outgoing emails by pure functions (:func:`matching_subscriptions` and
:func:`compose`) and then handed one at a time to a mail transport.  A
failed delivery is logged and recorded; the rest of the batch still goes out.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from . import config
from .emailer import MailTransport
from .errors import DeserializationError
from .models import NotificationRequest, NotificationType, Rating, Whisky
from .utils import PathLike

logger = logging.getLogger(__name__)

DEFAULT_SENDER = "notifications@whiskyapi.com"


# ---- Events ------------------------------------------------------------------

@dataclass(frozen=True)
class WhiskyAdded:
    whisky: Whisky


@dataclass(frozen=True)
class RatingAdded:
    whisky: Whisky
    rating: Rating


Event = Union[WhiskyAdded, RatingAdded]


@dataclass(frozen=True)
class OutgoingEmail:
    recipient: str
    subject: str
    body: str


@dataclass
class DispatchReport:
    sent: List[OutgoingEmail] = field(default_factory=list)
    failed: List[OutgoingEmail] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


# ---- Subscriptions -----------------------------------------------------------

def load_subscriptions(path: PathLike) -> List[NotificationRequest]:
    """Read the subscription list; a missing file means no subscribers."""
    p = Path(path)
    if not p.exists():
        logger.info("No subscription document at %s; notifications go nowhere", p)
        return []

    try:
        with p.open("r", encoding="utf-8") as f:
            raw = f.read()
    except UnicodeDecodeError as e:
        raise DeserializationError(f"Subscription document {p} is not valid UTF-8: {e}") from e
    if not raw.strip():
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise DeserializationError(f"Malformed subscription document {p}: {e}") from e
    if data is None:
        return []
    if not isinstance(data, list):
        raise DeserializationError(f"Subscription document {p} must hold a JSON array")

    subscriptions = [NotificationRequest.from_dict(item) for item in data]
    logger.info("Loaded %d subscriptions from %s", len(subscriptions), p)
    return subscriptions


def matching_subscriptions(
    subscriptions: Iterable[NotificationRequest],
    notification_type: NotificationType,
    region: Optional[str] = None,
) -> List[NotificationRequest]:
    """Subscriptions of `notification_type`, in list order.

    For NEW_WHISKY_IN_REGION only those whose region equals `region`
    (ignoring case) are kept.
    """
    matches = [s for s in subscriptions if s.notification_type == notification_type]
    if notification_type == NotificationType.NEW_WHISKY_IN_REGION:
        matches = [s for s in matches if s.matches_region(region)]
    return matches


# ---- Message composition -----------------------------------------------------

def _whisky_added_body(whisky: Whisky) -> str:
    return (
        "Hey there!  We thought you'd like to know a new whisky has been added!\n"
        f"It is named {whisky.name} and is from the {whisky.region_style} region."
    )


def _rating_added_body(whisky: Whisky, rating: Rating) -> str:
    return (
        f"Hey there!  We thought you'd like to know a new rating has been added for {whisky.name}!\n\n"
        f"It was given a {rating.stars} star rating with the following message: {rating.message}"
    )


def compose(
    event: Event,
    subscriptions: Sequence[NotificationRequest],
    subject_prefix: str = "[Whisky API]",
) -> List[OutgoingEmail]:
    """Return every email `event` should produce, in delivery order."""
    prefix = f"{subject_prefix} " if subject_prefix else ""

    if isinstance(event, WhiskyAdded):
        whisky = event.whisky
        body = _whisky_added_body(whisky)
        emails = [
            OutgoingEmail(s.email_address, f"{prefix}New Whisky Added", body)
            for s in matching_subscriptions(subscriptions, NotificationType.NEW_WHISKY)
        ]
        region_subject = f"{prefix}New Whisky Added in {whisky.region_style} Region"
        emails.extend(
            OutgoingEmail(s.email_address, region_subject, body)
            for s in matching_subscriptions(
                subscriptions, NotificationType.NEW_WHISKY_IN_REGION, whisky.region_style
            )
        )
        return emails

    if isinstance(event, RatingAdded):
        body = _rating_added_body(event.whisky, event.rating)
        return [
            OutgoingEmail(s.email_address, f"{prefix}New Rating Added", body)
            for s in matching_subscriptions(subscriptions, NotificationType.NEW_RATING)
        ]

    raise TypeError(f"Unsupported event: {event!r}")


# ---- Dispatcher --------------------------------------------------------------

class NotificationDispatcher:
    """Emails subscribers about new whiskies and new ratings."""

    def __init__(
        self,
        subscriptions: Iterable[NotificationRequest],
        transport: MailTransport,
        *,
        sender: str = DEFAULT_SENDER,
        subject_prefix: str = "[Whisky API]",
    ):
        self._subscriptions = tuple(subscriptions)
        self.transport = transport
        self.sender = sender
        self.subject_prefix = subject_prefix

    @classmethod
    def from_file(cls, path: PathLike, transport: MailTransport, **kwargs) -> "NotificationDispatcher":
        return cls(load_subscriptions(path), transport, **kwargs)

    @classmethod
    def from_config(cls, transport: MailTransport) -> "NotificationDispatcher":
        return cls.from_file(
            config.NOTIFICATIONS_PATH,
            transport,
            sender=config.EMAIL_FROM,
            subject_prefix=config.EMAIL_SUBJECT_PREFIX,
        )

    @property
    def subscriptions(self) -> tuple:
        return self._subscriptions

    def dispatch(self, event: Event) -> DispatchReport:
        report = DispatchReport()
        for email in compose(event, self._subscriptions, self.subject_prefix):
            try:
                self.transport.send(self.sender, email.recipient, email.subject, email.body)
            except Exception:
                # One bad recipient must not stop the rest of the batch.
                logger.exception("Failed to notify %s (subject=%s)", email.recipient, email.subject)
                report.failed.append(email)
            else:
                report.sent.append(email)

        if report.sent or report.failed:
            logger.info(
                "%s: %d notification(s) sent, %d failed",
                type(event).__name__, len(report.sent), len(report.failed),
            )
        return report

    def on_whisky_added(self, whisky: Whisky) -> DispatchReport:
        return self.dispatch(WhiskyAdded(whisky))

    def on_rating_added(self, whisky: Whisky, rating: Rating) -> DispatchReport:
        return self.dispatch(RatingAdded(whisky, rating))


__all__ = [
    "WhiskyAdded",
    "RatingAdded",
    "OutgoingEmail",
    "DispatchReport",
    "NotificationDispatcher",
    "load_subscriptions",
    "matching_subscriptions",
    "compose",
    "DEFAULT_SENDER",
]
