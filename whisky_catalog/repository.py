"""CSV-backed whisky repository.

All whiskies are held in memory in file order.  Every mutation rewrites the
whole CSV and then every rating document; the catalog is expected to stay
small, so the O(n) rewrite is accepted.

There is no rollback: if a write fails, the in-memory collection already
holds the change.  Call :meth:`WhiskyRepository.reload` (or retry the
operation) to get memory and disk back in line.
"""

from __future__ import annotations

import logging
import threading
import uuid
from pathlib import Path
from typing import List, Optional

import pandas as pd

from .errors import DeserializationError, NotFoundError
from .models import Rating, Whisky
from .ratings import RatingStore
from .utils import PathLike, atomic_write

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["Id", "Name", "RegionStyle"]

# get_all(-1, -1) returns the whole collection.
ALL_PAGES = -1


def _new_id() -> str:
    return str(uuid.uuid4())


def _read_frame(csv_path: Path) -> pd.DataFrame:
    """Read the CSV into a trimmed, string-only frame with the known columns."""
    try:
        df = pd.read_csv(csv_path, dtype=str, keep_default_na=False, skipinitialspace=True)
    except pd.errors.EmptyDataError:
        return pd.DataFrame(columns=CSV_COLUMNS)
    except pd.errors.ParserError as e:
        raise DeserializationError(f"Malformed whisky CSV {csv_path}: {e}") from e

    df.columns = [str(c).strip() for c in df.columns]
    if "Name" not in df.columns:
        raise DeserializationError(f"Whisky CSV {csv_path} has no Name column")
    for col in CSV_COLUMNS:
        if col not in df.columns:
            df[col] = ""
        df[col] = df[col].astype(str).str.strip()

    before = len(df)
    df = df.drop_duplicates(subset="Name", keep="first")
    if len(df) < before:
        logger.info("Dropped %d duplicate whisky name(s) from %s", before - len(df), csv_path)
    return df[CSV_COLUMNS]


class WhiskyRepository:
    """In-memory whisky collection persisted to a CSV file plus rating documents."""

    def __init__(self, csv_path: PathLike, rating_store: Optional[RatingStore] = None):
        self.csv_path = Path(csv_path)
        if rating_store is None:
            rating_store = RatingStore(self.csv_path.parent / "ratings")
        self.rating_store = rating_store
        self._lock = threading.RLock()
        self._whiskies: List[Whisky] = []
        with self._lock:
            self._load()

    # ------------------------------------------------------------------
    # Loading / persisting
    # ------------------------------------------------------------------

    def _load(self) -> None:
        """Read the CSV and rating documents into memory.

        Rows without an Id are given one, and the CSV is rewritten at once so
        the ids stay the same from one run to the next.
        """
        if not self.csv_path.is_file():
            raise FileNotFoundError(f"Whisky CSV not found: {self.csv_path}")

        df = _read_frame(self.csv_path)
        whiskies: List[Whisky] = []
        assigned = 0
        for row in df.to_dict("records"):
            whisky_id = row["Id"]
            if not whisky_id:
                whisky_id = _new_id()
                assigned += 1
            whiskies.append(
                Whisky(
                    name=row["Name"],
                    region_style=row["RegionStyle"],
                    id=whisky_id,
                    ratings=self.rating_store.load(whisky_id),
                )
            )
        logger.info("Loaded %d whiskies from %s", len(whiskies), self.csv_path)
        self._whiskies = whiskies
        if assigned:
            logger.info("Assigned ids to %d whisky row(s); rewriting %s", assigned, self.csv_path)
            self._persist()

    def _persist(self) -> None:
        """Rewrite the CSV, then every whisky's rating document."""
        frame = pd.DataFrame([w.to_row() for w in self._whiskies], columns=CSV_COLUMNS)
        with atomic_write(self.csv_path, newline="") as f:
            frame.to_csv(f, index=False)

        for w in self._whiskies:
            self.rating_store.save(w.id, w.ratings)
        logger.debug("Persisted %d whiskies to %s", len(self._whiskies), self.csv_path)

    def reload(self) -> None:
        """Discard in-memory state and read everything from disk again."""
        with self._lock:
            self._load()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        with self._lock:
            return len(self._whiskies)

    def get_all(self, page_number: int = 0, page_size: int = 100) -> List[Whisky]:
        """Return one page of whiskies in file order.

        ``get_all(-1, -1)`` skips paging.  Pages past the end are short or
        empty rather than an error.
        """
        with self._lock:
            if page_number == ALL_PAGES and page_size == ALL_PAGES:
                return list(self._whiskies)
            if page_number < 0 or page_size < 0:
                raise ValueError(
                    f"page_number and page_size must be >= 0 (or both -1), got {page_number}, {page_size}"
                )
            start = page_number * page_size
            return self._whiskies[start:start + page_size]

    def get_by_id(self, whisky_id) -> Optional[Whisky]:
        key = str(whisky_id)
        with self._lock:
            return next((w for w in self._whiskies if w.id == key), None)

    def _find_by_name(self, name: str) -> Optional[Whisky]:
        return next((w for w in self._whiskies if w.name == name), None)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, whisky: Whisky) -> Whisky:
        """Store a copy of `whisky` under a freshly generated id and return it."""
        stored = Whisky(
            name=(whisky.name or "").strip(),
            region_style=(whisky.region_style or "").strip(),
            id=_new_id(),
            ratings=[],
        )
        with self._lock:
            if self._find_by_name(stored.name) is not None:
                logger.warning("Adding whisky %r whose name already exists; it will be dropped on reload", stored.name)
            self._whiskies.append(stored)
            self._persist()
        logger.info("Added whisky %s (id=%s)", stored.name, stored.id)
        return stored

    def delete(self, whisky_id) -> None:
        """Remove the whisky with `whisky_id` along with its rating document."""
        key = str(whisky_id)
        with self._lock:
            remaining = [w for w in self._whiskies if w.id != key]
            if len(remaining) == len(self._whiskies):
                raise NotFoundError(f"Whisky not found: {key}")
            self._whiskies = remaining
            self._persist()
            self.rating_store.delete(key)
        logger.info("Deleted whisky id=%s", key)

    def update(self, whisky: Whisky) -> Whisky:
        """Change the region of the stored whisky with the same name.

        The match is on name, not id: the id carried by `whisky` is ignored.
        """
        with self._lock:
            target = self._find_by_name((whisky.name or "").strip())
            if target is None:
                raise NotFoundError(f"Whisky not found: {whisky.name}")
            target.region_style = (whisky.region_style or "").strip()
            self._persist()
        logger.info("Updated whisky %s (region=%s)", target.name, target.region_style)
        return target

    def add_rating(self, whisky_id, stars: int, message: str) -> Whisky:
        """Append a rating and return the whisky it was added to.

        The whisky is located by name, and the name compared against is
        `message`; `whisky_id` is only used in the not-found error.
        """
        with self._lock:
            whisky = self._find_by_name(message)
            if whisky is None:
                raise NotFoundError(f"Whisky not found: {whisky_id}")
            whisky.ratings.append(Rating(stars=stars, message=message))
            self._persist()
        logger.info("Added %s-star rating to %s (id=%s)", stars, whisky.name, whisky.id)
        return whisky


__all__ = ["WhiskyRepository", "CSV_COLUMNS", "ALL_PAGES"]
