"""Rating side-car documents.

Each whisky's ratings live in ``<ratings_dir>/<whisky id>.json`` as a JSON
array of ``{"Stars": int, "Message": str}`` objects.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Iterable, List

from .errors import DeserializationError
from .models import Rating
from .utils import PathLike, atomic_write

logger = logging.getLogger(__name__)


class RatingStore:
    """Reads and writes one rating document per whisky id."""

    def __init__(self, ratings_dir: PathLike):
        self.ratings_dir = Path(ratings_dir)

    def path_for(self, whisky_id: str) -> Path:
        return self.ratings_dir / f"{whisky_id}.json"

    def load(self, whisky_id: str) -> List[Rating]:
        """Return the ratings stored for `whisky_id`.

        A missing document is a whisky nobody has rated yet, so an empty
        list comes back.  Unparseable content raises DeserializationError.
        """
        path = self.path_for(whisky_id)
        if not path.exists():
            return []

        try:
            with path.open("r", encoding="utf-8") as f:
                raw = f.read()
        except UnicodeDecodeError as e:
            raise DeserializationError(f"Rating document {path} is not valid UTF-8: {e}") from e
        if not raw.strip():
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise DeserializationError(f"Malformed rating document {path}: {e}") from e
        if data is None:
            return []
        if not isinstance(data, list):
            raise DeserializationError(f"Rating document {path} must hold a JSON array")

        ratings = [Rating.from_dict(item) for item in data]
        logger.debug("Loaded %d ratings from %s", len(ratings), path)
        return ratings

    def save(self, whisky_id: str, ratings: Iterable[Rating]) -> None:
        """Overwrite the document for `whisky_id` with the full rating list."""
        path = self.path_for(whisky_id)
        payload = [r.to_dict() for r in ratings]
        with atomic_write(path) as f:
            json.dump(payload, f)
        logger.debug("Saved %d ratings to %s", len(payload), path)

    def delete(self, whisky_id: str) -> bool:
        """Remove the document for `whisky_id`. Returns True if it existed."""
        path = self.path_for(whisky_id)
        try:
            os.remove(path)
        except FileNotFoundError:
            return False
        logger.debug("Deleted rating document %s", path)
        return True


__all__ = ["RatingStore"]
