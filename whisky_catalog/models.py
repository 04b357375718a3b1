"""Catalog data model.

Field names on disk keep the capitalised keys of the stored documents
(``Stars``, ``EmailAddress``, ``RegionStyle``...); the dataclasses use
Python names.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from .errors import DeserializationError


@dataclass
class Rating:
    stars: int      # expected 1-5, not enforced here
    message: str

    def to_dict(self) -> dict:
        return {"Stars": int(self.stars), "Message": self.message}

    @classmethod
    def from_dict(cls, data: Any) -> "Rating":
        if not isinstance(data, Mapping):
            raise DeserializationError(f"Rating entry must be an object, got {type(data).__name__}")
        try:
            stars = data["Stars"]
            message = data["Message"]
        except KeyError as e:
            raise DeserializationError(f"Rating entry missing field {e.args[0]!r}") from e
        if isinstance(stars, bool) or not isinstance(stars, int):
            raise DeserializationError(f"Rating Stars must be an integer, got {stars!r}")
        return cls(stars=stars, message="" if message is None else str(message))


@dataclass
class Whisky:
    name: str
    region_style: str = ""
    id: Optional[str] = None
    ratings: List[Rating] = field(default_factory=list)

    def to_row(self) -> dict:
        """Return the CSV row for this whisky (ratings are stored separately)."""
        return {
            "Id": (self.id or "").strip(),
            "Name": (self.name or "").strip(),
            "RegionStyle": (self.region_style or "").strip(),
        }


class NotificationType(str, enum.Enum):
    NEW_RATING = "NEW_RATING"
    NEW_WHISKY = "NEW_WHISKY"
    NEW_WHISKY_IN_REGION = "NEW_WHISKY_IN_REGION"


@dataclass(frozen=True)
class NotificationRequest:
    """A subscription: who to email, for which event, optionally which region."""

    email_address: str
    notification_type: NotificationType
    region: Optional[str] = None

    def matches_region(self, region_style: Optional[str]) -> bool:
        if self.region is None or region_style is None:
            return False
        return self.region.strip().casefold() == region_style.strip().casefold()

    def to_dict(self) -> dict:
        return {
            "EmailAddress": self.email_address,
            "NotificationType": self.notification_type.value,
            "Region": self.region,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "NotificationRequest":
        if not isinstance(data, Mapping):
            raise DeserializationError(f"Subscription entry must be an object, got {type(data).__name__}")
        email = data.get("EmailAddress")
        if not isinstance(email, str) or not email.strip():
            raise DeserializationError(f"Subscription entry has no EmailAddress: {dict(data)!r}")
        raw_type = data.get("NotificationType")
        try:
            ntype = NotificationType(str(raw_type).strip().upper())
        except ValueError as e:
            raise DeserializationError(f"Unknown NotificationType {raw_type!r} for {email}") from e
        region = data.get("Region")
        return cls(
            email_address=email.strip(),
            notification_type=ntype,
            region=None if region is None else str(region),
        )


__all__ = ["Rating", "Whisky", "NotificationType", "NotificationRequest"]
