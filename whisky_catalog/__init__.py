"""
Whisky catalog package.

This package contains modules for storing whiskies in a CSV file with one
JSON rating document per whisky, and for emailing subscribers when whiskies
or ratings are added.  See README.md for details.
"""

from .errors import CatalogError, DeserializationError, NotFoundError, TransportError
from .models import NotificationRequest, NotificationType, Rating, Whisky
from .notifications import NotificationDispatcher
from .ratings import RatingStore
from .repository import WhiskyRepository

__all__ = [
    "config",
    "emailer",
    "errors",
    "main",
    "models",
    "notifications",
    "ratings",
    "repository",
    "service",
    "utils",
    "CatalogError",
    "DeserializationError",
    "NotFoundError",
    "TransportError",
    "NotificationRequest",
    "NotificationType",
    "Rating",
    "Whisky",
    "NotificationDispatcher",
    "RatingStore",
    "WhiskyRepository",
]
