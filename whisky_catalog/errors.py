"""Exceptions raised by the catalog.

Missing files and filesystem failures use the built-in ``FileNotFoundError``
and ``OSError``; everything specific to the catalog derives from
:class:`CatalogError`.
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for catalog errors."""


class NotFoundError(CatalogError, KeyError):
    """Raised when a whisky lookup by id or name finds nothing."""

    def __str__(self) -> str:
        # KeyError would repr() the message.
        return str(self.args[0]) if self.args else ""


class DeserializationError(CatalogError, ValueError):
    """Raised when a rating, subscription or CSV document cannot be parsed."""


class TransportError(CatalogError):
    """Raised when an email could not be handed to the mail server."""


__all__ = ["CatalogError", "NotFoundError", "DeserializationError", "TransportError"]
