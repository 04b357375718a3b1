"""Catalog operations with notifications attached.

The repository and the dispatcher know nothing of each other; this module
performs a repository mutation and then tells the dispatcher about it.  A
notification failure never undoes a mutation that already reached disk.
"""

from __future__ import annotations

from typing import List, Optional

from .models import Rating, Whisky
from .notifications import NotificationDispatcher
from .repository import WhiskyRepository


class CatalogService:
    def __init__(self, repository: WhiskyRepository, dispatcher: Optional[NotificationDispatcher] = None):
        self.repository = repository
        self.dispatcher = dispatcher

    def list_whiskies(self, page_number: int = 0, page_size: int = 100) -> List[Whisky]:
        return self.repository.get_all(page_number, page_size)

    def get_whisky(self, whisky_id) -> Optional[Whisky]:
        return self.repository.get_by_id(whisky_id)

    def add_whisky(self, name: str, region_style: str) -> Whisky:
        whisky = self.repository.add(Whisky(name=name, region_style=region_style))
        if self.dispatcher is not None:
            self.dispatcher.on_whisky_added(whisky)
        return whisky

    def update_whisky(self, name: str, region_style: str) -> Whisky:
        return self.repository.update(Whisky(name=name, region_style=region_style))

    def delete_whisky(self, whisky_id) -> None:
        self.repository.delete(whisky_id)

    def add_rating(self, whisky_id, stars: int, message: str) -> Rating:
        whisky = self.repository.add_rating(whisky_id, stars, message)
        rating = whisky.ratings[-1]
        if self.dispatcher is not None:
            self.dispatcher.on_rating_added(whisky, rating)
        return rating


__all__ = ["CatalogService"]
