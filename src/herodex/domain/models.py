"""Immutable catalog model and the value types passed between components."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterator, Optional, Union
import uuid

from ..config import FAVORITES_INDEX, NONE_INDEX


@dataclass(slots=True, frozen=True)
class Coordinate:
    """Position in the hierarchy; any level may hold :data:`NONE_INDEX`."""

    category: int = NONE_INDEX
    subcategory: int = NONE_INDEX
    item: int = NONE_INDEX

    @classmethod
    def none(cls) -> Coordinate:
        return cls(NONE_INDEX, NONE_INDEX, NONE_INDEX)

    @property
    def is_favorites(self) -> bool:
        return self.category == FAVORITES_INDEX

    @property
    def has_item(self) -> bool:
        return self.item >= 0

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.category, self.subcategory, self.item)

    def __iter__(self) -> Iterator[int]:
        return iter(self.as_tuple())


@dataclass(slots=True, frozen=True)
class Item:
    name: str
    avatar: Optional[str] = None
    image: Optional[str] = None
    info: Optional[str] = None

    def image_refs(self) -> tuple[str, ...]:
        return tuple(ref for ref in (self.avatar, self.image) if ref)

    def to_dict(self) -> dict[str, Optional[str]]:
        return {"name": self.name, "avatar": self.avatar, "image": self.image, "info": self.info}


@dataclass(slots=True, frozen=True)
class Subcategory:
    name: str
    thumbnail: Optional[str] = None
    items: tuple[Item, ...] = ()


@dataclass(slots=True, frozen=True)
class Category:
    name: str
    subcategories: tuple[Subcategory, ...] = ()


@dataclass(slots=True, frozen=True)
class Catalog:
    """The loaded catalog.  Lookups never raise; misses return ``None`` or ``()``."""

    categories: tuple[Category, ...] = ()

    def category(self, index: int) -> Optional[Category]:
        if 0 <= index < len(self.categories):
            return self.categories[index]
        return None

    def subcategory(self, category_index: int, subcategory_index: int) -> Optional[Subcategory]:
        category = self.category(category_index)
        if category is None or not 0 <= subcategory_index < len(category.subcategories):
            return None
        return category.subcategories[subcategory_index]

    def items(self, category_index: int, subcategory_index: int) -> tuple[Item, ...]:
        subcategory = self.subcategory(category_index, subcategory_index)
        return subcategory.items if subcategory is not None else ()

    def item_at(self, coordinate: Coordinate) -> Optional[Item]:
        items = self.items(coordinate.category, coordinate.subcategory)
        if 0 <= coordinate.item < len(items):
            return items[coordinate.item]
        return None

    @property
    def item_count(self) -> int:
        return sum(len(sub.items) for cat in self.categories for sub in cat.subcategories)

    def walk(self) -> Iterator[tuple[Coordinate, Category, Subcategory, Item]]:
        """Yield every item with its coordinate in traversal order."""
        for c, category in enumerate(self.categories):
            for s, subcategory in enumerate(category.subcategories):
                for i, item in enumerate(subcategory.items):
                    yield Coordinate(c, s, i), category, subcategory, item


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(slots=True, frozen=True)
class FavoriteEntry:
    """Snapshot of an item taken when it was pinned.

    Identity is the coordinate; ``pin_id`` is recorded so the store can move
    to stable identifiers later without losing existing pins.
    """

    category_index: int
    subcategory_index: int
    item_index: int
    item: Item
    pin_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    pinned_at: str = field(default_factory=_utc_now)

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.category_index, self.subcategory_index, self.item_index)

    @property
    def name(self) -> str:
        return self.item.name


@dataclass(slots=True, frozen=True)
class ItemMatch:
    coordinate: Coordinate
    item: Item
    matched_subcategory_too: bool = False
    pinned: bool = False


@dataclass(slots=True, frozen=True)
class SubcategoryMatch:
    category_index: int
    subcategory_index: int
    item_count: int


SearchResult = Union[ItemMatch, SubcategoryMatch]

__all__ = [
    "Catalog",
    "Category",
    "Coordinate",
    "FavoriteEntry",
    "Item",
    "ItemMatch",
    "SearchResult",
    "Subcategory",
    "SubcategoryMatch",
]
