from dataclasses import dataclass

from .domain_events import DomainEvent


@dataclass(frozen=True)
class CatalogLoadedEvent(DomainEvent):
    manifest_path: str = ""
    category_count: int = 0
    item_count: int = 0


@dataclass(frozen=True)
class SelectionChangedEvent(DomainEvent):
    coordinate: tuple[int, int, int] = (-1, -1, -1)
    previous: tuple[int, int, int] = (-1, -1, -1)


@dataclass(frozen=True)
class FavoriteToggledEvent(DomainEvent):
    coordinate: tuple[int, int, int] = (-1, -1, -1)
    added: bool = False
    name: str = ""


@dataclass(frozen=True)
class ImageLoadedEvent(DomainEvent):
    ref: str = ""
    available: bool = False
