"""Location fragment codec: ``#<category>/<subcategory>/<item>``.

Sentinels are written as their negative values (``-1`` for an empty level,
``-2`` for the Favorites category) so every coordinate the selection machine
can reach survives a round trip.  Decoding is lenient: a bad level falls back
to the first valid choice beneath its parent, and a bad category falls back
to the session's initial coordinate.
"""

from __future__ import annotations

from typing import Optional, Protocol

from ..config import FAVORITES_INDEX, NONE_INDEX, ROUTE_PREFIX, ROUTE_SEPARATOR
from ..domain.models import Catalog, Coordinate
from ..utils.logging import get_logger
from .favorites import FavoritesStore
from .selection import SelectionStateMachine, initial_coordinate

LOGGER = get_logger(__name__)


class Location(Protocol):
    """The visible, shareable location (the page URL in a browser renderer)."""

    @property
    def fragment(self) -> str: ...

    def replace(self, fragment: str) -> None: ...


class MemoryLocation:
    """In-process :class:`Location` that records every replacement."""

    def __init__(self, fragment: str = "") -> None:
        self._fragment = fragment
        self.history: list[str] = []

    @property
    def fragment(self) -> str:
        return self._fragment

    def replace(self, fragment: str) -> None:
        self._fragment = fragment
        self.history.append(fragment)


def encode(coordinate: Coordinate) -> str:
    return ROUTE_PREFIX + ROUTE_SEPARATOR.join(str(part) for part in coordinate.as_tuple())


def parse_fragment(fragment: str | None) -> Optional[tuple[Optional[int], Optional[int], Optional[int]]]:
    """Split *fragment* into three optional integers.

    Returns ``None`` when there is no route at all, and raises nothing: a
    component that is missing or not an integer comes back as ``None``.
    """

    text = (fragment or "").strip()
    if text.startswith(ROUTE_PREFIX):
        text = text[len(ROUTE_PREFIX):]
    if not text:
        return None
    parts = text.split(ROUTE_SEPARATOR)
    values: list[Optional[int]] = []
    for index in range(3):
        raw = parts[index].strip() if index < len(parts) else ""
        try:
            values.append(int(raw))
        except ValueError:
            values.append(None)
    return values[0], values[1], values[2]


class RouteCodec:
    """Maps coordinates to fragments and validates fragments against the catalog."""

    def __init__(self, catalog: Catalog, favorites: FavoritesStore | None = None) -> None:
        self._catalog = catalog
        self._favorites = favorites

    def encode(self, coordinate: Coordinate) -> str:
        return encode(coordinate)

    def decode(self, fragment: str | None) -> Optional[Coordinate]:
        """Return the coordinate *fragment* resolves to, or ``None`` if there is no route."""

        parsed = parse_fragment(fragment)
        if parsed is None:
            return None
        text = (fragment or "").strip().lstrip(ROUTE_PREFIX)
        if text.count(ROUTE_SEPARATOR) > 2:
            LOGGER.debug("Route %r has too many segments; using defaults", fragment)
            return initial_coordinate(self._catalog)

        category, subcategory, item = parsed
        if category == FAVORITES_INDEX:
            return self._decode_favorites(item)
        if category is None or not 0 <= category < len(self._catalog.categories):
            LOGGER.debug("Route %r names no valid category; using defaults", fragment)
            return initial_coordinate(self._catalog)

        subcategories = self._catalog.categories[category].subcategories
        if not subcategories:
            return Coordinate(category, NONE_INDEX, NONE_INDEX)
        if subcategory is None or not 0 <= subcategory < len(subcategories):
            subcategory, item = 0, None

        items = subcategories[subcategory].items
        if not items:
            return Coordinate(category, subcategory, NONE_INDEX)
        if item is None or not 0 <= item < len(items):
            item = 0
        return Coordinate(category, subcategory, item)

    def _decode_favorites(self, item: Optional[int]) -> Coordinate:
        count = len(self._favorites) if self._favorites is not None else 0
        if count == 0:
            return Coordinate(FAVORITES_INDEX, NONE_INDEX, NONE_INDEX)
        if item is None or not 0 <= item < count:
            item = 0
        return Coordinate(FAVORITES_INDEX, 0, item)

    def apply(self, fragment: str | None, selection: SelectionStateMachine) -> bool:
        """Drive *selection* to *fragment*.  Returns whether the selection moved."""

        target = self.decode(fragment)
        if target is None:
            return False
        return selection.apply(target)

    def sync_location(self, location: Location, coordinate: Coordinate) -> bool:
        """Write *coordinate* into *location* unless it already shows it."""

        fragment = self.encode(coordinate)
        if location.fragment == fragment:
            return False
        location.replace(fragment)
        return True


__all__ = ["Location", "MemoryLocation", "RouteCodec", "encode", "parse_fragment"]
