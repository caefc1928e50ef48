"""Selection state machine over the catalog hierarchy.

The machine holds a single :class:`Coordinate`.  Every transition resolves
the levels beneath the one that changed: the first subcategory and first item
when they exist, :data:`NONE_INDEX` when the branch is empty.  Reads never
raise; an unresolvable coordinate simply has no items.
"""

from __future__ import annotations

from typing import Optional, Sequence

from ..config import FAVORITES_INDEX, GRID_COLUMNS, NONE_INDEX
from ..domain.models import Catalog, Category, Coordinate, Item, Subcategory
from ..events.signal import Signal
from ..utils.logging import get_logger
from .favorites import FavoritesStore

LOGGER = get_logger(__name__)

DIRECTIONS = ("left", "right", "up", "down")


def initial_coordinate(catalog: Catalog) -> Coordinate:
    """Return the coordinate a fresh session starts at for *catalog*."""

    if not catalog.categories:
        return Coordinate.none()
    return Coordinate(0, *_first_below(catalog, 0))


def _first_below(catalog: Catalog, category_index: int) -> tuple[int, int]:
    category = catalog.category(category_index)
    if category is None or not category.subcategories:
        return NONE_INDEX, NONE_INDEX
    return 0, (0 if category.subcategories[0].items else NONE_INDEX)


class SelectionStateMachine:
    """Tracks the active category, subcategory and item.

    ``changed`` is emitted with ``(new, old)`` coordinates after every
    transition that actually moved the selection.
    """

    def __init__(self, catalog: Catalog, favorites: FavoritesStore | None = None) -> None:
        self._catalog = catalog
        self._favorites = favorites
        self._coordinate = initial_coordinate(catalog)
        self.changed = Signal()

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def coordinate(self) -> Coordinate:
        return self._coordinate

    @property
    def in_favorites(self) -> bool:
        return self._coordinate.is_favorites

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def select_category(self, index: int) -> bool:
        if index == self._coordinate.category:
            return False
        if index == FAVORITES_INDEX:
            level = 0 if self._favorite_items() else NONE_INDEX
            return self._move(Coordinate(FAVORITES_INDEX, level, level))
        return self._move(Coordinate(index, *_first_below(self._catalog, index)))

    def select_subcategory(self, index: int) -> bool:
        if index == self._coordinate.subcategory:
            return False
        category = self._coordinate.category
        if category == FAVORITES_INDEX:
            items: Sequence[Item] = self._favorite_items() if index == 0 else ()
        else:
            items = self._catalog.items(category, index)
        return self._move(Coordinate(category, index, 0 if items else NONE_INDEX))

    def select_item(self, index: int) -> bool:
        """Select *index* in :meth:`current_items`; the caller owns the range."""
        if index == self._coordinate.item:
            return False
        current = self._coordinate
        return self._move(Coordinate(current.category, current.subcategory, index))

    def apply(self, coordinate: Coordinate) -> bool:
        """Jump straight to an already validated *coordinate*."""
        return self._move(coordinate)

    def reset(self) -> bool:
        return self._move(initial_coordinate(self._catalog))

    def clamp(self) -> bool:
        """Pull a stale Favorites position back inside the favorites list.

        Called after the favorites shrink.  Catalog positions never need it
        because the catalog is immutable.
        """

        current = self._coordinate
        if not current.is_favorites:
            return False
        count = len(self._favorite_items())
        if count == 0:
            target = Coordinate(FAVORITES_INDEX, NONE_INDEX, NONE_INDEX)
        elif current.item < 0:
            target = Coordinate(FAVORITES_INDEX, 0, 0)
        elif current.item >= count:
            target = Coordinate(FAVORITES_INDEX, 0, count - 1)
        else:
            target = Coordinate(FAVORITES_INDEX, 0, current.item)
        return self._move(target)

    def step(self, direction: str, columns: int = GRID_COLUMNS) -> bool:
        """Move through the item grid like the arrow keys do.

        ``left``/``right`` move by one item, ``up``/``down`` by a whole row of
        *columns*.  Moves that would leave the list are ignored.
        """

        if direction not in DIRECTIONS:
            raise ValueError(f"Unknown direction {direction!r}")
        current = self._coordinate.item
        count = len(self.current_items())
        if current < 0 or count == 0:
            return False
        offset = {"left": -1, "right": 1, "up": -columns, "down": columns}[direction]
        target = current + offset
        if not 0 <= target < count:
            return False
        return self.select_item(target)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def current_category(self) -> Optional[Category]:
        return self._catalog.category(self._coordinate.category)

    def current_subcategory(self) -> Optional[Subcategory]:
        current = self._coordinate
        return self._catalog.subcategory(current.category, current.subcategory)

    def current_items(self) -> tuple[Item, ...]:
        current = self._coordinate
        if current.is_favorites:
            return self._favorite_items() if current.subcategory == 0 else ()
        return self._catalog.items(current.category, current.subcategory)

    def current_item(self) -> Optional[Item]:
        items = self.current_items()
        index = self._coordinate.item
        if 0 <= index < len(items):
            return items[index]
        return None

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _favorite_items(self) -> tuple[Item, ...]:
        if self._favorites is None:
            return ()
        return self._favorites.items()

    def _move(self, target: Coordinate) -> bool:
        previous = self._coordinate
        if target == previous:
            return False
        self._coordinate = target
        LOGGER.debug("Selection %s -> %s", previous.as_tuple(), target.as_tuple())
        self.changed.emit(target, previous)
        return True


__all__ = ["DIRECTIONS", "SelectionStateMachine", "initial_coordinate"]
