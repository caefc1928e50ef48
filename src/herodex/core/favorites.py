"""Pinned items, addressed by coordinate and persisted in a settings slot.

Favorites are identified by the ``(category, subcategory, item)`` indices
they were pinned at, not by content.  If the catalog is reshaped between
sessions a pin silently follows the coordinate rather than the item; the
snapshot copied at pin time keeps the entry renderable either way.

The Favorites virtual category addresses entries by their position in
:meth:`FavoritesStore.entries`.  Removing an entry shifts every later
position, so callers must re-read positions after any mutation.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from jsonschema import Draft202012Validator
from jsonschema.exceptions import best_match

from ..config import FAVORITES_SLOT
from ..domain.models import Coordinate, FavoriteEntry, Item
from ..errors import SettingsError
from ..events.signal import Signal
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)

_OPTIONAL_TEXT = {"type": ["string", "null"]}

FAVORITE_ENTRY_SCHEMA: dict[str, Any] = {
    "$id": "herodex/favorite.schema.json",
    "type": "object",
    "required": ["categoryIndex", "subcategoryIndex", "itemIndex", "item"],
    "properties": {
        "categoryIndex": {"type": "integer", "minimum": 0},
        "subcategoryIndex": {"type": "integer", "minimum": 0},
        "itemIndex": {"type": "integer", "minimum": 0},
        "item": {
            "type": "object",
            "required": ["name"],
            "properties": {
                "name": {"type": "string"},
                "avatar": _OPTIONAL_TEXT,
                "image": _OPTIONAL_TEXT,
                "info": _OPTIONAL_TEXT,
            },
        },
        "pinId": {"type": "string"},
        "pinnedAt": {"type": "string"},
    },
    "additionalProperties": True,
}

_entry_validator = Draft202012Validator(FAVORITE_ENTRY_SCHEMA)


class KeyValueSlot(Protocol):
    """Durable store the favorites are written to (see ``SettingsManager``)."""

    def get(self, key: str, default: Any | None = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...


class PinAction(str, enum.Enum):
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True)
class PinOutcome:
    action: PinAction
    name: str
    coordinate: Coordinate

    @property
    def added(self) -> bool:
        return self.action is PinAction.ADDED


def entry_to_payload(entry: FavoriteEntry) -> dict[str, Any]:
    return {
        "categoryIndex": entry.category_index,
        "subcategoryIndex": entry.subcategory_index,
        "itemIndex": entry.item_index,
        "item": entry.item.to_dict(),
        "pinId": entry.pin_id,
        "pinnedAt": entry.pinned_at,
    }


def entry_from_payload(payload: Any) -> Optional[FavoriteEntry]:
    """Return the entry described by *payload*, or ``None`` if it is malformed."""

    error = best_match(_entry_validator.iter_errors(payload))
    if error is not None:
        LOGGER.warning("Dropping malformed favorite %r: %s", payload, error.message)
        return None
    raw_item = payload["item"]
    item = Item(
        name=raw_item["name"],
        avatar=raw_item.get("avatar") or None,
        image=raw_item.get("image") or None,
        info=raw_item.get("info"),
    )
    extras: dict[str, str] = {}
    if payload.get("pinId"):
        extras["pin_id"] = payload["pinId"]
    if payload.get("pinnedAt"):
        extras["pinned_at"] = payload["pinnedAt"]
    return FavoriteEntry(
        category_index=payload["categoryIndex"],
        subcategory_index=payload["subcategoryIndex"],
        item_index=payload["itemIndex"],
        item=item,
        **extras,
    )


class FavoritesStore:
    """Insertion-ordered favorites with at most one entry per coordinate."""

    def __init__(self, slot: KeyValueSlot | None = None, *, key: str = FAVORITES_SLOT) -> None:
        self._slot = slot
        self._key = key
        self._entries: list[FavoriteEntry] = []
        self.changed = Signal()

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def entries(self) -> tuple[FavoriteEntry, ...]:
        return tuple(self._entries)

    def items(self) -> tuple[Item, ...]:
        """The Favorites virtual list: snapshots in pin order."""
        return tuple(entry.item for entry in self._entries)

    def entry_at(self, index: int) -> Optional[FavoriteEntry]:
        if 0 <= index < len(self._entries):
            return self._entries[index]
        return None

    def index_of(self, coordinate: Coordinate) -> int:
        """Position of the entry pinned at *coordinate*, or ``-1``."""
        key = coordinate.as_tuple()
        for index, entry in enumerate(self._entries):
            if entry.coordinate.as_tuple() == key:
                return index
        return -1

    def is_pinned(self, coordinate: Coordinate) -> bool:
        return self.index_of(coordinate) >= 0

    def toggle_pin(self, coordinate: Coordinate, item: Item) -> PinOutcome:
        """Remove the pin at *coordinate* if present, otherwise pin *item* there."""

        if min(coordinate.as_tuple()) < 0:
            raise ValueError(f"Cannot pin a sentinel coordinate: {coordinate.as_tuple()}")
        index = self.index_of(coordinate)
        if index >= 0:
            removed = self._entries.pop(index)
            outcome = PinOutcome(PinAction.REMOVED, removed.name, coordinate)
        else:
            snapshot = Item(name=item.name, avatar=item.avatar, image=item.image, info=item.info)
            self._entries.append(
                FavoriteEntry(
                    category_index=coordinate.category,
                    subcategory_index=coordinate.subcategory,
                    item_index=coordinate.item,
                    item=snapshot,
                )
            )
            outcome = PinOutcome(PinAction.ADDED, snapshot.name, coordinate)
        LOGGER.debug("Favorite %s: %s at %s", outcome.action.value, outcome.name, coordinate.as_tuple())
        self.changed.emit(outcome)
        return outcome

    def clear(self) -> None:
        if not self._entries:
            return
        self._entries.clear()
        self.changed.emit(None)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def persist(self) -> bool:
        """Write the favorites to the slot.  Returns ``False`` if that failed."""

        if self._slot is None:
            return False
        payload = [entry_to_payload(entry) for entry in self._entries]
        try:
            self._slot.set(self._key, payload)
        except SettingsError as exc:
            LOGGER.warning("Could not persist favorites: %s", exc)
            return False
        return True

    def restore(self) -> int:
        """Replace the in-memory favorites with the slot contents.

        Missing or corrupt data yields an empty list.  Malformed entries and
        repeated coordinates are dropped individually.  Returns the number of
        entries restored.
        """

        raw = self._slot.get(self._key, None) if self._slot is not None else None
        if raw is None:
            raw = []
        if not isinstance(raw, list):
            LOGGER.warning("Favorites slot holds %s, expected a list; starting empty", type(raw).__name__)
            raw = []

        restored: list[FavoriteEntry] = []
        seen: set[tuple[int, int, int]] = set()
        for payload in raw:
            entry = entry_from_payload(payload)
            if entry is None:
                continue
            key = entry.coordinate.as_tuple()
            if key in seen:
                LOGGER.warning("Dropping duplicate favorite at %s", key)
                continue
            seen.add(key)
            restored.append(entry)
        self._entries = restored
        self.changed.emit(None)
        return len(restored)


__all__ = [
    "FAVORITE_ENTRY_SCHEMA",
    "FavoritesStore",
    "KeyValueSlot",
    "PinAction",
    "PinOutcome",
    "entry_from_payload",
    "entry_to_payload",
]
