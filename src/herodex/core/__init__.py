"""Selection, search, favorites and routing over the catalog model."""

from .favorites import FavoritesStore, PinAction, PinOutcome
from .routing import MemoryLocation, RouteCodec
from .search import SearchIndex, search_catalog
from .selection import SelectionStateMachine, initial_coordinate

__all__ = [
    "FavoritesStore",
    "MemoryLocation",
    "PinAction",
    "PinOutcome",
    "RouteCodec",
    "SearchIndex",
    "SelectionStateMachine",
    "initial_coordinate",
    "search_catalog",
]
