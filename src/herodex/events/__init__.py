from .bus import EventBus, Subscription
from .dispatch import Dispatcher, QueuedDispatcher, create_dispatcher
from .domain_events import DomainEvent
from .catalog_events import (
    CatalogLoadedEvent,
    FavoriteToggledEvent,
    ImageLoadedEvent,
    SelectionChangedEvent,
)

__all__ = [
    "CatalogLoadedEvent",
    "Dispatcher",
    "DomainEvent",
    "EventBus",
    "FavoriteToggledEvent",
    "ImageLoadedEvent",
    "QueuedDispatcher",
    "SelectionChangedEvent",
    "Subscription",
    "create_dispatcher",
]
