"""Synchronous publish/subscribe bus shared by the core components.

Every state change in HeroDex happens on the caller's thread, so handlers are
invoked inline in subscription order.  Image caches created by the
application context post their events through its dispatcher, so they too
arrive on the owning thread.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Type

from .domain_events import DomainEvent


@dataclass
class Subscription:
    """Handle returned by subscribe(); can be used to unsubscribe."""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    event_type: Type = DomainEvent
    handler: Callable = field(default=lambda e: None)
    active: bool = True

    def cancel(self) -> None:
        self.active = False


class EventBus:
    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger(__name__)
        self._handlers: Dict[Type[DomainEvent], List[Subscription]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event_type: Type[DomainEvent], handler: Callable) -> Subscription:
        sub = Subscription(event_type=event_type, handler=handler)
        with self._lock:
            self._handlers[event_type].append(sub)
        return sub

    def unsubscribe(self, subscription: Subscription) -> None:
        subscription.active = False
        with self._lock:
            subs = self._handlers.get(subscription.event_type)
            if subs and subscription in subs:
                subs.remove(subscription)

    def publish(self, event: DomainEvent) -> int:
        """Deliver *event* to its subscribers and return how many ran cleanly."""

        event_type = type(event)
        with self._lock:
            subs = list(self._handlers[event_type])

        delivered = 0
        for sub in subs:
            if not sub.active:
                continue
            try:
                sub.handler(event)
            except Exception as exc:
                self._logger.error("Handler failed for %s: %s", event.event_name, exc)
                continue
            delivered += 1
        return delivered

