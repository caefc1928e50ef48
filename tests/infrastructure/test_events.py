from dataclasses import FrozenInstanceError

import pytest

from herodex.events.bus import EventBus
from herodex.events.catalog_events import FavoriteToggledEvent, SelectionChangedEvent


def test_subscribe_publish():
    bus = EventBus()
    received = []

    bus.subscribe(SelectionChangedEvent, lambda event: received.append(event.coordinate))
    delivered = bus.publish(SelectionChangedEvent(coordinate=(1, 0, 0), previous=(0, 0, 0)))

    assert received == [(1, 0, 0)]
    assert delivered == 1


def test_only_matching_type_is_delivered():
    bus = EventBus()
    received = []
    bus.subscribe(FavoriteToggledEvent, received.append)

    bus.publish(SelectionChangedEvent())

    assert received == []


def test_multiple_handlers():
    bus = EventBus()
    count = 0

    def handler1(event):
        nonlocal count
        count += 1

    def handler2(event):
        nonlocal count
        count += 2

    bus.subscribe(SelectionChangedEvent, handler1)
    bus.subscribe(SelectionChangedEvent, handler2)

    bus.publish(SelectionChangedEvent())

    assert count == 3


def test_failing_handler_is_isolated():
    bus = EventBus()
    received = []

    def bad(event):
        raise RuntimeError("boom")

    bus.subscribe(SelectionChangedEvent, bad)
    bus.subscribe(SelectionChangedEvent, received.append)

    assert bus.publish(SelectionChangedEvent()) == 1
    assert len(received) == 1


def test_unsubscribe_and_cancel():
    bus = EventBus()
    received = []
    first = bus.subscribe(SelectionChangedEvent, received.append)
    second = bus.subscribe(SelectionChangedEvent, received.append)
    assert bus.publish(SelectionChangedEvent()) == 2
    received.clear()

    bus.unsubscribe(first)
    second.cancel()

    assert bus.publish(SelectionChangedEvent()) == 0
    assert received == []


def test_events_are_immutable():
    event = FavoriteToggledEvent(coordinate=(0, 0, 1), added=True, name="Borin")
    with pytest.raises(FrozenInstanceError):
        event.added = False
    assert event.event_id


def test_event_name():
    assert SelectionChangedEvent().event_name == "selection_changed"
    assert FavoriteToggledEvent().event_name == "favorite_toggled"
