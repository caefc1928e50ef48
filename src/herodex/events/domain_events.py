"""Base type for everything published on the :class:`EventBus`."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent:
    event_id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = field(default_factory=_utc_now)
    source: str = ""

    @property
    def event_name(self) -> str:
        """``SelectionChangedEvent`` -> ``selection_changed``."""
        name = type(self).__name__.removesuffix("Event")
        return "".join(f"_{ch.lower()}" if ch.isupper() else ch for ch in name).lstrip("_")
