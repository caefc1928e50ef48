"""Keyed image cache with single-flight loading.

``request(ref)`` returns a :class:`concurrent.futures.Future`.  Cached refs
get an already-resolved future; the first request for an unknown ref starts
exactly one load, and every later request for the same ref receives that same
future until it resolves.  A failed load resolves with :data:`UNAVAILABLE`
instead of raising, is logged once, and is remembered so it is not retried
until :meth:`ImageCache.invalidate` is called.
"""

from __future__ import annotations

import enum
import functools
import threading
from collections import OrderedDict
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Union

from ...config import IMAGE_CACHE_MAX_ENTRIES, IMAGE_LOADER_WORKERS
from ...errors import ImageLoadError
from ...events.bus import EventBus
from ...events.catalog_events import ImageLoadedEvent
from ...events.dispatch import Dispatcher
from ...events.signal import Signal
from ...utils.logging import get_logger

LOGGER = get_logger(__name__)


class ImageOutcome(enum.Enum):
    UNAVAILABLE = "unavailable"

    def __bool__(self) -> bool:
        return False


UNAVAILABLE = ImageOutcome.UNAVAILABLE


@dataclass(frozen=True)
class ImageHandle:
    ref: str
    image: Any


ImageResult = Union[ImageHandle, ImageOutcome]
ImageLoader = Callable[[str], Any]


class FileImageLoader:
    """Decode site-relative refs from disk into ``QImage`` objects."""

    def __init__(self, site_root: Path, max_size: tuple[int, int] | None = None) -> None:
        self._site_root = site_root.resolve()
        self._max_size = max_size

    def resolve(self, ref: str) -> Path:
        path = (self._site_root / ref).resolve()
        if not path.is_relative_to(self._site_root):
            raise ImageLoadError(f"Image reference escapes the site root: {ref}")
        return path

    def __call__(self, ref: str) -> Any:
        # Qt is only needed once something is actually decoded.
        from ...utils.image_loader import load_qimage

        path = self.resolve(ref)
        if not path.is_file():
            raise ImageLoadError(f"Image not found: {path}")
        image = load_qimage(path, self._max_size)
        if image is None:
            raise ImageLoadError(f"Could not decode image: {path}")
        return image


def _resolved(value: ImageResult) -> Future:
    future: Future = Future()
    future.set_result(value)
    return future


class ImageCache:
    """Shared image cache; safe to call from any thread.

    Parameters
    ----------
    loader:
        Callable turning a ref into an image object.  Raising or returning
        ``None`` marks the ref unavailable.
    max_entries:
        Upper bound on remembered outcomes, evicting the least recently
        requested.  ``0`` means unlimited.
    dispatcher:
        When given, ``image_ready`` and :class:`ImageLoadedEvent` are posted
        through it instead of being emitted on the loader thread.  Futures
        always resolve on the loader thread.
    """

    def __init__(
        self,
        loader: ImageLoader,
        *,
        executor: Executor | None = None,
        max_workers: int = IMAGE_LOADER_WORKERS,
        max_entries: int = IMAGE_CACHE_MAX_ENTRIES,
        event_bus: EventBus | None = None,
        dispatcher: Dispatcher | None = None,
    ) -> None:
        self._loader = loader
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="herodex-image"
        )
        self._max_entries = max(0, max_entries)
        self._events = event_bus
        self._dispatcher = dispatcher
        self._cache: OrderedDict[str, ImageResult] = OrderedDict()
        self._in_flight: dict[str, Future] = {}
        self._lock = threading.Lock()
        self.image_ready = Signal()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def request(self, ref: str) -> Future:
        with self._lock:
            if ref in self._cache:
                self._cache.move_to_end(ref)
                return _resolved(self._cache[ref])
            pending = self._in_flight.get(ref)
            if pending is not None:
                return pending
            future: Future = Future()
            self._in_flight[ref] = future
        try:
            self._executor.submit(self._load, ref, future)
        except RuntimeError as exc:
            LOGGER.warning("Image loader unavailable for %s: %s", ref, exc)
            self._finish(ref, future, UNAVAILABLE)
        return future

    def get(self, ref: str) -> Optional[ImageResult]:
        """Return the stored outcome for *ref* without starting a load."""
        with self._lock:
            return self._cache.get(ref)

    def invalidate(self, ref: str) -> None:
        """Forget *ref* so the next request loads it again."""
        with self._lock:
            self._cache.pop(ref, None)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    @property
    def size(self) -> int:
        with self._lock:
            return len(self._cache)

    def shutdown(self, wait: bool = False) -> None:
        """Shut down the executor if this cache created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _load(self, ref: str, future: Future) -> None:
        try:
            image = self._loader(ref)
        except Exception as exc:
            LOGGER.warning("Failed to load image %s: %s", ref, exc)
            image = None
        outcome: ImageResult = UNAVAILABLE if image is None else ImageHandle(ref, image)
        self._finish(ref, future, outcome)

    def _finish(self, ref: str, future: Future, outcome: ImageResult) -> None:
        with self._lock:
            self._cache[ref] = outcome
            self._cache.move_to_end(ref)
            if self._max_entries and len(self._cache) > self._max_entries:
                self._cache.popitem(last=False)
            self._in_flight.pop(ref, None)
        future.set_result(outcome)
        if self._dispatcher is not None:
            self._dispatcher.post(functools.partial(self._notify, ref, outcome))
        else:
            self._notify(ref, outcome)

    def _notify(self, ref: str, outcome: ImageResult) -> None:
        self.image_ready.emit(ref, outcome)
        if self._events is not None:
            self._events.publish(ImageLoadedEvent(ref=ref, available=outcome is not UNAVAILABLE))


__all__ = [
    "FileImageLoader",
    "ImageCache",
    "ImageHandle",
    "ImageLoader",
    "ImageOutcome",
    "ImageResult",
    "UNAVAILABLE",
]
