"""Hand results computed on worker threads back to the owning thread.

Image loads finish on executor threads, but every piece of UI-facing state
(view-model properties, signals a renderer listens to) belongs to the thread
that created the :class:`~herodex.appctx.AppContext`.  A dispatcher is the
only bridge between the two: workers ``post`` a callable and the owner runs it
when it next calls :meth:`Dispatcher.process_pending`.

Posting from the owning thread itself runs the callable immediately, the same
way a Qt auto connection degrades to a direct call.
"""

from __future__ import annotations

import queue
import threading
from typing import Callable, Optional, Protocol

from ..utils.logging import get_logger

LOGGER = get_logger(__name__)

Callback = Callable[[], object]


class Dispatcher(Protocol):
    def post(self, callback: Callback) -> None: ...

    def process_pending(self, timeout: Optional[float] = None) -> int: ...


class QueuedDispatcher:
    """FIFO of callbacks drained explicitly by the owning thread."""

    def __init__(self) -> None:
        self._owner = threading.get_ident()
        self._queue: queue.SimpleQueue[Callback] = queue.SimpleQueue()

    def post(self, callback: Callback) -> None:
        if threading.get_ident() == self._owner:
            _invoke(callback)
        else:
            self._queue.put(callback)

    def process_pending(self, timeout: Optional[float] = None) -> int:
        """Run queued callbacks on the calling thread and return how many ran.

        With a *timeout*, wait up to that long for the first callback before
        draining the rest; without one, only what is already queued runs.
        """

        ran = 0
        if timeout is not None:
            try:
                callback = self._queue.get(timeout=timeout)
            except queue.Empty:
                return 0
            _invoke(callback)
            ran += 1
        while True:
            try:
                callback = self._queue.get_nowait()
            except queue.Empty:
                return ran
            _invoke(callback)
            ran += 1


def _invoke(callback: Callback) -> None:
    try:
        callback()
    except Exception as exc:
        LOGGER.error("Dispatched callback %r failed: %s", callback, exc)


def create_dispatcher() -> Dispatcher:
    """Use Qt's event loop when an application object exists, else a queue."""

    from PySide6.QtCore import QCoreApplication

    if QCoreApplication.instance() is not None:
        from .qt_dispatch import QtDispatcher

        return QtDispatcher()
    return QueuedDispatcher()


__all__ = ["Dispatcher", "QueuedDispatcher", "create_dispatcher"]
