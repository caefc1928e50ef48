"""Dispatcher backed by a queued Qt signal."""

from __future__ import annotations

import time
from typing import Optional

from PySide6.QtCore import QCoreApplication, QObject, Signal

from .dispatch import Callback, _invoke


class QtDispatcher(QObject):
    """Deliver posted callbacks through the Qt event loop of the creating thread.

    ``_posted`` uses an auto connection: emitting from a worker thread queues
    the call for this object's thread, emitting from that thread calls through
    directly.
    """

    _posted = Signal(object)

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._ran = 0
        self._posted.connect(self._run)

    def post(self, callback: Callback) -> None:
        self._posted.emit(callback)

    def process_pending(self, timeout: Optional[float] = None) -> int:
        """Spin the event loop until a callback ran or *timeout* expired."""

        before = self._ran
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            QCoreApplication.processEvents()
            if self._ran > before or deadline is None or time.monotonic() >= deadline:
                return self._ran - before
            time.sleep(0.005)

    def _run(self, callback: Callback) -> None:
        self._ran += 1
        _invoke(callback)


__all__ = ["QtDispatcher"]
