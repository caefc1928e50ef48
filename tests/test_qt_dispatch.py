"""Tests for delivering worker results through the Qt event loop."""

import threading

import pytest

pytest.importorskip("PySide6.QtCore", reason="PySide6 is required for Qt dispatch", exc_type=ImportError)

from PySide6.QtCore import QCoreApplication  # noqa: E402

from herodex.events.dispatch import create_dispatcher  # noqa: E402
from herodex.events.qt_dispatch import QtDispatcher  # noqa: E402


@pytest.fixture(scope="module")
def qapp() -> QCoreApplication:
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


def test_context_default_uses_qt_when_an_application_exists(qapp):
    assert isinstance(create_dispatcher(), QtDispatcher)


def test_worker_post_runs_on_the_application_thread(qapp):
    dispatcher = QtDispatcher()
    ran_on = []
    worker = threading.Thread(
        target=dispatcher.post,
        args=(lambda: ran_on.append(threading.current_thread().name),),
        name="herodex-test-worker",
    )
    worker.start()
    worker.join(5)

    assert ran_on == []
    assert dispatcher.process_pending(timeout=5) == 1
    assert ran_on == [threading.current_thread().name]


def test_post_from_the_application_thread_is_direct(qapp):
    dispatcher = QtDispatcher()
    ran = []

    dispatcher.post(lambda: ran.append(1))

    assert ran == [1]
