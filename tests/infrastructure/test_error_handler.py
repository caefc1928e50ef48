import logging
from unittest.mock import Mock

from herodex.errors import CatalogLoadError, DomainError, HeroDexError, ImageLoadError, InfrastructureError
from herodex.errors.handler import ErrorHandler, ErrorOccurredEvent, ErrorSeverity
from herodex.events.bus import EventBus


def test_handle_error_logs_and_publishes():
    logger = Mock(spec=logging.Logger)
    event_bus = Mock(spec=EventBus)
    handler = ErrorHandler(logger, event_bus)

    error = CatalogLoadError("manifest missing")
    handler.handle(error, ErrorSeverity.CRITICAL, {"site_root": "/srv"})

    logger.critical.assert_called()
    event = event_bus.publish.call_args[0][0]
    assert isinstance(event, ErrorOccurredEvent)
    assert event.error is error
    assert event.severity == ErrorSeverity.CRITICAL
    assert event.context == {"site_root": "/srv"}


def test_ui_callback():
    handler = ErrorHandler(Mock(spec=logging.Logger), Mock(spec=EventBus))
    callback = Mock()
    handler.register_ui_callback(callback)

    handler.handle(RuntimeError("ui error"), ErrorSeverity.CRITICAL)

    callback.assert_called_with("ui error", ErrorSeverity.CRITICAL)
    assert handler.reported == ["ui error"]


def test_recoverable_severities_stay_out_of_the_ui():
    logger = Mock(spec=logging.Logger)
    handler = ErrorHandler(logger, Mock(spec=EventBus))
    callback = Mock()
    handler.register_ui_callback(callback)

    handler.handle(ImageLoadError("missing avatar"), ErrorSeverity.WARNING)
    handler.handle(ValueError("bad route"), ErrorSeverity.DEBUG)

    callback.assert_not_called()
    logger.warning.assert_called()
    logger.debug.assert_called()
    assert handler.reported == []


def test_events_reach_real_bus():
    bus = EventBus()
    received = []
    bus.subscribe(ErrorOccurredEvent, received.append)
    handler = ErrorHandler(logging.getLogger("herodex.test"), bus)

    handler.handle(ValueError("boom"))

    assert len(received) == 1
    assert received[0].severity == ErrorSeverity.ERROR


def test_error_hierarchy():
    assert issubclass(CatalogLoadError, DomainError)
    assert issubclass(ImageLoadError, InfrastructureError)
    assert issubclass(DomainError, HeroDexError)


def test_user_message_replaces_technical_detail():
    logger = Mock(spec=logging.Logger)
    handler = ErrorHandler(logger, Mock(spec=EventBus))
    callback = Mock()
    handler.register_ui_callback(callback)

    handler.handle(
        CatalogLoadError("/srv/site/database/manifest.json: Expecting value"),
        ErrorSeverity.CRITICAL,
        user_message="Failed to load the database.",
    )

    callback.assert_called_once_with("Failed to load the database.", ErrorSeverity.CRITICAL)
    assert handler.reported == ["Failed to load the database."]
    assert "manifest.json" in str(logger.critical.call_args)
