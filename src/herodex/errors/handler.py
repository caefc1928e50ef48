import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from herodex.events.bus import EventBus
from herodex.events.domain_events import DomainEvent


class ErrorSeverity(Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(frozen=True)
class ErrorOccurredEvent(DomainEvent):
    error: Optional[Exception] = None
    severity: ErrorSeverity = ErrorSeverity.ERROR
    context: dict = field(default_factory=dict)


class ErrorHandler:
    """Route errors to the log, the event bus and, when severe, the user.

    Only ``ERROR`` and ``CRITICAL`` reach the UI callback; everything else is
    degraded locally and at most logged.
    """

    def __init__(self, logger: logging.Logger, event_bus: EventBus):
        self._logger = logger
        self._events = event_bus
        self._ui_callback: Optional[Callable[[str, ErrorSeverity], None]] = None
        self._reported: list[str] = []

    def register_ui_callback(self, callback: Callable[[str, ErrorSeverity], None]) -> None:
        self._ui_callback = callback

    @property
    def reported(self) -> list[str]:
        """Messages that were surfaced to the user, oldest first."""
        return list(self._reported)

    def handle(
        self,
        error: Exception,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: Optional[dict] = None,
        user_message: Optional[str] = None,
    ) -> None:
        """Log *error*, publish it, and surface it to the user when severe.

        *user_message* replaces ``str(error)`` as the text the UI callback
        receives, so technical detail stays in the log.
        """
        context = context or {}
        log_method = getattr(self._logger, severity.value, self._logger.error)
        log_method("%s: %s", error.__class__.__name__, error, extra={"context": context})

        self._events.publish(ErrorOccurredEvent(error=error, severity=severity, context=context))

        if severity in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL):
            message = user_message or str(error)
            self._reported.append(message)
            if self._ui_callback:
                self._ui_callback(message, severity)
