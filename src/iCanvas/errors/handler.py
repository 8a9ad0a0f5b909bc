import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from ..events.bus import Event, EventBus
from . import DomainError, ICanvasError


class ErrorSeverity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(kw_only=True)
class ErrorOccurredEvent(Event):
    error: Exception
    severity: ErrorSeverity
    context: dict = field(default_factory=dict)


def default_severity(error: Exception) -> ErrorSeverity:
    """Rejected user input is a warning; failed I/O is an error; anything else is critical."""
    if isinstance(error, DomainError):
        return ErrorSeverity.WARNING
    if isinstance(error, ICanvasError):
        return ErrorSeverity.ERROR
    return ErrorSeverity.CRITICAL


class ErrorHandler:
    """Central sink for recoverable failures raised inside the viewer."""

    def __init__(self, logger: logging.Logger, event_bus: EventBus):
        self._logger = logger
        self._events = event_bus
        self._ui_callback: Optional[Callable[[str, ErrorSeverity], None]] = None

    def register_ui_callback(self, callback: Callable[[str, ErrorSeverity], None]):
        self._ui_callback = callback

    def handle(
        self,
        error: Exception,
        severity: Optional[ErrorSeverity] = None,
        context: Optional[dict] = None,
    ) -> ErrorSeverity:
        severity = severity or default_severity(error)
        context = dict(context or {})
        log_method = getattr(self._logger, severity.value, self._logger.error)
        log_method("%s: %s", error.__class__.__name__, error, extra={"context": context})

        self._events.publish(ErrorOccurredEvent(error=error, severity=severity, context=context))

        # Only failures the user has to act on reach the UI
        if self._ui_callback and severity in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL):
            self._ui_callback(str(error), severity)
        return severity
