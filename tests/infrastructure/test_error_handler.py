import logging
from unittest.mock import Mock

from iCanvas.errors import DecodeError, InvalidGeometryError, UnknownAdjustmentError
from iCanvas.errors.handler import ErrorHandler, ErrorOccurredEvent, ErrorSeverity, default_severity
from iCanvas.events.bus import EventBus


def test_handle_error_logs_and_publishes():
    logger = Mock(spec=logging.Logger)
    event_bus = Mock(spec=EventBus)
    handler = ErrorHandler(logger, event_bus)

    error = DecodeError("broken upload")
    handler.handle(error, ErrorSeverity.ERROR, {"generation": 2})

    logger.error.assert_called()
    assert logger.error.call_args.kwargs["extra"] == {"context": {"generation": 2}}

    event_bus.publish.assert_called()
    event = event_bus.publish.call_args[0][0]
    assert isinstance(event, ErrorOccurredEvent)
    assert event.error is error
    assert event.severity == ErrorSeverity.ERROR
    assert event.context == {"generation": 2}


def test_warning_uses_warning_level():
    logger = Mock(spec=logging.Logger)
    handler = ErrorHandler(logger, Mock(spec=EventBus))

    handler.handle(ValueError("soft"), ErrorSeverity.WARNING)

    logger.warning.assert_called()
    logger.error.assert_not_called()


def test_ui_callback():
    logger = Mock(spec=logging.Logger)
    event_bus = Mock(spec=EventBus)
    handler = ErrorHandler(logger, event_bus)

    callback = Mock()
    handler.register_ui_callback(callback)

    handler.handle(RuntimeError("ui error"), ErrorSeverity.CRITICAL)

    callback.assert_called_with("ui error", ErrorSeverity.CRITICAL)


def test_ignore_low_severity_in_ui():
    logger = Mock(spec=logging.Logger)
    event_bus = Mock(spec=EventBus)
    handler = ErrorHandler(logger, event_bus)

    callback = Mock()
    handler.register_ui_callback(callback)

    handler.handle(Exception("info"), ErrorSeverity.INFO)
    handler.handle(Exception("warning"), ErrorSeverity.WARNING)

    callback.assert_not_called()


def test_default_severity_follows_error_layer():
    logger = Mock(spec=logging.Logger)
    handler = ErrorHandler(logger, Mock(spec=EventBus))

    assert handler.handle(InvalidGeometryError("zero width")) is ErrorSeverity.WARNING
    assert handler.handle(DecodeError("bad bytes")) is ErrorSeverity.ERROR
    assert handler.handle(KeyError("bug")) is ErrorSeverity.CRITICAL
    assert default_severity(UnknownAdjustmentError("gamma")) is ErrorSeverity.WARNING
