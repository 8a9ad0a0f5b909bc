"""Console logging for the command line driver."""

from __future__ import annotations

import logging
import sys
from typing import IO, Optional

_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _named_handler(logger: logging.Logger, name: str) -> Optional[logging.Handler]:
    for handler in logger.handlers:
        if handler.get_name() == name:
            return handler
    return None


def ensure_console_logger(
    logger: logging.Logger,
    handler_name: str,
    *,
    level: int = logging.INFO,
    stream: Optional[IO[str]] = None,
) -> logging.Handler:
    """Attach one named stream handler to *logger* and set its level.

    Calling again with the same *handler_name* only changes the level, so the
    CLI callback can run once per invocation without stacking handlers.
    Output goes to stderr by default; stdout is reserved for command results.
    """

    handler = _named_handler(logger, handler_name)
    if handler is None:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.set_name(handler_name)
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)
    return handler
