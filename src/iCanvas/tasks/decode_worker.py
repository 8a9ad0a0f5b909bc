"""Worker that decodes uploaded images off the UI thread."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QRunnable, Signal

from ..errors import DecodeError
from ..io import decoder

_LOGGER = logging.getLogger(__name__)


class DecodeWorkerSignals(QObject):
    """Signals exposed by :class:`DecodeWorker`.

    The worker lives on a global thread pool.  Keeping the signals on a
    separate ``QObject`` means connected slots run on the GUI thread no matter
    which pool thread picked up the job.
    """

    decoded = Signal(int, object)
    """Emitted with ``(generation, SourceBitmap)`` once decoding succeeds."""

    failed = Signal(int, str)
    """Emitted with ``(generation, message)`` if the bytes are not an image."""


class DecodeWorker(QRunnable):
    """Decode one upload; the generation token travels with the result."""

    def __init__(self, data: bytes, generation: int) -> None:
        super().__init__()
        self._data = data
        self._generation = generation
        self.signals = DecodeWorkerSignals()

    @property
    def generation(self) -> int:
        return self._generation

    def run(self) -> None:  # type: ignore[override]
        try:
            bitmap = decoder.decode(self._data)
        except DecodeError as exc:
            self.signals.failed.emit(self._generation, str(exc))
            return
        except Exception as exc:
            # Each request emits exactly one completion signal
            _LOGGER.exception("Unexpected failure decoding generation %d", self._generation)
            self.signals.failed.emit(self._generation, f"{exc.__class__.__name__}: {exc}")
            return
        self.signals.decoded.emit(self._generation, bitmap)


__all__ = ["DecodeWorker", "DecodeWorkerSignals"]
