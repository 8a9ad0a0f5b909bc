"""Immutable wrapper around the decoded pixel buffer."""

from __future__ import annotations

from dataclasses import dataclass

from PySide6.QtGui import QImage

from ..errors import InvalidGeometryError


@dataclass(frozen=True)
class SourceBitmap:
    """Decoded pixels plus their dimensions.

    The wrapped :class:`QImage` is always a detached ``Format_ARGB32`` copy so
    later edits to whatever the caller handed in can never leak into the
    session.  Bitmaps are replaced, never mutated.
    """

    image: QImage

    def __post_init__(self) -> None:
        if self.image.isNull() or self.image.width() <= 0 or self.image.height() <= 0:
            raise InvalidGeometryError("bitmap must have a positive width and height")

    @classmethod
    def from_qimage(cls, image: QImage) -> "SourceBitmap":
        """Return a bitmap owning a private ARGB32 copy of *image*."""

        if image.isNull():
            raise InvalidGeometryError("cannot build a bitmap from a null image")
        converted = image.convertToFormat(QImage.Format.Format_ARGB32)
        # ``convertToFormat`` may hand back a shallow copy when the format
        # already matches; ``copy`` guarantees a private buffer.
        return cls(converted.copy())

    @property
    def width(self) -> int:
        return self.image.width()

    @property
    def height(self) -> int:
        return self.image.height()

    @property
    def size(self) -> tuple[int, int]:
        return (self.image.width(), self.image.height())
