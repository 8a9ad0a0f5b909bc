"""Software rendering surface backed by a :class:`QImage`."""

from __future__ import annotations

from PySide6.QtCore import QPointF, QRect, QRectF, Qt
from PySide6.QtGui import QColor, QImage, QPainter, QPen, QTransform

from ..config import SELECTION_PEN_COLOR, SELECTION_PEN_WIDTH
from ..domain.bitmap import SourceBitmap
from ..domain.selection import NormalisedRect
from ..errors import InvalidGeometryError
from .filters import ColorFilter


class RenderSurface:
    """Fixed-size pixel buffer the renderer paints into.

    Mirrors a 2D canvas: resizing discards the content, and everything drawn
    goes through an affine transform set up by the caller.
    """

    def __init__(self, width: int = 1, height: int = 1) -> None:
        self._image = self._allocate(width, height)

    @staticmethod
    def _allocate(width: int, height: int) -> QImage:
        if width <= 0 or height <= 0:
            raise InvalidGeometryError(f"surface size must be positive, got {width}x{height}")
        image = QImage(int(width), int(height), QImage.Format.Format_ARGB32_Premultiplied)
        image.fill(Qt.GlobalColor.transparent)
        return image

    @property
    def pixel_width(self) -> int:
        return self._image.width()

    @property
    def pixel_height(self) -> int:
        return self._image.height()

    @property
    def size(self) -> tuple[int, int]:
        return (self._image.width(), self._image.height())

    def resize(self, width: int, height: int) -> None:
        """Reallocate the buffer; the previous content is discarded."""
        self._image = self._allocate(width, height)

    def clear(self) -> None:
        self._image.fill(Qt.GlobalColor.transparent)

    def draw_transformed(
        self,
        bitmap: SourceBitmap,
        affine: QTransform,
        color_filter: ColorFilter,
        *,
        smooth: bool = False,
    ) -> None:
        """Paint *bitmap* through *affine* after running *color_filter* on it.

        *affine* maps bitmap pixel coordinates (origin at the top-left corner)
        to surface pixels.
        """

        source = color_filter.apply(bitmap.image)
        painter = QPainter(self._image)
        try:
            painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, smooth)
            painter.setTransform(affine)
            painter.drawImage(QPointF(0.0, 0.0), source)
        finally:
            painter.end()

    def draw_selection_outline(self, rect: NormalisedRect) -> None:
        """Stroke a dashed outline around *rect* (surface pixels)."""

        if rect.is_empty():
            return
        painter = QPainter(self._image)
        try:
            pen = QPen(QColor(SELECTION_PEN_COLOR))
            pen.setWidth(SELECTION_PEN_WIDTH)
            pen.setStyle(Qt.PenStyle.DashLine)
            painter.setPen(pen)
            painter.setBrush(Qt.BrushStyle.NoBrush)
            painter.drawRect(QRectF(rect.x, rect.y, rect.width, rect.height))
        finally:
            painter.end()

    def read_region(self, rect: tuple[int, int, int, int]) -> SourceBitmap:
        """Copy ``(x, y, width, height)`` out of the surface as a new bitmap.

        The region is intersected with the surface bounds first; an empty
        intersection raises :class:`InvalidGeometryError`.
        """

        x, y, width, height = rect
        region = QRect(int(x), int(y), int(width), int(height)).intersected(self._image.rect())
        if region.isEmpty():
            raise InvalidGeometryError(f"region {rect} does not overlap the surface")
        return SourceBitmap.from_qimage(self._image.copy(region))

    def snapshot(self) -> QImage:
        """Return a detached copy of the current pixels."""
        return self._image.copy()
