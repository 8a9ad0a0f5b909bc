"""Viewer session: the single owner of bitmap, transform, surface and selection.

The session is the seam a widget layer binds to.  Buttons and sliders call
the transform helpers, the canvas forwards pointer events, and a paint
handler calls :meth:`ViewerSession.render` whenever :attr:`is_dirty` is set.
Rendering is a pure function of the current bitmap, transform and selection.
"""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QObject, QThreadPool, Signal
from PySide6.QtGui import QImage

from .config import DEFAULT_CONTAINER_SIZE, DEFAULT_JPEG_QUALITY, ZOOM_STEP
from .core import viewport
from .core.coordinates import CoordinateMapper, DisplayRect
from .core.crop import CropEngine, CropOutcome
from .core.renderer import Renderer
from .core.surface import RenderSurface
from .domain.bitmap import SourceBitmap
from .domain.selection import NormalisedRect, SelectionRect
from .domain.transform import (
    Action,
    FlipHorizontal,
    FlipVertical,
    ResetGeometry,
    Rotate,
    SetColor,
    SetScale,
    TransformState,
    Zoom,
    reduce,
)
from .errors import DecodeError, InvalidGeometryError
from .errors.handler import ErrorHandler, ErrorSeverity
from .events.bus import EventBus
from .events.viewer_events import CropCommittedEvent, ImageLoadedEvent
from .io import exporter
from .tasks.decode_worker import DecodeWorker

_LOGGER = logging.getLogger(__name__)


class ViewerSession(QObject):
    """Interactive transform/crop session for one working bitmap."""

    bitmapChanged = Signal()
    """Emitted when a decode or crop installs a new working bitmap."""

    transformChanged = Signal(object)
    """Emitted with the new :class:`TransformState` after any change."""

    selectionChanged = Signal()
    """Emitted when the crop selection is created, resized or cleared."""

    loadFailed = Signal(str)
    """Emitted when the most recent upload could not be decoded."""

    cropCommitted = Signal(object)
    """Emitted with the :class:`CropOutcome` of a successful crop."""

    def __init__(
        self,
        *,
        container_size: tuple[int, int] = DEFAULT_CONTAINER_SIZE,
        zoom_step: float = ZOOM_STEP,
        event_bus: EventBus | None = None,
        error_handler: ErrorHandler | None = None,
        thread_pool: QThreadPool | None = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._container_size = self._checked_container(container_size)
        self._zoom_step = float(zoom_step)
        self._events = event_bus or EventBus()
        self._errors = error_handler or ErrorHandler(_LOGGER, self._events)
        self._thread_pool = thread_pool

        self._renderer = Renderer()
        self._crop = CropEngine(self._renderer)
        self._surface = RenderSurface()
        self._bitmap: SourceBitmap | None = None
        self._transform = TransformState()
        self._display_rect: DisplayRect | None = None
        self._dirty = True

        # Generation tracking so a slow decode cannot replace a newer upload
        self._generation = 0
        self._workers: dict[int, DecodeWorker] = {}

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------
    @property
    def bitmap(self) -> SourceBitmap | None:
        return self._bitmap

    @property
    def transform(self) -> TransformState:
        return self._transform

    @property
    def extent(self) -> tuple[int, int]:
        return self._surface.size

    @property
    def container_size(self) -> tuple[int, int]:
        return self._container_size

    @property
    def selection(self) -> SelectionRect | None:
        return self._crop.selection

    @property
    def crop_engine(self) -> CropEngine:
        return self._crop

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    @property
    def event_bus(self) -> EventBus:
        return self._events

    def display_rect(self) -> DisplayRect:
        """Return where the surface sits on screen (1:1 at the origin by default)."""
        if self._display_rect is not None:
            return self._display_rect
        width, height = self._surface.size
        return DisplayRect(0.0, 0.0, float(width), float(height))

    def mapper(self) -> CoordinateMapper:
        if self._bitmap is None:
            raise InvalidGeometryError("no bitmap loaded")
        return CoordinateMapper(self.display_rect(), self._surface.size, self._transform, self._bitmap.size)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------
    @staticmethod
    def _checked_container(size: tuple[int, int]) -> tuple[int, int]:
        width, height = size
        if width <= 0 or height <= 0:
            raise InvalidGeometryError(f"container must have a positive size, got {width}x{height}")
        return (int(width), int(height))

    def set_container_size(self, width: int, height: int) -> None:
        """Record the available display area; used by the next fit."""
        self._container_size = self._checked_container((width, height))

    def set_display_rect(self, rect: DisplayRect | None) -> None:
        """Tell the session where the surface is drawn on screen.

        ``None`` restores the default of a 1:1 surface at the origin.
        """
        if rect is not None and (rect.width <= 0 or rect.height <= 0):
            raise InvalidGeometryError("display rect must have a positive size")
        self._display_rect = rect

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def load_bytes(self, data: bytes) -> int:
        """Decode *data* in the background and return its generation token.

        Only the completion of the most recent request is applied.
        """

        self._generation += 1
        generation = self._generation
        worker = DecodeWorker(data, generation)
        worker.signals.decoded.connect(self._on_decoded)
        worker.signals.failed.connect(self._on_decode_failed)
        worker.setAutoDelete(False)
        self._workers[generation] = worker
        pool = self._thread_pool or QThreadPool.globalInstance()
        pool.start(worker)
        return generation

    def _on_decoded(self, generation: int, bitmap: SourceBitmap) -> None:
        self._workers.pop(generation, None)
        if generation != self._generation:
            _LOGGER.debug("Discarding stale decode %d (current %d)", generation, self._generation)
            return
        self._apply_bitmap(bitmap)

    def _on_decode_failed(self, generation: int, message: str) -> None:
        self._workers.pop(generation, None)
        if generation != self._generation:
            _LOGGER.debug("Discarding stale decode failure %d", generation)
            return
        self._errors.handle(DecodeError(message), ErrorSeverity.WARNING, {"generation": generation})
        self.loadFailed.emit(message)

    def load_bitmap(self, bitmap: SourceBitmap) -> int:
        """Make *bitmap* the working image and fit it into the container.

        This supersedes any decode still in flight, like a new upload would.
        Returns the new generation token.
        """

        self._generation += 1
        self._apply_bitmap(bitmap)
        return self._generation

    def _apply_bitmap(self, bitmap: SourceBitmap) -> None:
        scale = viewport.fit_scale(*self._container_size, bitmap.width, bitmap.height)
        transform = reduce(self._transform, ResetGeometry(scale))
        self._install(bitmap, transform)
        self._events.publish(
            ImageLoadedEvent(generation=self._generation, width=bitmap.width, height=bitmap.height)
        )
        _LOGGER.info("Loaded %dx%d bitmap at fit scale %.4f", bitmap.width, bitmap.height, scale)

    def _install(self, bitmap: SourceBitmap, transform: TransformState) -> None:
        extent = viewport.extent_for(bitmap, transform)
        self._surface.resize(*extent)
        self._bitmap = bitmap
        self._transform = transform
        self._crop.cancel()
        self._dirty = True
        self.bitmapChanged.emit()
        self.transformChanged.emit(transform)
        self.selectionChanged.emit()

    # ------------------------------------------------------------------
    # Transform
    # ------------------------------------------------------------------
    def dispatch(self, action: Action) -> bool:
        """Apply *action* to the transform; return True when it changed."""

        new_state = reduce(self._transform, action)
        if new_state is self._transform:
            return False
        if self._bitmap is not None and not new_state.geometry_equals(self._transform):
            # Flips never change the extent; rotation and scale may
            extent = viewport.extent_for(self._bitmap, new_state)
            if extent != self._surface.size:
                self._surface.resize(*extent)
                # The selection refers to the old surface pixels
                self._crop.cancel()
                self.selectionChanged.emit()
        self._transform = new_state
        self._dirty = True
        self.transformChanged.emit(new_state)
        return True

    def rotate(self) -> bool:
        return self.dispatch(Rotate())

    def flip_horizontal(self) -> bool:
        return self.dispatch(FlipHorizontal())

    def flip_vertical(self) -> bool:
        return self.dispatch(FlipVertical())

    def zoom_in(self) -> bool:
        return self.dispatch(Zoom(self._zoom_step))

    def zoom_out(self) -> bool:
        return self.dispatch(Zoom(1.0 / self._zoom_step))

    def set_scale(self, scale: float) -> bool:
        return self.dispatch(SetScale(scale))

    def set_color(self, name: str, value: float) -> bool:
        return self.dispatch(SetColor(name, value))

    # ------------------------------------------------------------------
    # Pointer input
    # ------------------------------------------------------------------
    def _to_surface(self, x: float, y: float) -> tuple[float, float] | None:
        if self._bitmap is None:
            return None
        try:
            return self.mapper().to_surface(x, y)
        except InvalidGeometryError as exc:
            self._errors.handle(exc)
            return None

    def pointer_press(self, x: float, y: float) -> bool:
        point = self._to_surface(x, y)
        if point is None:
            return False
        if not self._crop.begin(point[0], point[1], self._surface.size):
            return False
        self._dirty = True
        self.selectionChanged.emit()
        return True

    def pointer_move(self, x: float, y: float) -> bool:
        if not self._crop.is_selecting():
            return False
        point = self._to_surface(x, y)
        if point is None or not self._crop.update(*point):
            return False
        self._dirty = True
        self.selectionChanged.emit()
        return True

    def pointer_release(self) -> None:
        self._crop.end()

    def pointer_leave(self) -> None:
        self._crop.end()

    def cancel_selection(self) -> None:
        if self._crop.selection is None:
            return
        self._crop.cancel()
        self._dirty = True
        self.selectionChanged.emit()

    def commit_crop(self) -> bool:
        """Replace the working bitmap with the selected region.

        Returns False, with nothing changed, when there is no usable
        selection.
        """

        if self._bitmap is None:
            return False
        outcome: CropOutcome | None = self._crop.commit(self._bitmap, self._transform, self._container_size)
        if outcome is None:
            return False
        self._install(outcome.bitmap, outcome.transform)
        self._events.publish(
            CropCommittedEvent(region=outcome.region, width=outcome.bitmap.width, height=outcome.bitmap.height)
        )
        self.cropCommitted.emit(outcome)
        return True

    # ------------------------------------------------------------------
    # Rendering and export
    # ------------------------------------------------------------------
    def preview_rect(self) -> NormalisedRect | None:
        return self._crop.preview_rect()

    def render(self) -> QImage:
        """Repaint if needed and return the surface pixels."""

        if self._dirty:
            self._surface.clear()
            if self._bitmap is not None:
                self._renderer.render(self._surface, self._bitmap, self._transform)
                region = self._crop.preview_region(self._surface.size)
                if region is not None:
                    self._renderer.draw_selection(self._surface, NormalisedRect(*region))
            self._dirty = False
        return self._surface.snapshot()

    def render_output(self) -> SourceBitmap:
        """Return the transformed, color-adjusted view without the overlay."""

        if self._bitmap is None:
            raise InvalidGeometryError("no bitmap loaded")
        surface = RenderSurface(*self._surface.size)
        self._renderer.render(surface, self._bitmap, self._transform)
        return SourceBitmap.from_qimage(surface.snapshot())

    def export(self, fmt: str = "png", quality: int = DEFAULT_JPEG_QUALITY) -> bytes:
        return exporter.encode(self.render_output(), fmt, quality)
