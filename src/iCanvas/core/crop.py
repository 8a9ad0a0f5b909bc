"""Interactive selection lifecycle and the destructive crop.

Selections are held in surface pixels ("crop what you see").  The preview
overlay and the commit both read the same rectangle, so what is outlined is
exactly what is cut.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from ..domain.bitmap import SourceBitmap
from ..domain.selection import NormalisedRect, SelectionRect
from ..domain.transform import ResetGeometry, TransformState, reduce
from . import viewport
from .renderer import Renderer
from .surface import RenderSurface

_LOGGER = logging.getLogger(__name__)


class CropState(enum.Enum):
    IDLE = "idle"
    SELECTING = "selecting"
    COMMITTING = "committing"


@dataclass(frozen=True)
class CropOutcome:
    """Result of a successful commit."""

    bitmap: SourceBitmap
    transform: TransformState
    region: tuple[int, int, int, int]


class CropEngine:
    """Owns the selection rectangle and performs the crop."""

    def __init__(self, renderer: Renderer | None = None) -> None:
        self._renderer = renderer or Renderer()
        self._state = CropState.IDLE
        self._selection: SelectionRect | None = None

    @property
    def state(self) -> CropState:
        return self._state

    @property
    def selection(self) -> SelectionRect | None:
        return self._selection

    def is_selecting(self) -> bool:
        return self._state is CropState.SELECTING

    def preview_rect(self) -> NormalisedRect | None:
        """Return the normalised drag rectangle in surface pixels, if any."""
        if self._selection is None:
            return None
        rect = self._selection.normalized()
        return None if rect.is_empty() else rect

    def preview_region(self, surface_size: tuple[int, int]) -> tuple[int, int, int, int] | None:
        """Return the pixel region a commit would cut right now, if any.

        The overlay is drawn from this so the outline matches the cut.
        """
        if self._selection is None:
            return None
        region = self._selection.normalized().clipped(*surface_size).to_pixels()
        if region[2] <= 0 or region[3] <= 0:
            return None
        return region

    # ------------------------------------------------------------------
    # Pointer lifecycle
    # ------------------------------------------------------------------

    def begin(self, x: float, y: float, surface_size: tuple[int, int]) -> bool:
        """Start a new selection at ``(x, y)`` in surface pixels.

        Presses outside the surface are ignored.  A press while a selection
        is being dragged replaces it.
        """

        surface_w, surface_h = surface_size
        if not (0.0 <= x <= surface_w and 0.0 <= y <= surface_h):
            return False
        self._selection = SelectionRect(float(x), float(y))
        self._state = CropState.SELECTING
        return True

    def update(self, x: float, y: float) -> bool:
        if self._state is not CropState.SELECTING or self._selection is None:
            return False
        self._selection = self._selection.with_end(float(x), float(y))
        return True

    def end(self) -> None:
        """Stop dragging; the rectangle stays until committed or cancelled."""
        if self._state is CropState.SELECTING:
            self._state = CropState.IDLE

    def cancel(self) -> None:
        self._selection = None
        self._state = CropState.IDLE

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------

    def commit(
        self,
        bitmap: SourceBitmap,
        transform: TransformState,
        container_size: tuple[int, int],
    ) -> CropOutcome | None:
        """Cut the selected region out of the rendered view.

        Returns ``None`` and leaves every piece of state untouched when there
        is no selection or it covers no pixels.  On success the selection is
        cleared and the returned transform has identity geometry, a re-fitted
        scale and the original color parameters.
        """

        if self._selection is None:
            return None

        extent = viewport.extent_for(bitmap, transform)
        region = self.preview_region(extent)
        if region is None:
            _LOGGER.debug("Ignoring degenerate crop %s", self._selection)
            return None

        previous = self._state
        self._state = CropState.COMMITTING
        try:
            # The color filter stays a live parameter, so cut from a
            # geometry-only render to avoid applying it twice.
            scratch = RenderSurface(*extent)
            self._renderer.render_geometry(scratch, bitmap, transform)
            cropped = scratch.read_region(region)
            scale = viewport.fit_scale(container_size[0], container_size[1], cropped.width, cropped.height)
        except Exception:
            self._state = previous
            raise

        new_transform = reduce(transform, ResetGeometry(scale))
        self._selection = None
        self._state = CropState.IDLE
        _LOGGER.info(
            "Cropped region %s of %dx%d view to %dx%d bitmap",
            region,
            extent[0],
            extent[1],
            cropped.width,
            cropped.height,
        )
        return CropOutcome(bitmap=cropped, transform=new_transform, region=region)
