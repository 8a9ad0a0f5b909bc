"""Compose a :class:`TransformState` into one affine pass over the surface.

The paint order is fixed:

1. clear the surface,
2. run the color filter chain on the bitmap,
3. move the origin to the surface centre,
4. scale by ``scale * flip`` per axis,
5. rotate by the quadrant,
6. draw the bitmap centred on the origin.

Scaling and flipping share one linear factor per axis, so a flip always
mirrors about the image's own centre at any zoom.  Swapping steps 4 and 5
produces a different image for non-square bitmaps.
"""

from __future__ import annotations

import logging

from PySide6.QtGui import QTransform

from ..domain.bitmap import SourceBitmap
from ..domain.selection import NormalisedRect
from ..domain.transform import TransformState
from .filters import ColorFilter
from .surface import RenderSurface

_LOGGER = logging.getLogger(__name__)


def build_view_transform(
    surface_size: tuple[int, int],
    state: TransformState,
) -> QTransform:
    """Return the centre-origin matrix of steps 3 to 5.

    The result maps a point given relative to the bitmap centre to surface
    pixels.
    """

    surface_w, surface_h = surface_size
    transform = QTransform()
    transform.translate(surface_w / 2.0, surface_h / 2.0)
    transform.scale(state.scale * state.flip_horizontal, state.scale * state.flip_vertical)
    transform.rotate(float(state.rotation))
    return transform


def build_affine(
    surface_size: tuple[int, int],
    bitmap_size: tuple[int, int],
    state: TransformState,
) -> QTransform:
    """Return the full bitmap-pixel to surface-pixel matrix (steps 3 to 6)."""

    bitmap_w, bitmap_h = bitmap_size
    transform = build_view_transform(surface_size, state)
    transform.translate(-bitmap_w / 2.0, -bitmap_h / 2.0)
    return transform


class Renderer:
    """Paints a bitmap into a :class:`RenderSurface` for a given state."""

    def render(
        self,
        surface: RenderSurface,
        bitmap: SourceBitmap,
        state: TransformState,
    ) -> None:
        self._paint(surface, bitmap, state, ColorFilter.from_transform(state))

    def render_geometry(
        self,
        surface: RenderSurface,
        bitmap: SourceBitmap,
        state: TransformState,
    ) -> None:
        """Render with the geometry of *state* but a neutral color filter."""
        self._paint(surface, bitmap, state, ColorFilter.neutral())

    def draw_selection(self, surface: RenderSurface, rect: NormalisedRect) -> None:
        surface.draw_selection_outline(rect)

    def _paint(
        self,
        surface: RenderSurface,
        bitmap: SourceBitmap,
        state: TransformState,
        color_filter: ColorFilter,
    ) -> None:
        surface.clear()
        affine = build_affine(surface.size, bitmap.size, state)
        smooth = abs(state.scale) != 1.0
        _LOGGER.debug(
            "Rendering %dx%d bitmap into %dx%d surface (scale=%s rotation=%s flip=%s,%s filter=%s)",
            bitmap.width,
            bitmap.height,
            surface.pixel_width,
            surface.pixel_height,
            state.scale,
            state.rotation,
            state.flip_horizontal,
            state.flip_vertical,
            color_filter.css(),
        )
        surface.draw_transformed(bitmap, affine, color_filter, smooth=smooth)
