"""Coordinate conversion between display, surface and image space.

Three frames are involved:

**Display space**: where the pointer lives.  The surface is shown inside a
rectangle on screen whose size may differ from the pixel buffer (CSS sizing,
device pixel ratio, scrolled containers).

**Surface space**: pixels of the rendering surface, i.e. the transformed
image as the user sees it.  Crop selections are expressed here.

**Image space**: pixels of the untransformed source bitmap.

Display/surface conversion only undoes the display-to-pixel ratio.
Surface/image conversion inverts the renderer's translate, scale+flip and
rotate steps in reverse order.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..domain.selection import NormalisedRect
from ..domain.transform import TransformState
from ..errors import InvalidGeometryError

# (cos, sin) for each quadrant, exact so repeated conversions do not drift.
_QUADRANT_TRIG: dict[int, tuple[int, int]] = {
    0: (1, 0),
    90: (0, 1),
    180: (-1, 0),
    270: (0, -1),
}


@dataclass(frozen=True)
class DisplayRect:
    """Bounds of the surface on screen, in display coordinates."""

    left: float
    top: float
    width: float
    height: float


def _require_size(name: str, size: tuple[float, float]) -> tuple[float, float]:
    width, height = size
    if width <= 0 or height <= 0:
        raise InvalidGeometryError(f"{name} must have a positive size, got {width}x{height}")
    return float(width), float(height)


def display_ratio(display_rect: DisplayRect, surface_size: tuple[int, int]) -> tuple[float, float]:
    """Return display units per surface pixel along each axis."""

    display_w, display_h = _require_size("display rect", (display_rect.width, display_rect.height))
    surface_w, surface_h = _require_size("surface", surface_size)
    return (display_w / surface_w, display_h / surface_h)


def display_to_surface(
    x: float,
    y: float,
    display_rect: DisplayRect,
    surface_size: tuple[int, int],
) -> tuple[float, float]:
    """Map a pointer position onto surface pixels."""

    ratio_x, ratio_y = display_ratio(display_rect, surface_size)
    return ((x - display_rect.left) / ratio_x, (y - display_rect.top) / ratio_y)


def surface_to_display(
    x: float,
    y: float,
    display_rect: DisplayRect,
    surface_size: tuple[int, int],
) -> tuple[float, float]:
    ratio_x, ratio_y = display_ratio(display_rect, surface_size)
    return (x * ratio_x + display_rect.left, y * ratio_y + display_rect.top)


def image_to_surface(
    x: float,
    y: float,
    surface_size: tuple[int, int],
    state: TransformState,
    bitmap_size: tuple[int, int],
) -> tuple[float, float]:
    """Forward map of the renderer: bitmap pixel to surface pixel."""

    surface_w, surface_h = _require_size("surface", surface_size)
    bitmap_w, bitmap_h = _require_size("bitmap", bitmap_size)
    cos_q, sin_q = _QUADRANT_TRIG[state.rotation]

    local_x = x - bitmap_w / 2.0
    local_y = y - bitmap_h / 2.0
    rotated_x = local_x * cos_q - local_y * sin_q
    rotated_y = local_x * sin_q + local_y * cos_q
    scaled_x = rotated_x * state.scale * state.flip_horizontal
    scaled_y = rotated_y * state.scale * state.flip_vertical
    return (scaled_x + surface_w / 2.0, scaled_y + surface_h / 2.0)


def surface_to_image(
    x: float,
    y: float,
    surface_size: tuple[int, int],
    state: TransformState,
    bitmap_size: tuple[int, int],
) -> tuple[float, float]:
    """Inverse map of the renderer: surface pixel to bitmap pixel."""

    surface_w, surface_h = _require_size("surface", surface_size)
    bitmap_w, bitmap_h = _require_size("bitmap", bitmap_size)
    cos_q, sin_q = _QUADRANT_TRIG[state.rotation]

    # Undo the translate to the surface centre
    centred_x = x - surface_w / 2.0
    centred_y = y - surface_h / 2.0
    # Undo scale and flip
    unscaled_x = centred_x / (state.scale * state.flip_horizontal)
    unscaled_y = centred_y / (state.scale * state.flip_vertical)
    # Undo the rotation (transpose of the rotation matrix)
    local_x = unscaled_x * cos_q + unscaled_y * sin_q
    local_y = -unscaled_x * sin_q + unscaled_y * cos_q
    return (local_x + bitmap_w / 2.0, local_y + bitmap_h / 2.0)


def selection_to_image_rect(
    rect: NormalisedRect,
    surface_size: tuple[int, int],
    state: TransformState,
    bitmap_size: tuple[int, int],
) -> NormalisedRect:
    """Return the source-pixel bounding box of a surface rectangle."""

    corners = [
        surface_to_image(cx, cy, surface_size, state, bitmap_size)
        for cx, cy in (
            (rect.x, rect.y),
            (rect.right, rect.y),
            (rect.x, rect.bottom),
            (rect.right, rect.bottom),
        )
    ]
    xs = [point[0] for point in corners]
    ys = [point[1] for point in corners]
    left, top = min(xs), min(ys)
    return NormalisedRect(left, top, max(xs) - left, max(ys) - top)


class CoordinateMapper:
    """Binds the conversions above to the session's current geometry.

    Parameters
    ----------
    display_rect:
        Where the surface is shown on screen.
    surface_size:
        Pixel size of the rendering surface.
    state:
        Current transform.
    bitmap_size:
        Pixel size of the source bitmap.
    """

    def __init__(
        self,
        display_rect: DisplayRect,
        surface_size: tuple[int, int],
        state: TransformState,
        bitmap_size: tuple[int, int],
    ) -> None:
        self._display_rect = display_rect
        self._surface_size = surface_size
        self._state = state
        self._bitmap_size = bitmap_size

    def to_surface(self, x: float, y: float) -> tuple[float, float]:
        return display_to_surface(x, y, self._display_rect, self._surface_size)

    def to_display(self, x: float, y: float) -> tuple[float, float]:
        return surface_to_display(x, y, self._display_rect, self._surface_size)

    def to_image_space(self, x: float, y: float) -> tuple[float, float]:
        """Map a pointer position all the way back to source pixels."""
        sx, sy = self.to_surface(x, y)
        return surface_to_image(sx, sy, self._surface_size, self._state, self._bitmap_size)

    def from_image_space(self, x: float, y: float) -> tuple[float, float]:
        sx, sy = image_to_surface(x, y, self._surface_size, self._state, self._bitmap_size)
        return self.to_display(sx, sy)

    def image_rect(self, rect: NormalisedRect) -> NormalisedRect:
        return selection_to_image_rect(rect, self._surface_size, self._state, self._bitmap_size)
