"""Surface sizing helpers.

Pure functions that turn a bitmap size and a :class:`TransformState` into the
pixel size of the rendering surface, plus the fit-to-container scale used
whenever a new bitmap becomes the working image.
"""

from __future__ import annotations

import math

from ..domain.bitmap import SourceBitmap
from ..domain.transform import TransformState
from ..errors import InvalidGeometryError


def _require_positive(**dimensions: float) -> None:
    for name, value in dimensions.items():
        if not math.isfinite(value) or value <= 0:
            raise InvalidGeometryError(f"{name} must be positive, got {value!r}")


def fit_scale(
    container_width: float,
    container_height: float,
    bitmap_width: float,
    bitmap_height: float,
) -> float:
    """Return the scale that fits the bitmap inside the container.

    The result is capped at ``1.0``: the initial fit only ever shrinks a
    bitmap, it never enlarges one past its native resolution.
    """

    _require_positive(
        container_width=container_width,
        container_height=container_height,
        bitmap_width=bitmap_width,
        bitmap_height=bitmap_height,
    )
    width_ratio = float(container_width) / float(bitmap_width)
    height_ratio = float(container_height) / float(bitmap_height)
    return min(width_ratio, height_ratio, 1.0)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def surface_size(
    bitmap_width: int,
    bitmap_height: int,
    rotation: int,
    scale: float,
) -> tuple[int, int]:
    """Return the ``(width, height)`` of the surface for the given geometry.

    Width and height swap for quarter and three-quarter turns.  Both are
    rounded to whole pixels, so a fractional scale can shift the rendered
    image by up to one pixel; the drift is accepted rather than corrected.
    """

    _require_positive(bitmap_width=bitmap_width, bitmap_height=bitmap_height, scale=scale)
    if rotation % 180 == 90:
        logical_w, logical_h = bitmap_height, bitmap_width
    else:
        logical_w, logical_h = bitmap_width, bitmap_height
    width = max(1, _round_half_up(logical_w * scale))
    height = max(1, _round_half_up(logical_h * scale))
    return (width, height)


def extent_for(bitmap: SourceBitmap, state: TransformState) -> tuple[int, int]:
    """Return the surface size for *bitmap* rendered with *state*."""
    return surface_size(bitmap.width, bitmap.height, state.rotation, state.scale)
