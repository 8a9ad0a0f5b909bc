"""Default configuration values for iCanvas."""

from __future__ import annotations

from typing import Final

# Size of the on-screen container the surface is fitted into when a bitmap is
# loaded.  Matches the viewer's maximum canvas area.
DEFAULT_CONTAINER_SIZE: Final[tuple[int, int]] = (600, 400)

# Multiplicative step used by the zoom-in / zoom-out controls.
ZOOM_STEP: Final[float] = 1.1

# ``scale`` requests at or below zero are clamped to this value.
MIN_SCALE: Final[float] = 0.01

ROTATION_QUADRANTS: Final[tuple[int, ...]] = (0, 90, 180, 270)
FLIP_SIGNS: Final[tuple[int, ...]] = (1, -1)

# ---------------------------------------------------------------------------
# Color adjustment domains
# ---------------------------------------------------------------------------

COLOR_DEFAULTS: Final[dict[str, float]] = {
    "brightness": 100.0,
    "saturation": 100.0,
    "contrast": 100.0,
    "hue": 0.0,
}
COLOR_DOMAINS: Final[dict[str, tuple[float, float]]] = {
    "brightness": (0.0, 200.0),
    "saturation": (0.0, 200.0),
    "contrast": (0.0, 200.0),
    "hue": (-180.0, 180.0),
}

# ---------------------------------------------------------------------------
# Selection overlay
# ---------------------------------------------------------------------------

SELECTION_PEN_WIDTH: Final[int] = 2
SELECTION_PEN_COLOR: Final[str] = "#000000"

# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

EXPORT_FORMATS: Final[tuple[str, ...]] = ("png", "jpeg")
DEFAULT_EXPORT_FORMAT: Final[str] = "png"
DEFAULT_JPEG_QUALITY: Final[int] = 92
