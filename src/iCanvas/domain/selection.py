"""Selection rectangles used by the crop interaction."""

from __future__ import annotations

import math
from dataclasses import dataclass


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class NormalisedRect:
    """Rectangle with a non-negative width and height."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def to_pixels(self) -> tuple[int, int, int, int]:
        """Return ``(x, y, width, height)`` with each edge snapped to a pixel."""

        left = _round_half_up(self.x)
        top = _round_half_up(self.y)
        right = _round_half_up(self.right)
        bottom = _round_half_up(self.bottom)
        return (left, top, right - left, bottom - top)

    def clipped(self, width: float, height: float) -> "NormalisedRect":
        """Return the intersection with ``[0, width] x [0, height]``."""

        left = max(0.0, min(float(width), self.x))
        top = max(0.0, min(float(height), self.y))
        right = max(0.0, min(float(width), self.right))
        bottom = max(0.0, min(float(height), self.bottom))
        return NormalisedRect(left, top, max(0.0, right - left), max(0.0, bottom - top))


@dataclass(frozen=True)
class SelectionRect:
    """Raw drag rectangle in surface pixels.

    ``width`` and ``height`` follow the drag direction and may be negative.
    """

    start_x: float
    start_y: float
    width: float = 0.0
    height: float = 0.0

    def with_end(self, x: float, y: float) -> "SelectionRect":
        return SelectionRect(self.start_x, self.start_y, x - self.start_x, y - self.start_y)

    def normalized(self) -> NormalisedRect:
        return NormalisedRect(
            min(self.start_x, self.start_x + self.width),
            min(self.start_y, self.start_y + self.height),
            abs(self.width),
            abs(self.height),
        )
