"""Pure data types of the viewer: bitmap, transform state, selection."""

from .bitmap import SourceBitmap
from .selection import NormalisedRect, SelectionRect
from .transform import (
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

__all__ = [
    "FlipHorizontal",
    "FlipVertical",
    "NormalisedRect",
    "ResetGeometry",
    "Rotate",
    "SelectionRect",
    "SetColor",
    "SetScale",
    "SourceBitmap",
    "TransformState",
    "Zoom",
    "reduce",
]
