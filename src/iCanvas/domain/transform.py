"""Immutable transform state and the reducer that evolves it.

Every geometric and color parameter of the view lives in a single
:class:`TransformState`.  Interactive controls never mutate the state; they
describe what happened with an action object and :func:`reduce` returns the
next state.  Keeping the reducer pure means the whole transform model can be
exercised without a rendering surface.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Union

from ..config import (
    COLOR_DEFAULTS,
    COLOR_DOMAINS,
    FLIP_SIGNS,
    MIN_SCALE,
    ROTATION_QUADRANTS,
)
from ..errors import UnknownAdjustmentError

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransformState:
    """Geometric and color parameters of the current view."""

    scale: float = 1.0
    rotation: int = 0
    flip_horizontal: int = 1
    flip_vertical: int = 1
    brightness: float = COLOR_DEFAULTS["brightness"]
    saturation: float = COLOR_DEFAULTS["saturation"]
    contrast: float = COLOR_DEFAULTS["contrast"]
    hue: float = COLOR_DEFAULTS["hue"]

    def __post_init__(self) -> None:
        if self.rotation not in ROTATION_QUADRANTS:
            raise ValueError(f"rotation must be one of {ROTATION_QUADRANTS}, got {self.rotation!r}")
        if self.flip_horizontal not in FLIP_SIGNS or self.flip_vertical not in FLIP_SIGNS:
            raise ValueError("flip multipliers must be +1 or -1")
        if not math.isfinite(self.scale) or self.scale <= 0.0:
            raise ValueError(f"scale must be a positive finite number, got {self.scale!r}")

    @property
    def is_rotated(self) -> bool:
        """True when width and height are swapped on screen."""
        return self.rotation in (90, 270)

    def color_values(self) -> dict[str, float]:
        return {
            "brightness": self.brightness,
            "saturation": self.saturation,
            "contrast": self.contrast,
            "hue": self.hue,
        }

    def geometry_equals(self, other: "TransformState") -> bool:
        return (
            self.scale == other.scale
            and self.rotation == other.rotation
            and self.flip_horizontal == other.flip_horizontal
            and self.flip_vertical == other.flip_vertical
        )


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Rotate:
    """Advance the rotation by one quarter turn clockwise."""


@dataclass(frozen=True)
class FlipHorizontal:
    """Mirror about the vertical axis."""


@dataclass(frozen=True)
class FlipVertical:
    """Mirror about the horizontal axis."""


@dataclass(frozen=True)
class SetScale:
    value: float


@dataclass(frozen=True)
class Zoom:
    """Multiply the current scale by ``factor``."""

    factor: float


@dataclass(frozen=True)
class SetColor:
    name: str
    value: float


@dataclass(frozen=True)
class ResetGeometry:
    """Identity rotation and flips at ``scale``; color is kept."""

    scale: float


Action = Union[Rotate, FlipHorizontal, FlipVertical, SetScale, Zoom, SetColor, ResetGeometry]


# ---------------------------------------------------------------------------
# Reducer
# ---------------------------------------------------------------------------


def clamp_scale(value: float) -> float:
    """Clamp a requested scale into the valid range.

    Non-positive requests collapse to :data:`MIN_SCALE`; there is no upper
    bound.  Callers must filter non-finite values first.
    """
    return max(MIN_SCALE, float(value))


def clamp_color(name: str, value: float) -> float:
    """Clamp *value* into the domain of the color parameter *name*."""
    try:
        low, high = COLOR_DOMAINS[name]
    except KeyError:
        raise UnknownAdjustmentError(f"unknown color adjustment: {name!r}") from None
    return max(low, min(high, float(value)))


def _with_scale(state: TransformState, requested: float) -> TransformState:
    if not math.isfinite(requested):
        _LOGGER.debug("Ignoring non-finite scale request %r", requested)
        return state
    scale = clamp_scale(requested)
    if scale == state.scale:
        return state
    return replace(state, scale=scale)


def reduce(state: TransformState, action: Action) -> TransformState:
    """Return the state that results from applying *action* to *state*.

    The input is returned unchanged (same object) when the action has no
    effect, which lets callers detect dirtiness with an identity check.
    """

    if isinstance(action, Rotate):
        return replace(state, rotation=(state.rotation + 90) % 360)
    if isinstance(action, FlipHorizontal):
        return replace(state, flip_horizontal=-state.flip_horizontal)
    if isinstance(action, FlipVertical):
        return replace(state, flip_vertical=-state.flip_vertical)
    if isinstance(action, SetScale):
        return _with_scale(state, float(action.value))
    if isinstance(action, Zoom):
        return _with_scale(state, state.scale * float(action.factor))
    if isinstance(action, SetColor):
        value = float(action.value)
        if not math.isfinite(value):
            # Still validate the name so typos surface immediately
            clamp_color(action.name, 0.0)
            return state
        clamped = clamp_color(action.name, value)
        if getattr(state, action.name) == clamped:
            return state
        return replace(state, **{action.name: clamped})
    if isinstance(action, ResetGeometry):
        scale = float(action.scale)
        reset = replace(
            state,
            scale=clamp_scale(scale) if math.isfinite(scale) else state.scale,
            rotation=0,
            flip_horizontal=1,
            flip_vertical=1,
        )
        return state if reset == state else reset
    raise TypeError(f"unsupported action: {action!r}")
