"""NumPy vectorised color filter primitives.

Each primitive follows the CSS Filter Effects definition of the matching
shorthand (``brightness()``, ``saturate()``, ``contrast()``,
``hue-rotate()``) and operates on an ``(..., 3)`` float array of normalised
RGB intensities.  Every primitive clamps its result to ``[0, 1]`` so chaining
them matches a sequence of separate filter passes.
"""

from __future__ import annotations

import math

import numpy as np

# Rec. 709 luma weights used by the saturate and hue-rotate matrices.
_LUMA_R = 0.213
_LUMA_G = 0.715
_LUMA_B = 0.072


def _np_clamp01(arr: np.ndarray) -> np.ndarray:
    """Clamp array values to [0.0, 1.0]."""
    return np.clip(arr, 0.0, 1.0)


def _apply_matrix(rgb: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    return _np_clamp01(rgb @ matrix.T.astype(np.float32))


def brightness(rgb: np.ndarray, amount: float) -> np.ndarray:
    """Scale every channel by ``amount`` (1.0 is identity)."""
    return _np_clamp01(rgb * np.float32(amount))


def contrast(rgb: np.ndarray, amount: float) -> np.ndarray:
    """Stretch channels away from (or towards) mid grey."""
    return _np_clamp01((rgb - 0.5) * np.float32(amount) + 0.5)


def saturation_matrix(amount: float) -> np.ndarray:
    s = float(amount)
    return np.array(
        [
            [_LUMA_R + (1 - _LUMA_R) * s, _LUMA_G - _LUMA_G * s, _LUMA_B - _LUMA_B * s],
            [_LUMA_R - _LUMA_R * s, _LUMA_G + (1 - _LUMA_G) * s, _LUMA_B - _LUMA_B * s],
            [_LUMA_R - _LUMA_R * s, _LUMA_G - _LUMA_G * s, _LUMA_B + (1 - _LUMA_B) * s],
        ],
        dtype=np.float64,
    )


def hue_rotation_matrix(degrees: float) -> np.ndarray:
    angle = math.radians(float(degrees))
    c = math.cos(angle)
    s = math.sin(angle)
    return np.array(
        [
            [
                0.213 + c * 0.787 - s * 0.213,
                0.715 - c * 0.715 - s * 0.715,
                0.072 - c * 0.072 + s * 0.928,
            ],
            [
                0.213 - c * 0.213 + s * 0.143,
                0.715 + c * 0.285 + s * 0.140,
                0.072 - c * 0.072 - s * 0.283,
            ],
            [
                0.213 - c * 0.213 - s * 0.787,
                0.715 - c * 0.715 + s * 0.715,
                0.072 + c * 0.928 + s * 0.072,
            ],
        ],
        dtype=np.float64,
    )


def saturate(rgb: np.ndarray, amount: float) -> np.ndarray:
    """Blend towards (``< 1``) or away from (``> 1``) the luma grey."""
    return _apply_matrix(rgb, saturation_matrix(amount))


def hue_rotate(rgb: np.ndarray, degrees: float) -> np.ndarray:
    """Rotate hues by *degrees* around the luma axis."""
    return _apply_matrix(rgb, hue_rotation_matrix(degrees))


def apply_chain(
    rgb: np.ndarray,
    *,
    brightness_amount: float,
    saturation_amount: float,
    contrast_amount: float,
    hue_degrees: float,
) -> np.ndarray:
    """Run the full chain in its fixed order: brightness, saturate, contrast, hue.

    The passes clamp between steps, so they do not commute; reordering them
    changes the output.
    """

    result = _np_clamp01(rgb.astype(np.float32, copy=False))
    if brightness_amount != 1.0:
        result = brightness(result, brightness_amount)
    if saturation_amount != 1.0:
        result = saturate(result, saturation_amount)
    if contrast_amount != 1.0:
        result = contrast(result, contrast_amount)
    if hue_degrees != 0.0:
        result = hue_rotate(result, hue_degrees)
    return result
