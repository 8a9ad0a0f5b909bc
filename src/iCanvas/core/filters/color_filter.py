"""Color filter chain applied to bitmaps before they are painted."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from PySide6.QtGui import QImage

from ...config import COLOR_DEFAULTS
from ...domain.transform import TransformState
from .numpy_executor import apply_chain


@dataclass(frozen=True)
class ColorFilter:
    """Percent/degree parameters of the chain, as shown on the sliders."""

    brightness: float = COLOR_DEFAULTS["brightness"]
    saturation: float = COLOR_DEFAULTS["saturation"]
    contrast: float = COLOR_DEFAULTS["contrast"]
    hue: float = COLOR_DEFAULTS["hue"]

    @classmethod
    def from_transform(cls, state: TransformState) -> "ColorFilter":
        return cls(
            brightness=state.brightness,
            saturation=state.saturation,
            contrast=state.contrast,
            hue=state.hue,
        )

    @classmethod
    def neutral(cls) -> "ColorFilter":
        return cls()

    def is_identity(self) -> bool:
        return (
            self.brightness == 100.0
            and self.saturation == 100.0
            and self.contrast == 100.0
            and self.hue % 360.0 == 0.0
        )

    def css(self) -> str:
        """Return the equivalent CSS ``filter`` string."""
        return (
            f"brightness({self.brightness:g}%) saturate({self.saturation:g}%) "
            f"contrast({self.contrast:g}%) hue-rotate({self.hue:g}deg)"
        )

    def apply_array(self, rgb: np.ndarray) -> np.ndarray:
        """Apply the chain to a normalised ``(..., 3)`` RGB array."""
        return apply_chain(
            rgb,
            brightness_amount=self.brightness / 100.0,
            saturation_amount=self.saturation / 100.0,
            contrast_amount=self.contrast / 100.0,
            hue_degrees=self.hue,
        )

    def apply(self, image: QImage) -> QImage:
        """Return a filtered copy of *image*; alpha is left untouched.

        The caller's image is never modified.  An identity filter returns the
        input unchanged.
        """

        if self.is_identity() or image.isNull():
            return image

        img = image.convertToFormat(QImage.Format.Format_RGBA8888)
        width = img.width()
        height = img.height()
        bytes_per_line = img.bytesPerLine()
        ptr = img.constBits()
        if hasattr(ptr, "setsize"):
            ptr.setsize(img.sizeInBytes())
        rows = np.frombuffer(ptr, dtype=np.uint8, count=bytes_per_line * height)
        arr = rows.reshape((height, bytes_per_line))[:, : width * 4].reshape((height, width, 4)).copy()

        rgb = arr[..., :3].astype(np.float32) / 255.0
        filtered = self.apply_array(rgb)
        arr[..., :3] = np.rint(filtered * 255.0).astype(np.uint8)

        result = QImage(arr.data, width, height, arr.strides[0], QImage.Format.Format_RGBA8888).copy()
        return result.convertToFormat(QImage.Format.Format_ARGB32)
