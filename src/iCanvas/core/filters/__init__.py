"""Color filter chain (brightness, saturate, contrast, hue-rotate)."""

from .color_filter import ColorFilter

__all__ = ["ColorFilter"]
