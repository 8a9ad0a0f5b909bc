"""iCanvas: interactive raster transform and crop engine."""

__version__ = "0.1.0"
