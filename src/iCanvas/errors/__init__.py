"""Custom exception hierarchy for iCanvas."""

from __future__ import annotations


class ICanvasError(Exception):
    """Base class for all custom errors raised by iCanvas."""


# --- 3-layer hierarchy ---

class DomainError(ICanvasError):
    """Base class for domain-level errors."""


class InfrastructureError(ICanvasError):
    """Base class for infrastructure-level errors."""


# --- Domain errors ---

class InvalidGeometryError(DomainError):
    """Raised when a bitmap, surface or container has a non-positive dimension.

    The operation that hit this is rejected and the caller keeps its previous
    state; the value is never allowed to turn into ``inf`` or ``nan``.
    """


class UnknownAdjustmentError(DomainError):
    """Raised when a color adjustment name is not recognised."""


# --- Infrastructure errors ---

class DecodeError(InfrastructureError):
    """Raised when uploaded bytes cannot be decoded into an image."""


class ExportError(InfrastructureError):
    """Raised when a bitmap cannot be encoded or written."""


# --- Settings ---

class SettingsError(ICanvasError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""
