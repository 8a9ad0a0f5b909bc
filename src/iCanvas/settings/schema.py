"""Schema helpers for the settings file."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import (
    DEFAULT_CONTAINER_SIZE,
    DEFAULT_EXPORT_FORMAT,
    DEFAULT_JPEG_QUALITY,
    EXPORT_FORMATS,
    ZOOM_STEP,
)

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "iCanvas/settings.schema.json",
    "type": "object",
    "required": ["schema", "viewer", "export"],
    "properties": {
        "schema": {"const": "iCanvas/settings@1"},
        "viewer": {
            "type": "object",
            "properties": {
                "container_width": {"type": "integer", "minimum": 1},
                "container_height": {"type": "integer", "minimum": 1},
                "zoom_step": {"type": "number", "exclusiveMinimum": 1},
            },
            "additionalProperties": True,
        },
        "export": {
            "type": "object",
            "properties": {
                "format": {"type": "string", "enum": list(EXPORT_FORMATS)},
                "jpeg_quality": {"type": "integer", "minimum": 1, "maximum": 100},
            },
            "additionalProperties": True,
        },
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": "iCanvas/settings@1",
    "viewer": {
        "container_width": DEFAULT_CONTAINER_SIZE[0],
        "container_height": DEFAULT_CONTAINER_SIZE[1],
        "zoom_step": ZOOM_STEP,
    },
    "export": {
        "format": DEFAULT_EXPORT_FORMAT,
        "jpeg_quality": DEFAULT_JPEG_QUALITY,
    },
}

_validator = Draft202012Validator(SETTINGS_SCHEMA)


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_SETTINGS)
    if data:
        for key, value in data.items():
            if key in ("viewer", "export") and isinstance(value, dict):
                target = merged.setdefault(key, {})
                for sub_key, sub_value in value.items():
                    target[sub_key] = sub_value
                continue
            merged[key] = value
    _validator.validate(merged)
    return merged


def validate_settings(data: dict[str, Any]) -> None:
    """Validate *data* against the settings schema."""

    _validator.validate(data)


__all__ = ["DEFAULT_SETTINGS", "SETTINGS_SCHEMA", "merge_with_defaults", "validate_settings"]
