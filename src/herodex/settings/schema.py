"""Schema helpers for the application settings file."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import (
    DEFAULT_MANIFEST_PATH,
    FAVORITES_SLOT,
    GRID_COLUMNS,
    IMAGE_CACHE_MAX_ENTRIES,
    IMAGE_LOADER_WORKERS,
    SETTINGS_SCHEMA_ID,
)

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "herodex/settings.schema.json",
    "type": "object",
    "required": ["schema", "ui", "images", FAVORITES_SLOT],
    "properties": {
        "schema": {"const": SETTINGS_SCHEMA_ID},
        "site_root": {"type": ["string", "null"]},
        "manifest_path": {"type": "string", "minLength": 1},
        "ui": {
            "type": "object",
            "properties": {
                "keyboard_nav": {"type": "boolean"},
                "url_routing": {"type": "boolean"},
                "grid_columns": {"type": "integer", "minimum": 1},
            },
            "additionalProperties": True,
        },
        "images": {
            "type": "object",
            "properties": {
                "prefetch": {"type": "boolean"},
                "loader_workers": {"type": "integer", "minimum": 1},
                "max_cached": {"type": "integer", "minimum": 0},
            },
            "additionalProperties": True,
        },
        # The favorites slot is validated entry by entry when it is restored,
        # so a damaged pin never invalidates the rest of the settings.
        FAVORITES_SLOT: {"type": "array"},
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": SETTINGS_SCHEMA_ID,
    "site_root": None,
    "manifest_path": DEFAULT_MANIFEST_PATH,
    "ui": {
        "keyboard_nav": True,
        "url_routing": True,
        "grid_columns": GRID_COLUMNS,
    },
    "images": {
        "prefetch": True,
        "loader_workers": IMAGE_LOADER_WORKERS,
        "max_cached": IMAGE_CACHE_MAX_ENTRIES,
    },
    FAVORITES_SLOT: [],
}

_NESTED_SECTIONS = ("ui", "images")

_validator = Draft202012Validator(SETTINGS_SCHEMA)


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_SETTINGS)
    if data:
        for key, value in data.items():
            if key in _NESTED_SECTIONS and isinstance(value, dict):
                merged.setdefault(key, {}).update(value)
                continue
            if key in _NESTED_SECTIONS:
                continue
            if key == FAVORITES_SLOT and not isinstance(value, list):
                continue
            if key == "schema":
                continue
            merged[key] = value
    _validator.validate(merged)
    return merged


def validate_settings(data: dict[str, Any]) -> None:
    """Validate *data* against the settings schema."""

    _validator.validate(data)


__all__ = ["DEFAULT_SETTINGS", "SETTINGS_SCHEMA", "merge_with_defaults", "validate_settings"]
