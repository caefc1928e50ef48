"""Schema for the top-level shape of the catalog manifest.

Only the outer shape is enforced here.  Nested entries are normalised by the
loader instead of rejected, so a single malformed item never hides the rest of
the catalog.
"""

from __future__ import annotations

from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from ..errors import CatalogLoadError

CATALOG_SCHEMA: dict[str, Any] = {
    "$id": "herodex/catalog.schema.json",
    "type": "object",
    "required": ["categories"],
    "properties": {
        "categories": {"type": "array"},
    },
    "additionalProperties": True,
}

_validator = Draft202012Validator(CATALOG_SCHEMA)


def validate_catalog_document(document: Any) -> None:
    """Raise :class:`CatalogLoadError` if *document* lacks a ``categories`` list."""

    try:
        _validator.validate(document)
    except ValidationError as exc:
        location = "/".join(str(part) for part in exc.absolute_path) or "<root>"
        raise CatalogLoadError(f"Invalid catalog manifest at {location}: {exc.message}") from exc


__all__ = ["CATALOG_SCHEMA", "validate_catalog_document"]
