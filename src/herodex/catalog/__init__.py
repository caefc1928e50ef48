"""Catalog manifest loading, validation and generation."""

from .builder import build_manifest, write_manifest
from .loader import load_catalog, manifest_location, parse_catalog
from .schema import CATALOG_SCHEMA, validate_catalog_document

__all__ = [
    "CATALOG_SCHEMA",
    "build_manifest",
    "load_catalog",
    "manifest_location",
    "parse_catalog",
    "validate_catalog_document",
    "write_manifest",
]
