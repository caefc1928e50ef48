"""Turn the manifest document into the immutable catalog model."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from ..config import DEFAULT_MANIFEST_PATH
from ..domain.models import Catalog, Category, Item, Subcategory
from ..errors import CatalogLoadError, JsonIOError
from ..utils.jsonio import read_json
from ..utils.logging import get_logger
from .schema import validate_catalog_document

LOGGER = get_logger(__name__)


def manifest_location(site_root: Path, manifest_path: str = DEFAULT_MANIFEST_PATH) -> Path:
    """Return the absolute manifest path for a site rooted at *site_root*."""

    return site_root / manifest_path


def load_catalog(site_root: Path, manifest_path: str = DEFAULT_MANIFEST_PATH) -> Catalog:
    """Read and parse the manifest of the site at *site_root*.

    Raises :class:`CatalogLoadError` when the file cannot be read, is not
    JSON, or has no ``categories`` list.
    """

    path = manifest_location(site_root, manifest_path)
    try:
        document = read_json(path)
    except JsonIOError as exc:
        raise CatalogLoadError(f"Failed to load manifest: {exc}") from exc
    catalog = parse_catalog(document)
    LOGGER.info(
        "Loaded %d categories and %d items from %s",
        len(catalog.categories),
        catalog.item_count,
        path,
    )
    return catalog


def parse_catalog(document: Any) -> Catalog:
    """Build a :class:`Catalog` from an already decoded manifest document."""

    validate_catalog_document(document)
    categories = tuple(
        _parse_category(entry, index) for index, entry in enumerate(document["categories"])
    )
    return Catalog(categories=categories)


def _parse_category(entry: Any, index: int) -> Category:
    if not isinstance(entry, dict):
        LOGGER.warning("Category #%d is not an object; treating it as empty", index)
        return Category(name="")
    return Category(
        name=_text(entry.get("name")),
        subcategories=tuple(
            _parse_subcategory(sub)
            for sub in _children(entry, "subcategories", f"category #{index}")
        ),
    )


def _parse_subcategory(entry: Any) -> Subcategory:
    if not isinstance(entry, dict):
        LOGGER.warning("Skipping malformed subcategory entry %r", entry)
        return Subcategory(name="")
    name = _text(entry.get("name"))
    return Subcategory(
        name=name,
        thumbnail=_optional_ref(entry.get("thumbnail")),
        items=tuple(_parse_item(item) for item in _children(entry, "items", f"subcategory {name!r}")),
    )


def _parse_item(entry: Any) -> Item:
    if not isinstance(entry, dict):
        LOGGER.warning("Skipping malformed item entry %r", entry)
        return Item(name="")
    info = entry.get("info")
    return Item(
        name=_text(entry.get("name")),
        avatar=_optional_ref(entry.get("avatar")),
        image=_optional_ref(entry.get("image")),
        info=info if isinstance(info, str) else None,
    )


def _children(entry: dict[str, Any], key: str, owner: str) -> list[Any]:
    value = entry.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        LOGGER.warning("%s has a non-list %r field; treating it as empty", owner, key)
        return []
    return value


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _optional_ref(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


__all__ = ["load_catalog", "manifest_location", "parse_catalog"]
