"""Build the catalog manifest by walking the ``database/`` directory tree.

Layout::

    database/
        <Category>/
            <Subcategory>/
                thumbnail.png          (optional)
                <Item>/
                    avatar.jpg         (optional)
                    image.png          (optional)
                    info.txt           (optional)

Every reference in the generated document is relative to the site root
(``database/<Category>/<Subcategory>/...``) so the manifest can be served
as-is next to the files it points at.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Optional

from ..config import (
    AVATAR_STEM,
    DATABASE_DIR_NAME,
    IMAGE_STEM,
    INFO_STEM,
    MANIFEST_FILE_NAME,
    THUMBNAIL_STEM,
)
from ..errors import JsonIOError, ManifestBuildError
from ..utils.jsonio import write_json
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)


def _stem_pattern(stem: str) -> re.Pattern[str]:
    return re.compile(rf"^{re.escape(stem)}\.[^.]+$", re.IGNORECASE)


_THUMBNAIL_RE = _stem_pattern(THUMBNAIL_STEM)
_AVATAR_RE = _stem_pattern(AVATAR_STEM)
_IMAGE_RE = _stem_pattern(IMAGE_STEM)
_INFO_RE = _stem_pattern(INFO_STEM)


def _sort_key(name: str) -> tuple[str, str]:
    return (name.casefold(), name)


def _list_dirs(directory: Path) -> list[str]:
    names = [
        entry.name
        for entry in directory.iterdir()
        if entry.is_dir() and not entry.name.startswith(".")
    ]
    return sorted(names, key=_sort_key)


def _find_file(directory: Path, pattern: re.Pattern[str]) -> Optional[str]:
    matches = sorted(
        (entry.name for entry in directory.iterdir() if entry.is_file() and pattern.match(entry.name)),
        key=_sort_key,
    )
    return matches[0] if matches else None


def _ref(*parts: str) -> str:
    return "/".join((DATABASE_DIR_NAME, *parts))


def _read_info(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.warning("Could not read info file %s: %s", path, exc)
        return None


def _build_item(sub_path: Path, cat: str, sub: str, item: str) -> dict[str, Any]:
    item_path = sub_path / item
    avatar = _find_file(item_path, _AVATAR_RE)
    image = _find_file(item_path, _IMAGE_RE)
    info_file = _find_file(item_path, _INFO_RE)
    return {
        "name": item,
        "avatar": _ref(cat, sub, item, avatar) if avatar else None,
        "image": _ref(cat, sub, item, image) if image else None,
        "info": _read_info(item_path / info_file) if info_file else None,
    }


def build_manifest(database_root: Path) -> dict[str, Any]:
    """Return the manifest document describing *database_root*."""

    if not database_root.is_dir():
        raise ManifestBuildError(f"Database directory does not exist: {database_root}")

    categories: list[dict[str, Any]] = []
    for cat in _list_dirs(database_root):
        cat_path = database_root / cat
        subcategories: list[dict[str, Any]] = []
        for sub in _list_dirs(cat_path):
            sub_path = cat_path / sub
            thumb = _find_file(sub_path, _THUMBNAIL_RE)
            subcategories.append(
                {
                    "name": sub,
                    "thumbnail": _ref(cat, sub, thumb) if thumb else None,
                    "items": [_build_item(sub_path, cat, sub, item) for item in _list_dirs(sub_path)],
                }
            )
        categories.append({"name": cat, "subcategories": subcategories})
    return {"categories": categories}


def write_manifest(site_root: Path) -> Path:
    """Scan ``<site_root>/database`` and write ``manifest.json`` into it.

    *site_root* must already exist.  Its ``database`` directory is created when
    missing so a fresh checkout still produces an (empty) manifest;
    :func:`build_manifest` on its own never creates anything.
    """

    if not site_root.is_dir():
        raise ManifestBuildError(f"Site root is not a directory: {site_root}")
    database_root = site_root / DATABASE_DIR_NAME
    try:
        database_root.mkdir(exist_ok=True)
    except OSError as exc:
        raise ManifestBuildError(f"Cannot create {database_root}: {exc}") from exc
    manifest = build_manifest(database_root)
    out_path = database_root / MANIFEST_FILE_NAME
    try:
        write_json(out_path, manifest)
    except JsonIOError as exc:
        raise ManifestBuildError(str(exc)) from exc
    LOGGER.info("Generated manifest at %s", out_path)
    return out_path


__all__ = ["build_manifest", "write_manifest"]
