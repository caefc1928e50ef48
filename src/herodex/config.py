"""Default configuration values for HeroDex."""

from __future__ import annotations

from typing import Final

APP_NAME: Final[str] = "HeroDex"

# The catalog builder writes the manifest next to the content it describes, so
# both the builder and the loader agree on this site-relative location.
DATABASE_DIR_NAME: Final[str] = "database"
MANIFEST_FILE_NAME: Final[str] = "manifest.json"
DEFAULT_MANIFEST_PATH: Final[str] = f"{DATABASE_DIR_NAME}/{MANIFEST_FILE_NAME}"

# File stems recognised inside subcategory and item directories.
THUMBNAIL_STEM: Final[str] = "thumbnail"
AVATAR_STEM: Final[str] = "avatar"
IMAGE_STEM: Final[str] = "image"
INFO_STEM: Final[str] = "info"

# ---------------------------------------------------------------------------
# Coordinate sentinels
# ---------------------------------------------------------------------------

# ``NONE_INDEX`` marks a level with nothing to select (empty subcategory or
# item list).  ``FAVORITES_INDEX`` is only valid as a category index and
# addresses the virtual Favorites category.  Both are negative so they can
# never collide with a real position and survive a trip through the URL
# fragment unchanged.
NONE_INDEX: Final[int] = -1
FAVORITES_INDEX: Final[int] = -2

# ---------------------------------------------------------------------------
# Interaction constants
# ---------------------------------------------------------------------------

# Arrow-up/down moves by a full row of the item grid.
GRID_COLUMNS: Final[int] = 5
ROUTE_PREFIX: Final[str] = "#"
ROUTE_SEPARATOR: Final[str] = "/"

# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------

FAVORITES_SLOT: Final[str] = "favorites"
SETTINGS_SCHEMA_ID: Final[str] = "herodex/settings@1"

# ---------------------------------------------------------------------------
# Image loading
# ---------------------------------------------------------------------------

IMAGE_LOADER_WORKERS: Final[int] = 2
# ``0`` keeps every decoded image for the lifetime of the process.
IMAGE_CACHE_MAX_ENTRIES: Final[int] = 0
