"""Application-wide context shared by the view model and the CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .core.favorites import FavoritesStore
from .errors import SettingsError
from .errors.handler import ErrorHandler
from .events.bus import EventBus
from .events.dispatch import Dispatcher, create_dispatcher
from .infrastructure.services.image_cache import FileImageLoader, ImageCache
from .settings.manager import SettingsManager
from .utils.logging import get_logger

LOGGER = get_logger(__name__)


def _create_settings_manager(path: Optional[Path] = None) -> SettingsManager:
    manager = SettingsManager(path)
    try:
        manager.load()
    except SettingsError as exc:
        # A damaged settings file never keeps the catalog from opening.
        LOGGER.warning("Ignoring unreadable settings at %s: %s", manager.path, exc)
        manager.use_defaults()
    return manager


@dataclass
class AppContext:
    """Owns the long-lived, catalog-independent application state.

    Create it on the thread that drives the UI: ``dispatcher`` delivers image
    results to that thread.
    """

    settings: SettingsManager = field(default_factory=_create_settings_manager)
    event_bus: EventBus = field(default_factory=EventBus)
    dispatcher: Dispatcher = field(default_factory=create_dispatcher)
    favorites: FavoritesStore = field(init=False)
    error_handler: ErrorHandler = field(init=False)

    def __post_init__(self) -> None:
        self.favorites = FavoritesStore(self.settings)
        restored = self.favorites.restore()
        if restored:
            LOGGER.info("Restored %d favorites", restored)
        self.error_handler = ErrorHandler(get_logger("errors"), self.event_bus)

    @classmethod
    def from_settings_path(cls, path: Optional[Path]) -> "AppContext":
        return cls(settings=_create_settings_manager(path))

    def resolve_site_root(self, site_root: Optional[Path] = None) -> Path:
        """Return *site_root*, else the configured one, else the working directory."""

        if site_root is not None:
            return site_root
        configured = self.settings.get("site_root")
        if isinstance(configured, str) and configured:
            return Path(configured).expanduser()
        return Path.cwd()

    def create_image_cache(self, site_root: Path) -> ImageCache:
        return ImageCache(
            FileImageLoader(site_root),
            max_workers=int(self.settings.get("images.loader_workers", 2)),
            max_entries=int(self.settings.get("images.max_cached", 0)),
            event_bus=self.event_bus,
            dispatcher=self.dispatcher,
        )


__all__ = ["AppContext"]
