"""Settings file management with validation and change notifications."""

from __future__ import annotations

import os
import sys
from copy import deepcopy
from pathlib import Path
from typing import Any

from jsonschema.exceptions import ValidationError

from ..config import APP_NAME
from ..errors import JsonIOError, SettingsLoadError, SettingsValidationError
from ..events.signal import Signal
from ..utils.jsonio import read_json, write_json
from ..utils.logging import get_logger
from .schema import DEFAULT_SETTINGS, merge_with_defaults

LOGGER = get_logger(__name__)

BACKUP_SUFFIX = ".bak"


def default_settings_path() -> Path:
    """Return the default settings.json location for the current platform."""

    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / APP_NAME / "settings.json"
        return Path.home() / "AppData" / "Roaming" / APP_NAME / "settings.json"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME / "settings.json"
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / APP_NAME / "settings.json"
    return Path.home() / ".config" / APP_NAME / "settings.json"


class SettingsManager:
    """Load, validate and persist user settings, including the favorites slot.

    ``settings_changed`` is emitted with ``(key, value)`` after every
    successful :meth:`set`.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path
        self._data: dict[str, Any] = deepcopy(DEFAULT_SETTINGS)
        self._read_only = False
        self.settings_changed = Signal()

    @property
    def path(self) -> Path:
        return self._path or default_settings_path()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def load(self) -> None:
        """Load the settings JSON from disk, creating defaults if missing."""

        path = self.path
        self._path = path
        if path.exists():
            try:
                payload = read_json(path)
            except JsonIOError as exc:
                raise SettingsLoadError(str(exc)) from exc
            if not isinstance(payload, dict):
                raise SettingsLoadError(f"Settings file {path} does not hold an object")
        else:
            payload = None
        try:
            self._data = merge_with_defaults(payload)
        except ValidationError as exc:
            raise SettingsValidationError(exc.message) from exc
        self._write()

    def use_defaults(self) -> None:
        """Fall back to the defaults after :meth:`load` failed.

        The unreadable file is moved to ``settings.json.bak`` first, so the
        next write cannot destroy what the user had in it.  When it cannot be
        moved, nothing is written back for the rest of the session.
        """

        self._data = deepcopy(DEFAULT_SETTINGS)
        path = self.path
        self._path = path
        if not path.exists():
            return
        backup = path.with_name(path.name + BACKUP_SUFFIX)
        try:
            path.replace(backup)
        except OSError as exc:
            LOGGER.warning("Could not back up %s (%s); settings will not be saved", path, exc)
            self._read_only = True
        else:
            LOGGER.warning("Moved unreadable settings %s to %s", path, backup)

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return the value for *key*, supporting dotted access for nested keys."""

        target: Any = self._data
        for part in key.split("."):
            if not isinstance(target, dict) or part not in target:
                return default
            target = target[part]
        return deepcopy(target)

    def set(self, key: str, value: Any) -> None:
        """Update *key* with *value* and persist the change."""

        if isinstance(value, Path):
            value = str(value)
        candidate = deepcopy(self._data)
        parts = key.split(".")
        target: dict[str, Any] = candidate
        for part in parts[:-1]:
            branch = target.get(part)
            if not isinstance(branch, dict):
                branch = {}
                target[part] = branch
            target = branch
        target[parts[-1]] = value
        try:
            self._data = merge_with_defaults(candidate)
        except ValidationError as exc:
            raise SettingsValidationError(exc.message) from exc
        self._write()
        self.settings_changed.emit(key, value)

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _write(self) -> None:
        if self._read_only:
            return
        path = self.path
        self._path = path
        try:
            write_json(path, self._data)
        except JsonIOError as exc:
            LOGGER.warning("Could not persist settings to %s: %s", path, exc)


__all__ = ["SettingsManager", "default_settings_path"]
