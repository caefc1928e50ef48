"""JSON read/write helpers with atomic replacement."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from ..errors import JsonIOError


def read_json(path: Path) -> Any:
    """Return the decoded JSON document stored at *path*.

    Raises :class:`JsonIOError` when the file is missing, unreadable or not
    valid JSON so callers only need to handle a single error type.
    """

    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except FileNotFoundError as exc:
        raise JsonIOError(f"File not found: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise JsonIOError(f"Could not read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise JsonIOError(f"Invalid JSON in {path}: {exc}") from exc


def write_json(path: Path, payload: Any, *, indent: int = 2) -> None:
    """Write *payload* to *path* atomically.

    The document is written to a sibling temporary file first and then moved
    into place so readers never observe a half-written file.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=indent, ensure_ascii=False)
            handle.write("\n")
        os.replace(tmp_path, path)
    except (OSError, TypeError, ValueError) as exc:
        tmp_path.unlink(missing_ok=True)
        raise JsonIOError(f"Could not write {path}: {exc}") from exc


__all__ = ["read_json", "write_json"]
