import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Ensure the project sources are importable without an editable install.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from herodex.catalog.loader import parse_catalog  # noqa: E402
from herodex.core.favorites import FavoritesStore  # noqa: E402
from herodex.settings.manager import SettingsManager  # noqa: E402


def _ref(*parts: str) -> str:
    return "/".join(("database", *parts))


def _item(cat: str, sub: str, name: str, info: str | None = None, images: bool = True) -> dict:
    return {
        "name": name,
        "avatar": _ref(cat, sub, name, "avatar.png") if images else None,
        "image": _ref(cat, sub, name, "image.png") if images else None,
        "info": info,
    }


def build_document() -> dict:
    """Three categories; ``(2, 1, 3)`` is valid and ``Dragons`` fills more than one grid row."""

    dragons = ["Red", "Blue", "Green", "Black", "White", "Gold", "Silver"]
    return {
        "categories": [
            {
                "name": "Heroes",
                "subcategories": [
                    {
                        "name": "Mages",
                        "thumbnail": _ref("Heroes", "Mages", "thumbnail.png"),
                        "items": [
                            _item("Heroes", "Mages", "Aria", "Master of fire."),
                            _item("Heroes", "Mages", "Borin", "Stone golem tamer."),
                            _item("Heroes", "Mages", "Cyra"),
                        ],
                    },
                    {
                        "name": "Rogues",
                        "thumbnail": None,
                        "items": [
                            _item("Heroes", "Rogues", "Dax"),
                            _item("Heroes", "Rogues", "Eve", images=False),
                        ],
                    },
                ],
            },
            {
                "name": "NPCs",
                "subcategories": [
                    {
                        "name": "Female NPCs",
                        "items": [_item("NPCs", "Female NPCs", "Thalia", "A healer.")],
                    },
                    {"name": "Quiet Corner", "items": []},
                ],
            },
            {
                "name": "Monsters",
                "subcategories": [
                    {"name": "Beasts", "items": [_item("Monsters", "Beasts", "Wolf")]},
                    {
                        "name": "Dragons",
                        "thumbnail": _ref("Monsters", "Dragons", "thumbnail.png"),
                        "items": [_item("Monsters", "Dragons", name) for name in dragons],
                    },
                ],
            },
        ]
    }


class ManualExecutor:
    """Executor stand-in that only runs submitted loads when told to."""

    def __init__(self) -> None:
        self.pending: list[tuple] = []

    def submit(self, fn, *args, **kwargs):
        self.pending.append((fn, args, kwargs))

    def refs(self) -> list[str]:
        return [args[0] for _fn, args, _kwargs in self.pending]

    def run(self, ref: str) -> None:
        for task in list(self.pending):
            fn, args, kwargs = task
            if args[0] == ref:
                self.pending.remove(task)
                fn(*args, **kwargs)
                return
        raise AssertionError(f"No pending load for {ref}")

    def run_all(self) -> None:
        while self.pending:
            fn, args, kwargs = self.pending.pop(0)
            fn(*args, **kwargs)

    def shutdown(self, wait: bool = True) -> None:
        self.pending.clear()


@pytest.fixture()
def manual_executor() -> ManualExecutor:
    return ManualExecutor()


@pytest.fixture()
def catalog_document() -> dict:
    return build_document()


@pytest.fixture()
def catalog(catalog_document):
    return parse_catalog(catalog_document)


@pytest.fixture()
def site(tmp_path: Path, catalog_document) -> Path:
    """A site root whose manifest describes :func:`build_document`."""

    root = tmp_path / "site"
    manifest = root / "database" / "manifest.json"
    manifest.parent.mkdir(parents=True)
    manifest.write_text(json.dumps(catalog_document), encoding="utf-8")
    return root


@pytest.fixture()
def settings_path(tmp_path: Path) -> Path:
    return tmp_path / "config" / "settings.json"


@pytest.fixture()
def settings(settings_path: Path) -> SettingsManager:
    manager = SettingsManager(settings_path)
    manager.load()
    return manager


@pytest.fixture()
def favorites(settings: SettingsManager) -> FavoritesStore:
    return FavoritesStore(settings)
