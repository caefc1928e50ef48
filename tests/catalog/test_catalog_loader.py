"""Tests for manifest loading, validation and normalisation."""

from __future__ import annotations

import json

import pytest

from herodex.catalog.loader import load_catalog, manifest_location, parse_catalog
from herodex.domain.models import Item
from herodex.errors import CatalogLoadError


def test_load_site(site):
    catalog = load_catalog(site)

    assert [category.name for category in catalog.categories] == ["Heroes", "NPCs", "Monsters"]
    assert catalog.item_count == 14
    thalia = catalog.categories[1].subcategories[0].items[0]
    assert thalia == Item(
        name="Thalia",
        avatar="database/NPCs/Female NPCs/Thalia/avatar.png",
        image="database/NPCs/Female NPCs/Thalia/image.png",
        info="A healer.",
    )


def test_custom_manifest_path(tmp_path, catalog_document):
    (tmp_path / "data.json").write_text(json.dumps(catalog_document), encoding="utf-8")

    catalog = load_catalog(tmp_path, "data.json")

    assert len(catalog.categories) == 3
    assert manifest_location(tmp_path, "data.json") == tmp_path / "data.json"


def test_missing_manifest_is_fatal(tmp_path):
    with pytest.raises(CatalogLoadError):
        load_catalog(tmp_path)


def test_invalid_json_is_fatal(site):
    (site / "database" / "manifest.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogLoadError):
        load_catalog(site)


@pytest.mark.parametrize(
    "document",
    [{}, {"categories": "Heroes"}, {"categories": None}, [], "categories", None],
)
def test_bad_top_level_shape_is_fatal(document):
    with pytest.raises(CatalogLoadError):
        parse_catalog(document)


def test_optional_fields_are_normalised():
    catalog = parse_catalog(
        {
            "categories": [
                {
                    "name": "Only",
                    "subcategories": [
                        {
                            "name": "Sub",
                            "thumbnail": "",
                            "items": [
                                {"name": "Bare"},
                                {"name": "Odd", "avatar": 7, "info": ["not", "text"]},
                                {"avatar": "x.png"},
                                "junk",
                            ],
                        },
                        {"name": "No items key"},
                        {"name": "Bad items", "items": {"a": 1}},
                    ],
                },
                {"name": "No subs"},
                "junk",
            ]
        }
    )

    only, no_subs, junk = catalog.categories
    sub, missing, bad = only.subcategories
    assert sub.thumbnail is None
    assert sub.items[0] == Item(name="Bare")
    assert sub.items[1] == Item(name="Odd")
    assert sub.items[2] == Item(name="", avatar="x.png")
    assert sub.items[3] == Item(name="")
    assert missing.items == ()
    assert bad.items == ()
    assert no_subs.subcategories == ()
    assert junk.name == ""


def test_empty_catalog_is_valid():
    assert parse_catalog({"categories": []}).categories == ()
