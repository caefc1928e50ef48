"""Tests for SelectionStateMachine transitions and empty-branch handling."""

from __future__ import annotations

import pytest

from herodex.catalog.loader import parse_catalog
from herodex.config import FAVORITES_INDEX, NONE_INDEX
from herodex.core.favorites import FavoritesStore
from herodex.core.selection import SelectionStateMachine, initial_coordinate
from herodex.domain.models import Catalog, Coordinate


@pytest.fixture()
def sparse_catalog() -> Catalog:
    return parse_catalog(
        {
            "categories": [
                {"name": "Hollow", "subcategories": [{"name": "Nothing yet", "items": []}]},
                {"name": "Bare", "subcategories": []},
                {
                    "name": "Late",
                    "subcategories": [
                        {"name": "Empty", "items": []},
                        {"name": "Full", "items": [{"name": "Only"}]},
                    ],
                },
            ]
        }
    )


def pin(store: FavoritesStore, catalog: Catalog, *coordinate: int) -> None:
    target = Coordinate(*coordinate)
    store.toggle_pin(target, catalog.item_at(target))


class TestInitialState:
    def test_starts_at_first_item(self, catalog):
        machine = SelectionStateMachine(catalog)
        assert machine.coordinate == Coordinate(0, 0, 0)
        assert machine.current_item().name == "Aria"

    def test_empty_first_subcategory_has_no_item(self, sparse_catalog):
        assert initial_coordinate(sparse_catalog) == Coordinate(0, 0, NONE_INDEX)

    def test_empty_catalog(self):
        machine = SelectionStateMachine(Catalog())
        assert machine.coordinate == Coordinate.none()
        assert machine.current_items() == ()
        assert machine.current_item() is None
        assert machine.current_category() is None


class TestSelectCategory:
    def test_same_category_is_noop(self, catalog):
        machine = SelectionStateMachine(catalog)
        machine.select_item(2)
        assert machine.select_category(0) is False
        assert machine.coordinate == Coordinate(0, 0, 2)

    def test_resolves_first_subcategory_and_item(self, catalog):
        machine = SelectionStateMachine(catalog)
        assert machine.select_category(2) is True
        assert machine.coordinate == Coordinate(2, 0, 0)
        assert machine.current_item().name == "Wolf"

    def test_first_subcategory_empty_gives_none_item(self, sparse_catalog):
        machine = SelectionStateMachine(sparse_catalog)
        machine.select_category(2)
        assert machine.coordinate == Coordinate(2, 0, NONE_INDEX)
        assert machine.current_items() == ()

    def test_category_without_subcategories(self, sparse_catalog):
        machine = SelectionStateMachine(sparse_catalog)
        machine.select_category(1)
        assert machine.coordinate == Coordinate(1, NONE_INDEX, NONE_INDEX)
        assert machine.current_subcategory() is None
        assert machine.current_items() == ()
        assert machine.current_item() is None

    def test_out_of_range_category_reads_as_empty(self, catalog):
        machine = SelectionStateMachine(catalog)
        machine.select_category(42)
        assert machine.coordinate == Coordinate(42, NONE_INDEX, NONE_INDEX)
        assert machine.current_items() == ()

    def test_favorites_when_empty(self, catalog):
        machine = SelectionStateMachine(catalog, FavoritesStore())
        machine.select_category(FAVORITES_INDEX)
        assert machine.in_favorites
        assert machine.coordinate == Coordinate(FAVORITES_INDEX, NONE_INDEX, NONE_INDEX)
        assert machine.current_items() == ()

    def test_favorites_lists_pinned_snapshots(self, catalog):
        store = FavoritesStore()
        pin(store, catalog, 1, 0, 0)
        pin(store, catalog, 0, 0, 2)
        machine = SelectionStateMachine(catalog, store)

        machine.select_category(FAVORITES_INDEX)

        assert machine.coordinate == Coordinate(FAVORITES_INDEX, 0, 0)
        assert [item.name for item in machine.current_items()] == ["Thalia", "Cyra"]
        assert machine.current_subcategory() is None


class TestSelectSubcategoryAndItem:
    def test_subcategory_with_items(self, catalog):
        machine = SelectionStateMachine(catalog)
        machine.select_item(1)
        assert machine.select_subcategory(1) is True
        assert machine.coordinate == Coordinate(0, 1, 0)
        assert machine.current_item().name == "Dax"

    def test_empty_subcategory(self, catalog):
        machine = SelectionStateMachine(catalog)
        machine.select_category(1)
        machine.select_subcategory(1)
        assert machine.coordinate == Coordinate(1, 1, NONE_INDEX)
        assert machine.current_items() == ()
        assert machine.current_item() is None

    def test_same_subcategory_is_noop(self, catalog):
        machine = SelectionStateMachine(catalog)
        machine.select_item(2)
        assert machine.select_subcategory(0) is False
        assert machine.coordinate.item == 2

    def test_select_item(self, catalog):
        machine = SelectionStateMachine(catalog)
        assert machine.select_item(2) is True
        assert machine.current_item().name == "Cyra"
        assert machine.select_item(2) is False

    def test_other_favorites_subcategory_is_empty(self, catalog):
        store = FavoritesStore()
        pin(store, catalog, 0, 0, 0)
        machine = SelectionStateMachine(catalog, store)
        machine.select_category(FAVORITES_INDEX)
        machine.select_subcategory(1)
        assert machine.coordinate == Coordinate(FAVORITES_INDEX, 1, NONE_INDEX)
        assert machine.current_items() == ()


def test_every_reachable_coordinate_reads_safely(catalog, sparse_catalog):
    for source in (catalog, sparse_catalog):
        machine = SelectionStateMachine(source, FavoritesStore())
        for c in [*range(len(source.categories) + 1), FAVORITES_INDEX]:
            machine.select_category(c)
            for s in range(-1, 4):
                machine.select_subcategory(s)
                items = machine.current_items()
                if machine.coordinate.subcategory < 0:
                    assert items == ()
                machine.current_item()


class TestSignalsAndJumps:
    def test_changed_reports_new_and_old(self, catalog):
        machine = SelectionStateMachine(catalog)
        seen = []
        machine.changed.connect(lambda new, old: seen.append((new, old)))

        machine.select_category(1)
        machine.select_category(1)

        assert seen == [(Coordinate(1, 0, 0), Coordinate(0, 0, 0))]

    def test_apply_and_reset(self, catalog):
        machine = SelectionStateMachine(catalog)
        assert machine.apply(Coordinate(2, 1, 3)) is True
        assert machine.current_item().name == "Black"
        assert machine.apply(Coordinate(2, 1, 3)) is False
        assert machine.reset() is True
        assert machine.coordinate == Coordinate(0, 0, 0)


class TestStep:
    @pytest.fixture()
    def machine(self, catalog):
        machine = SelectionStateMachine(catalog)
        machine.apply(Coordinate(2, 1, 0))
        return machine

    def test_grid_moves(self, machine):
        assert machine.step("down") is True
        assert machine.coordinate.item == 5
        assert machine.step("right") is True
        assert machine.coordinate.item == 6
        assert machine.step("up") is True
        assert machine.coordinate.item == 1
        assert machine.step("left") is True
        assert machine.coordinate.item == 0

    def test_moves_off_the_list_are_ignored(self, machine):
        assert machine.step("left") is False
        assert machine.step("up") is False
        machine.select_item(6)
        assert machine.step("right") is False
        assert machine.step("down") is False
        assert machine.coordinate.item == 6

    def test_custom_columns(self, machine):
        machine.step("down", columns=3)
        assert machine.coordinate.item == 3

    def test_nothing_selected(self, catalog):
        machine = SelectionStateMachine(catalog)
        machine.apply(Coordinate(1, 1, NONE_INDEX))
        assert machine.step("right") is False

    def test_unknown_direction(self, machine):
        with pytest.raises(ValueError):
            machine.step("sideways")


class TestClamp:
    def test_shrinking_favorites_clamps_to_last(self, catalog):
        store = FavoritesStore()
        for coordinate in ((0, 0, 0), (0, 0, 1), (0, 0, 2)):
            pin(store, catalog, *coordinate)
        machine = SelectionStateMachine(catalog, store)
        machine.select_category(FAVORITES_INDEX)
        machine.select_item(2)

        pin(store, catalog, 0, 0, 2)
        assert machine.clamp() is True

        assert machine.coordinate == Coordinate(FAVORITES_INDEX, 0, 1)
        assert machine.current_item().name == "Borin"

    def test_emptied_favorites(self, catalog):
        store = FavoritesStore()
        pin(store, catalog, 0, 0, 0)
        machine = SelectionStateMachine(catalog, store)
        machine.select_category(FAVORITES_INDEX)

        pin(store, catalog, 0, 0, 0)
        machine.clamp()

        assert machine.coordinate == Coordinate(FAVORITES_INDEX, NONE_INDEX, NONE_INDEX)

    def test_catalog_positions_are_untouched(self, catalog):
        machine = SelectionStateMachine(catalog)
        machine.select_item(2)
        assert machine.clamp() is False
        assert machine.coordinate == Coordinate(0, 0, 2)
