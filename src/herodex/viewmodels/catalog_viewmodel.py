"""CatalogViewModel: the state a renderer binds to, and the intents it sends back.

The view model owns every catalog-dependent component (selection machine,
search index, route codec, image cache and prefetcher) and keeps a set of
observable properties in sync with them.  All intents run synchronously on
the thread that owns the context; image loads complete later and are handed
back to that thread through the context's dispatcher before they touch any
property.
"""

from __future__ import annotations

from concurrent.futures import Future
from pathlib import Path
from typing import Optional

from herodex.appctx import AppContext
from herodex.catalog.loader import load_catalog
from herodex.config import DEFAULT_MANIFEST_PATH, FAVORITES_INDEX, GRID_COLUMNS, NONE_INDEX
from herodex.core.favorites import PinOutcome
from herodex.core.routing import Location, MemoryLocation, RouteCodec
from herodex.core.search import SearchIndex
from herodex.core.selection import SelectionStateMachine
from herodex.domain.models import Catalog, Coordinate, ItemMatch, SearchResult, SubcategoryMatch
from herodex.errors import CatalogLoadError, CatalogNotLoadedError
from herodex.errors.handler import ErrorSeverity
from herodex.events.catalog_events import (
    CatalogLoadedEvent,
    FavoriteToggledEvent,
    SelectionChangedEvent,
)
from herodex.events.signal import ObservableProperty, Signal
from herodex.infrastructure.services.image_cache import ImageCache, ImageResult
from herodex.infrastructure.services.prefetcher import Prefetcher, plan_prefetch
from herodex.utils.logging import get_logger
from herodex.viewmodels.base import BaseViewModel

LOAD_FAILED_MESSAGE = "Failed to load the database. Please refresh the page."

KEY_DIRECTIONS = {
    "ArrowLeft": "left",
    "ArrowRight": "right",
    "ArrowUp": "up",
    "ArrowDown": "down",
}


class CatalogViewModel(BaseViewModel):
    """Browse/search/pin view model over one loaded catalog."""

    def __init__(
        self,
        context: AppContext,
        *,
        location: Location | None = None,
        image_cache: ImageCache | None = None,
    ) -> None:
        super().__init__()
        self._context = context
        self._location: Location = location or MemoryLocation()
        self._image_cache = image_cache
        self._logger = get_logger(__name__)

        self._catalog: Optional[Catalog] = None
        self._selection: Optional[SelectionStateMachine] = None
        self._index: Optional[SearchIndex] = None
        self._codec: Optional[RouteCodec] = None
        self._prefetcher: Optional[Prefetcher] = None

        # Observable properties
        self.loading = ObservableProperty(False)
        self.error_message = ObservableProperty(None)
        self.coordinate = ObservableProperty(Coordinate.none())
        self.items = ObservableProperty(())
        self.current_item = ObservableProperty(None)
        self.is_pinned = ObservableProperty(False)
        self.favorites = ObservableProperty(())
        self.search_query = ObservableProperty("")
        self.search_results = ObservableProperty([])
        self.detail_image = ObservableProperty(None)

        # Signals
        self.catalog_loaded = Signal()
        self.load_failed = Signal()
        self.favorite_toggled = Signal()
        self.detail_image_ready = Signal()

        self.bind(context.favorites.changed, self._on_favorites_changed)
        self.favorites.value = context.favorites.items()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def catalog(self) -> Optional[Catalog]:
        return self._catalog

    @property
    def selection(self) -> SelectionStateMachine:
        if self._selection is None:
            raise CatalogNotLoadedError("No catalog has been loaded yet")
        return self._selection

    @property
    def image_cache(self) -> Optional[ImageCache]:
        return self._image_cache

    @property
    def prefetcher(self) -> Optional[Prefetcher]:
        return self._prefetcher

    @property
    def location(self) -> Location:
        return self._location

    @property
    def route(self) -> str:
        return self._location.fragment

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def load(self, site_root: Path | None = None, *, prefetch: bool | None = None) -> bool:
        """Load the catalog of *site_root*.  Returns ``False`` on a fatal load error."""

        root = self._context.resolve_site_root(site_root)
        manifest_path = self._context.settings.get("manifest_path", DEFAULT_MANIFEST_PATH)
        self.loading.value = True
        try:
            catalog = load_catalog(root, manifest_path)
        except CatalogLoadError as exc:
            self._context.error_handler.handle(
                exc,
                ErrorSeverity.CRITICAL,
                {"site_root": str(root)},
                user_message=LOAD_FAILED_MESSAGE,
            )
            self.error_message.value = LOAD_FAILED_MESSAGE
            self.load_failed.emit(str(exc))
            return False
        finally:
            self.loading.value = False

        self._bind_catalog(catalog, root)
        if prefetch is None:
            prefetch = bool(self._context.settings.get("images.prefetch", True))
        if prefetch:
            self.start_prefetch()
        self._context.event_bus.publish(
            CatalogLoadedEvent(
                manifest_path=str(root / manifest_path),
                category_count=len(catalog.categories),
                item_count=catalog.item_count,
            )
        )
        self.catalog_loaded.emit(catalog)
        return True

    def _bind_catalog(self, catalog: Catalog, root: Path) -> None:
        if self._selection is not None:
            self._selection.changed.disconnect(self._on_selection_changed)
        self._catalog = catalog
        self._selection = SelectionStateMachine(catalog, self._context.favorites)
        self._index = SearchIndex(catalog)
        self._codec = RouteCodec(catalog, self._context.favorites)
        if self._image_cache is None:
            self._image_cache = self._context.create_image_cache(root)
        self.error_message.value = None

        if self._routing_enabled:
            self._codec.apply(self._location.fragment, self._selection)
        self._selection.changed.connect(self._on_selection_changed)
        self._on_selection_changed(self._selection.coordinate, Coordinate.none())

    def start_prefetch(self) -> Optional[Prefetcher]:
        """Prefetch every image, the selected subcategory's first."""

        if self._catalog is None or self._image_cache is None:
            return None
        if self._prefetcher is not None:
            self._prefetcher.stop()
        plan = plan_prefetch(self._catalog, self.selection.coordinate)
        self._prefetcher = Prefetcher(self._image_cache, plan)
        self._prefetcher.start()
        return self._prefetcher

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------
    def select_category(self, index: int) -> bool:
        return self.selection.select_category(index)

    def show_favorites(self) -> bool:
        return self.selection.select_category(FAVORITES_INDEX)

    def select_subcategory(self, index: int) -> bool:
        return self.selection.select_subcategory(index)

    def select_item(self, index: int) -> bool:
        return self.selection.select_item(index)

    def handle_key(self, key: str, *, in_text_input: bool = False) -> bool:
        """Arrow-key grid navigation.  Returns whether the key was consumed."""

        if in_text_input or not self._context.settings.get("ui.keyboard_nav", True):
            return False
        direction = KEY_DIRECTIONS.get(key)
        if direction is None:
            return False
        columns = int(self._context.settings.get("ui.grid_columns", GRID_COLUMNS))
        return self.selection.step(direction, columns)

    def navigate(self, fragment: str) -> bool:
        """React to an externally changed location (e.g. a pasted link)."""

        if self._codec is None:
            raise CatalogNotLoadedError("No catalog has been loaded yet")
        moved = self._codec.apply(fragment, self.selection)
        if not moved:
            # Normalise the visible location even when the target is unchanged.
            self._sync_location()
        return moved

    def toggle_pin(self) -> Optional[PinOutcome]:
        """Pin or unpin the current item.  Returns ``None`` when nothing is selected."""

        selection = self.selection
        item = selection.current_item()
        if item is None:
            return None
        coordinate = selection.coordinate
        if coordinate.is_favorites:
            entry = self._context.favorites.entry_at(coordinate.item)
            if entry is None:
                return None
            coordinate, item = entry.coordinate, entry.item

        outcome = self._context.favorites.toggle_pin(coordinate, item)
        self._context.favorites.persist()
        # Favorites positions shift on removal; re-resolve before anyone reads them.
        selection.clamp()
        self._refresh()
        if self.search_query.value:
            self.search(self.search_query.value)
        self._context.event_bus.publish(
            FavoriteToggledEvent(coordinate=coordinate.as_tuple(), added=outcome.added, name=outcome.name)
        )
        self.favorite_toggled.emit(outcome)
        return outcome

    def search(self, query: str) -> list[SearchResult]:
        if self._index is None:
            raise CatalogNotLoadedError("No catalog has been loaded yet")
        self.search_query.value = query
        results = self._index.search(query, self._context.favorites)
        self.search_results.value = results
        return results

    def clear_search(self) -> None:
        self.search_query.value = ""
        self.search_results.value = []

    def activate_result(self, result: SearchResult) -> bool:
        """Jump to a search result."""

        if isinstance(result, ItemMatch):
            target = result.coordinate
        elif isinstance(result, SubcategoryMatch):
            first = 0 if result.item_count else NONE_INDEX
            target = Coordinate(result.category_index, result.subcategory_index, first)
        else:
            raise TypeError(f"Not a search result: {result!r}")
        return self.selection.apply(target)

    def shutdown(self) -> None:
        if self._prefetcher is not None:
            self._prefetcher.stop()
        if self._image_cache is not None:
            self._image_cache.shutdown()
        self.dispose()

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    @property
    def _routing_enabled(self) -> bool:
        return bool(self._context.settings.get("ui.url_routing", True))

    def _on_selection_changed(self, new: Coordinate, old: Coordinate) -> None:
        self._refresh()
        self._sync_location()
        self._context.event_bus.publish(
            SelectionChangedEvent(coordinate=new.as_tuple(), previous=old.as_tuple())
        )
        self._request_detail_image()

    def _on_favorites_changed(self, _outcome: object) -> None:
        self.favorites.value = self._context.favorites.items()
        if self._selection is not None and self._selection.in_favorites:
            self._refresh()

    def _refresh(self) -> None:
        selection = self.selection
        coordinate = selection.coordinate
        self.coordinate.value = coordinate
        self.items.value = selection.current_items()
        self.current_item.value = selection.current_item()
        if coordinate.is_favorites:
            self.is_pinned.value = selection.current_item() is not None
        else:
            self.is_pinned.value = self._context.favorites.is_pinned(coordinate)

    def _sync_location(self) -> None:
        if self._codec is not None and self._routing_enabled:
            self._codec.sync_location(self._location, self.selection.coordinate)

    def _request_detail_image(self) -> None:
        item = self.selection.current_item()
        if item is None or not item.image or self._image_cache is None:
            self.detail_image.value = None
            return
        target = self.selection.coordinate
        ref = item.image
        future = self._image_cache.request(ref)
        if not future.done():
            self.detail_image.value = None
        dispatcher = self._context.dispatcher
        future.add_done_callback(
            lambda done: dispatcher.post(lambda: self._on_detail_image(target, ref, done))
        )

    def _on_detail_image(self, target: Coordinate, ref: str, future: Future) -> None:
        selection = self._selection
        item = selection.current_item() if selection is not None else None
        if selection is None or selection.coordinate != target or item is None or item.image != ref:
            self._logger.debug("Discarding superseded detail image %s", ref)
            return
        result: ImageResult = future.result()
        self.detail_image.value = result
        self.detail_image_ready.emit(ref, result)


__all__ = ["CatalogViewModel", "KEY_DIRECTIONS", "LOAD_FAILED_MESSAGE"]
