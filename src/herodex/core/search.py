"""Full-catalog substring search.

Results come back in traversal order (categories, then subcategories, then
items).  There is no relevance scoring: an item matches when the query is a
substring of its name, subcategory name, category name and info run
together with no separator, and a subcategory matches when the query is a
substring of its own name.  An empty query matches nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..domain.models import Catalog, Coordinate, ItemMatch, SearchResult, SubcategoryMatch
from ..utils.logging import get_logger
from .favorites import FavoritesStore

LOGGER = get_logger(__name__)


def normalize_query(query: str | None) -> str:
    return (query or "").strip().lower()


def searchable_text(item_name: str, subcategory_name: str, category_name: str, info: str | None) -> str:
    return "".join((item_name, subcategory_name, category_name, info or "")).lower()


@dataclass(frozen=True)
class _IndexedSubcategory:
    category_index: int
    subcategory_index: int
    name: str
    item_texts: tuple[str, ...]


class SearchIndex:
    """Lower-cased search text for every item of one catalog, built once."""

    def __init__(self, catalog: Catalog) -> None:
        self._catalog = catalog
        entries: list[_IndexedSubcategory] = []
        for c, category in enumerate(catalog.categories):
            for s, subcategory in enumerate(category.subcategories):
                entries.append(
                    _IndexedSubcategory(
                        category_index=c,
                        subcategory_index=s,
                        name=subcategory.name.lower(),
                        item_texts=tuple(
                            searchable_text(item.name, subcategory.name, category.name, item.info)
                            for item in subcategory.items
                        ),
                    )
                )
        self._entries = tuple(entries)

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    def search(
        self,
        query: str | None,
        favorites: FavoritesStore | None = None,
        *,
        limit: Optional[int] = None,
    ) -> list[SearchResult]:
        """Return the matches for *query*; *limit* caps the item matches."""

        needle = normalize_query(query)
        if not needle:
            return []

        results: list[SearchResult] = []
        item_matches = 0
        for entry in self._entries:
            if limit is not None and item_matches >= limit:
                break
            subcategory = self._catalog.categories[entry.category_index].subcategories[
                entry.subcategory_index
            ]
            name_matched = needle in entry.name
            if name_matched:
                results.append(
                    SubcategoryMatch(
                        category_index=entry.category_index,
                        subcategory_index=entry.subcategory_index,
                        item_count=len(subcategory.items),
                    )
                )
            for i, text in enumerate(entry.item_texts):
                if needle not in text:
                    continue
                coordinate = Coordinate(entry.category_index, entry.subcategory_index, i)
                results.append(
                    ItemMatch(
                        coordinate=coordinate,
                        item=subcategory.items[i],
                        matched_subcategory_too=name_matched,
                        pinned=favorites is not None and favorites.is_pinned(coordinate),
                    )
                )
                item_matches += 1
                if limit is not None and item_matches >= limit:
                    break

        LOGGER.debug("Search %r produced %d results", needle, len(results))
        return results


def search_catalog(
    catalog: Catalog,
    favorites: FavoritesStore | None,
    query: str | None,
    *,
    limit: Optional[int] = None,
) -> list[SearchResult]:
    """Stateless search: index *catalog* and run *query* against it."""

    if not normalize_query(query):
        return []
    return SearchIndex(catalog).search(query, favorites, limit=limit)


__all__ = ["SearchIndex", "normalize_query", "search_catalog", "searchable_text"]
