from .models import (
    Catalog,
    Category,
    Coordinate,
    FavoriteEntry,
    Item,
    ItemMatch,
    SearchResult,
    Subcategory,
    SubcategoryMatch,
)

__all__ = [
    "Catalog",
    "Category",
    "Coordinate",
    "FavoriteEntry",
    "Item",
    "ItemMatch",
    "SearchResult",
    "Subcategory",
    "SubcategoryMatch",
]
