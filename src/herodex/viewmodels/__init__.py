from .base import BaseViewModel
from .catalog_viewmodel import CatalogViewModel

__all__ = ["BaseViewModel", "CatalogViewModel"]
