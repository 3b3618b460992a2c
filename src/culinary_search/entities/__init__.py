"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .catalog_entry import CatalogEntry
from .collection import COLLECTIONS, INGREDIENTS, RECIPES, Collection
from .search_result import SearchResult

__all__ = [
    "CatalogEntry",
    "Collection",
    "COLLECTIONS",
    "RECIPES",
    "INGREDIENTS",
    "SearchResult",
]
