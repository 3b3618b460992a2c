"""Service layer for business logic.

This layer contains the core business logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from culinary_search.services import SearchService

    service = SearchService.create(embedding_provider=provider, catalog=catalog)
    results = await service.search_recipes("fruity tropical drinks")
    ```
"""

from .ranker import normalize_filter, rank
from .result_cache import ResultCache, make_key
from .search_service import SearchService, validate_query

__all__ = [
    "SearchService",
    "ResultCache",
    "make_key",
    "normalize_filter",
    "rank",
    "validate_query",
]
