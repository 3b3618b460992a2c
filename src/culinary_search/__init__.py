"""Culinary Search - semantic search over recipe and ingredient catalogs.

This package provides a layered architecture for embedding-based retrieval:

Layers:
    - protocols: Interface contracts (EmbeddingProvider, CatalogStore)
    - repositories: Data access implementations (Ollama, JSON catalogs)
    - services: Business logic (ranking, result cache, orchestration)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from culinary_search.repositories import JsonCatalogRepository, OllamaEmbeddingProvider
    from culinary_search.services import SearchService

    service = SearchService.create(
        embedding_provider=OllamaEmbeddingProvider.create(),
        catalog=JsonCatalogRepository.create(),
    )
    results = await service.search_recipes("fruity tropical drinks", limit=5)
    ```

For HTTP API:
    ```python
    from culinary_search.api.app import app
    ```
"""

from culinary_search.config import settings
from culinary_search.entities import CatalogEntry, SearchResult
from culinary_search.exceptions import (
    CatalogUnavailable,
    EmbeddingUnavailable,
    InternalError,
    InvalidQuery,
    SearchError,
)
from culinary_search.handlers import SearchHandler
from culinary_search.protocols import CatalogStore, EmbeddingProvider
from culinary_search.repositories import JsonCatalogRepository, OllamaEmbeddingProvider
from culinary_search.services import ResultCache, SearchService

__all__ = [
    # Configuration
    "settings",
    # Protocols (interfaces)
    "CatalogStore",
    "EmbeddingProvider",
    # Services (business logic)
    "SearchService",
    "ResultCache",
    # Handlers (HTTP)
    "SearchHandler",
    # Repositories (data access)
    "JsonCatalogRepository",
    "OllamaEmbeddingProvider",
    # Entities (domain models)
    "CatalogEntry",
    "SearchResult",
    # Errors
    "SearchError",
    "InvalidQuery",
    "EmbeddingUnavailable",
    "CatalogUnavailable",
    "InternalError",
]
