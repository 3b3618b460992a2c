"""Search service for core business logic.

This service orchestrates a semantic search by coordinating the result
cache, the embedding provider (query vectors) and the catalog store
(precomputed entry vectors), then ranking with cosine similarity.
"""

import asyncio
import logging
import math
import time
from collections.abc import Mapping
from typing import Any

from culinary_search.config import settings
from culinary_search.entities import (
    COLLECTIONS,
    INGREDIENTS,
    RECIPES,
    CatalogEntry,
    Collection,
    SearchResult,
)
from culinary_search.exceptions import (
    CatalogUnavailable,
    EmbeddingUnavailable,
    InternalError,
    InvalidQuery,
    SearchError,
)
from culinary_search.protocols import CatalogStore, EmbeddingProvider
from culinary_search.services.ranker import rank
from culinary_search.services.result_cache import ResultCache, make_key

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 3
MIN_LIMIT = 1
MAX_LIMIT = 50
DEFAULT_LIMIT = 10


def validate_query(query: Any, limit: Any) -> None:
    """Reject malformed search input before any I/O happens.

    Raises:
        InvalidQuery: If the query is not a string of at least three
            characters, or the limit is not an integer in [1, 50]
    """
    if not isinstance(query, str) or not query:
        raise InvalidQuery("Query parameter is required and must be a string")

    if len(query) < MIN_QUERY_LENGTH:
        raise InvalidQuery(f"Query must be at least {MIN_QUERY_LENGTH} characters long")

    if isinstance(limit, bool) or not isinstance(limit, int) or not MIN_LIMIT <= limit <= MAX_LIMIT:
        raise InvalidQuery(f"Limit must be between {MIN_LIMIT} and {MAX_LIMIT}")


class SearchService:
    """Semantic search orchestration service.

    This service depends on PROTOCOLS, not concrete implementations:
    - EmbeddingProvider: Ollama, sentence-transformers, or a test fake
    - CatalogStore: JSON files, HTTP, or a test fake

    Example:
        ```python
        from culinary_search.repositories import JsonCatalogRepository, OllamaEmbeddingProvider
        from culinary_search.services import SearchService

        service = SearchService.create(
            embedding_provider=OllamaEmbeddingProvider.create(),
            catalog=JsonCatalogRepository.create(),
        )
        results = await service.search_recipes("fruity tropical drinks", limit=5)
        ```
    """

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        catalog: CatalogStore,
        cache: ResultCache | None = None,
        embedding_timeout: float | None = None,
        catalog_timeout: float | None = None,
    ) -> None:
        """Initialize the search service.

        Args:
            embedding_provider: Query embedding generation (required).
            catalog: Source of catalog entries (required).
            cache: Result cache. Defaults to one built from settings.
            embedding_timeout: Upper bound for one embedding call, in seconds.
            catalog_timeout: Upper bound for one catalog load, in seconds.
        """
        self._embeddings = embedding_provider
        self._catalog = catalog
        if cache is None:
            cache = ResultCache(
                ttl=settings.search_cache_ttl,
                enabled=settings.search_cache_enabled,
            )
        self._cache = cache
        self._embedding_timeout = embedding_timeout or settings.embedding_timeout
        self._catalog_timeout = catalog_timeout or settings.catalog_timeout

    @classmethod
    def create(
        cls,
        embedding_provider: EmbeddingProvider,
        catalog: CatalogStore,
        cache_ttl: float | None = None,
        cache_enabled: bool | None = None,
    ) -> "SearchService":
        """Factory method to create SearchService with sensible defaults.

        Args:
            embedding_provider: Query embedding generation (required).
            catalog: Source of catalog entries (required).
            cache_ttl: Result cache TTL in seconds. If None, uses settings.
            cache_enabled: Toggle the result cache. If None, uses settings.

        Returns:
            Configured SearchService instance
        """
        cache = ResultCache(
            ttl=settings.search_cache_ttl if cache_ttl is None else cache_ttl,
            enabled=settings.search_cache_enabled if cache_enabled is None else cache_enabled,
        )
        return cls(embedding_provider=embedding_provider, catalog=catalog, cache=cache)

    async def search_recipes(
        self,
        query: str,
        limit: int = DEFAULT_LIMIT,
        filter: Mapping[str, Any] | None = None,
    ) -> list[SearchResult]:
        """Search recipes by semantic query.

        Args:
            query: Free-text query (at least 3 characters)
            limit: Number of results, 1-50
            filter: Exact-match metadata filter (e.g. category, alcoholic)

        Returns:
            Ranked results, highest similarity first
        """
        return await self.search(RECIPES, query, limit, filter)

    async def search_ingredients(
        self,
        query: str,
        limit: int = DEFAULT_LIMIT,
        filter: Mapping[str, Any] | None = None,
    ) -> list[SearchResult]:
        """Search ingredients by semantic query.

        Args:
            query: Free-text query (at least 3 characters)
            limit: Number of results, 1-50
            filter: Exact-match metadata filter (e.g. category, family)

        Returns:
            Ranked results, highest similarity first
        """
        return await self.search(INGREDIENTS, query, limit, filter)

    async def search(
        self,
        collection: Collection,
        query: str,
        limit: int = DEFAULT_LIMIT,
        filter: Mapping[str, Any] | None = None,
    ) -> list[SearchResult]:
        """Search one collection.

        Business logic:
        1. Validate input (no I/O on failure)
        2. Serve from the result cache when fresh
        3. Embed the query and load the catalog
        4. Rank, cache and return

        Raises:
            InvalidQuery: On malformed input
            EmbeddingUnavailable: If the query cannot be embedded
            CatalogUnavailable: If the catalog cannot be loaded
            InternalError: On any other failure
        """
        validate_query(query, limit)
        if filter is not None and not isinstance(filter, Mapping):
            raise InvalidQuery("Filter must be an object")

        key = make_key(collection.name, query, limit, filter)
        cached = self._cache.get(key)
        if cached is not None:
            logger.info("Cache hit for %s query: %s", collection.name, query)
            return cached

        start_time = time.time()
        query_vector = await self._embed(query)
        entries = await self._load(collection.name)

        try:
            results = rank(query_vector, entries, collection, limit, filter)
        except ValueError as e:
            raise InternalError(f"Failed to rank {collection.name}: {e}") from e

        self._cache.put(key, collection.name, results)
        logger.info(
            "Searched %d %s for %r: %d results in %.1fms",
            len(entries),
            collection.name,
            query,
            len(results),
            (time.time() - start_time) * 1000,
        )
        return results

    async def _embed(self, text: str) -> list[float]:
        try:
            vector = await asyncio.wait_for(
                self._embeddings.encode(text), timeout=self._embedding_timeout
            )
        except asyncio.TimeoutError as e:
            logger.error("Embedding timed out after %ss", self._embedding_timeout)
            raise EmbeddingUnavailable(
                f"Embedding request timed out after {self._embedding_timeout}s"
            ) from e
        except SearchError:
            raise
        except Exception as e:
            logger.error("Error generating embedding: %s", e)
            raise EmbeddingUnavailable(f"Failed to generate embedding: {e}") from e

        if not vector or not all(
            isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)
            for v in vector
        ):
            raise EmbeddingUnavailable("Embedding provider returned an invalid vector")
        return list(vector)

    async def _load(self, collection: str) -> list[CatalogEntry]:
        try:
            return await asyncio.wait_for(
                self._catalog.load(collection), timeout=self._catalog_timeout
            )
        except asyncio.TimeoutError as e:
            raise CatalogUnavailable(
                f"Loading {collection} timed out after {self._catalog_timeout}s"
            ) from e
        except SearchError:
            raise
        except Exception as e:
            logger.error("Error loading %s: %s", collection, e)
            raise CatalogUnavailable(f"Failed to load {collection} database: {e}") from e

    async def health(self) -> dict[str, Any]:
        """Summarize provider, catalog and cache state.

        The status is ``healthy`` exactly when the embedding provider is
        reachable; catalog sizes and cache occupancy are informational and a
        failing catalog is reported with a null size.

        Returns:
            Dictionary with ``status`` and ``details``
        """
        embedding: dict[str, Any] = {
            "connected": False,
            "endpoint": self._embeddings.endpoint,
            "model": self._embeddings.model_name,
            "model_available": False,
        }
        try:
            models = await asyncio.wait_for(
                self._embeddings.list_models(), timeout=self._embedding_timeout
            )
            embedding["connected"] = True
            embedding["model_available"] = any(
                self._embeddings.model_name in name for name in models
            )
        except asyncio.TimeoutError:
            embedding["error"] = f"Embedding provider timed out after {self._embedding_timeout}s"
        except Exception as e:
            embedding["error"] = str(e)

        names = list(COLLECTIONS)
        loads = await asyncio.gather(*(self._load(name) for name in names), return_exceptions=True)
        catalog: dict[str, Any] = {}
        errors: dict[str, str] = {}
        for name, loaded in zip(names, loads):
            if isinstance(loaded, BaseException):
                catalog[name] = None
                errors[name] = str(loaded)
            else:
                catalog[name] = len(loaded)
        if errors:
            catalog["errors"] = errors

        occupancy = self._cache.occupancy()
        cache = {name: occupancy.get(name, 0) for name in names}

        return {
            "status": "healthy" if embedding["connected"] else "unhealthy",
            "details": {
                "embedding": embedding,
                "catalog": catalog,
                "cache": cache,
            },
        }

    def clear_cache(self) -> int:
        """Clear all cached results.

        Returns:
            Number of entries removed
        """
        return self._cache.clear()

    def get_stats(self) -> dict[str, Any]:
        """Get search statistics.

        Returns:
            Dictionary with cache statistics and the embedding model
        """
        stats = self._cache.get_stats()
        stats["embedding_model"] = self._embeddings.model_name
        stats["catalog_location"] = self._catalog.location
        return stats

    @property
    def cache(self) -> ResultCache:
        """Get the underlying result cache (for testing)."""
        return self._cache

    @property
    def embedding_provider(self) -> EmbeddingProvider:
        """Get the underlying embedding provider (for testing)."""
        return self._embeddings

    @property
    def catalog(self) -> CatalogStore:
        """Get the underlying catalog store (for testing)."""
        return self._catalog
