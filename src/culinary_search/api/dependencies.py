"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - A service placed on app.state before start-up (tests) is used as-is
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from culinary_search.config import Settings, settings
from culinary_search.handlers import SearchHandler
from culinary_search.logging_config import configure_logging
from culinary_search.protocols import EmbeddingProvider
from culinary_search.repositories import JsonCatalogRepository, OllamaEmbeddingProvider
from culinary_search.services import SearchService

logger = logging.getLogger(__name__)


def get_handler(request: Request) -> SearchHandler:
    """Dependency injection for SearchHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "search_handler", None)
    if handler is None:
        raise RuntimeError("SearchHandler not initialized. Check lifespan setup.")
    return handler


def build_embedding_provider(config: Settings = settings) -> EmbeddingProvider:
    """Create the embedding provider selected by EMBEDDING_PROVIDER."""
    if config.is_local_provider:
        # Optional dependency, only importable with the "local" extra
        from culinary_search.repositories.local_embedding_provider import LocalEmbeddingProvider

        return LocalEmbeddingProvider.create(model_name=config.embedding_model)

    return OllamaEmbeddingProvider.create(
        model_name=config.embedding_model,
        base_url=config.ollama_base_url,
        timeout=config.embedding_timeout,
    )


def build_search_service(config: Settings = settings) -> SearchService:
    """Wire the default provider, catalog and cache from settings."""
    return SearchService.create(
        embedding_provider=build_embedding_provider(config),
        catalog=JsonCatalogRepository.create(
            location=config.vector_db_path,
            timeout=config.catalog_timeout,
        ),
        cache_ttl=config.search_cache_ttl,
        cache_enabled=config.search_cache_enabled,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Service (business logic) - app.state.search_service
    2. Handler (HTTP endpoints) - app.state.search_handler

    Cleanup:
        Closes the embedding provider's HTTP client if this lifespan
        created it, and removes the handler from app.state
    """
    configure_logging(settings.log_level)

    search_service = getattr(app.state, "search_service", None)
    owns_service = search_service is None
    if owns_service:
        search_service = build_search_service()
        app.state.search_service = search_service

    app.state.search_handler = SearchHandler(search_service=search_service)

    logger.info("Search service initialized")
    logger.info("Embedding model: %s", search_service.embedding_provider.model_name)
    logger.info("Embedding endpoint: %s", search_service.embedding_provider.endpoint)
    logger.info("Catalog location: %s", search_service.catalog.location)
    logger.info("Result cache TTL: %ss", search_service.cache.ttl)

    yield

    if owns_service:
        close = getattr(search_service.embedding_provider, "close", None)
        if close is not None:
            await close()
        del app.state.search_service
    del app.state.search_handler
    logger.info("Search service shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[SearchHandler, Depends(get_handler)]
