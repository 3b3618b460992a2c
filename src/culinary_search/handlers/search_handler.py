"""HTTP handlers for search operations.

Handlers convert between DTOs (API contracts) and service calls.
``SearchError`` subclasses propagate unchanged; the application's exception
handlers turn them into 400/500 responses. Anything else is wrapped in
``InternalError`` so no internal state leaks into the response.
"""

import logging

from culinary_search.dto import (
    ClearCacheResponse,
    HealthResponse,
    IngredientSearchRequest,
    RecipeSearchRequest,
    SearchResponse,
    SearchResultItem,
    SearchStatsResponse,
)
from culinary_search.entities import SearchResult
from culinary_search.exceptions import InternalError, SearchError
from culinary_search.services import SearchService

logger = logging.getLogger(__name__)


def _to_response(query: str, results: list[SearchResult]) -> SearchResponse:
    items = [
        SearchResultItem(
            id=result.id,
            name=result.name,
            similarity=result.similarity,
            metadata=result.metadata,
        )
        for result in results
    ]
    return SearchResponse(query=query, count=len(items), results=items)


class SearchHandler:
    """HTTP handlers for search operations.

    Example:
        ```python
        handler = SearchHandler(search_service=service)

        @router.post("/recipes", response_model=SearchResponse)
        async def search_recipes(request: RecipeSearchRequest):
            return await handler.search_recipes(request)
        ```
    """

    def __init__(self, search_service: SearchService) -> None:
        """Initialize the search handler.

        Args:
            search_service: The search service for business logic (required).
        """
        self._search = search_service

    async def search_recipes(self, request: RecipeSearchRequest) -> SearchResponse:
        """Handle POST /search/recipes requests.

        Raises:
            SearchError: InvalidQuery for bad input, other subclasses for
                dependency or internal failures
        """
        logger.info("Recipe search: query=%r limit=%s filter=%s", request.query, request.limit, request.filter)
        filter = request.filter.model_dump(exclude_none=True) if request.filter else None
        try:
            results = await self._search.search_recipes(request.query, request.limit, filter)
        except SearchError:
            raise
        except Exception as e:
            logger.exception("Error searching recipes")
            raise InternalError(f"Failed to search recipes: {e}") from e
        return _to_response(request.query, results)

    async def search_ingredients(self, request: IngredientSearchRequest) -> SearchResponse:
        """Handle POST /search/ingredients requests.

        Raises:
            SearchError: InvalidQuery for bad input, other subclasses for
                dependency or internal failures
        """
        logger.info(
            "Ingredient search: query=%r limit=%s filter=%s", request.query, request.limit, request.filter
        )
        filter = request.filter.model_dump(exclude_none=True) if request.filter else None
        try:
            results = await self._search.search_ingredients(request.query, request.limit, filter)
        except SearchError:
            raise
        except Exception as e:
            logger.exception("Error searching ingredients")
            raise InternalError(f"Failed to search ingredients: {e}") from e
        return _to_response(request.query, results)

    async def health_check(self) -> HealthResponse:
        """Handle GET /search/health requests."""
        report = await self._search.health()
        return HealthResponse(status=report["status"], details=report["details"])

    async def clear_cache(self) -> ClearCacheResponse:
        """Handle POST /search/cache/clear requests."""
        count = self._search.clear_cache()
        return ClearCacheResponse(message="Cache cleared successfully", deleted_count=count)

    async def get_stats(self) -> SearchStatsResponse:
        """Handle GET /search/stats requests."""
        return SearchStatsResponse(**self._search.get_stats())
