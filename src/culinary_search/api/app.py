import logging
from typing import Any

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from culinary_search.api.dependencies import HandlerDep, lifespan
from culinary_search.config import settings
from culinary_search.dto import (
    ClearCacheResponse,
    ErrorResponse,
    IngredientSearchRequest,
    RecipeSearchRequest,
    SearchResponse,
    SearchStatsResponse,
)
from culinary_search.exceptions import InvalidQuery, SearchError
from culinary_search.services import SearchService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


@router.post(
    "/recipes",
    response_model=SearchResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def search_recipes(request: RecipeSearchRequest, handler: HandlerDep) -> SearchResponse:
    """
    Search recipes by semantic query.

    Body example: {"query": "fruity tropical drinks", "limit": 10,
    "filter": {"category": "Cocktail", "alcoholic": "Alcoholic"}}
    """
    return await handler.search_recipes(request)


@router.post(
    "/ingredients",
    response_model=SearchResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def search_ingredients(request: IngredientSearchRequest, handler: HandlerDep) -> SearchResponse:
    """
    Search ingredients by semantic query.

    Body example: {"query": "vodka alternatives", "limit": 10,
    "filter": {"category": "Spirits", "family": "Vodka Family"}}
    """
    return await handler.search_ingredients(request)


@router.get("/health")
async def health(handler: HandlerDep) -> JSONResponse:
    """Health check endpoint: 200 when the embedding provider is reachable, 503 otherwise."""
    report = await handler.health_check()
    status_code = (
        status.HTTP_200_OK if report.status == "healthy" else status.HTTP_503_SERVICE_UNAVAILABLE
    )
    return JSONResponse(status_code=status_code, content=report.model_dump())


@router.post("/cache/clear", response_model=ClearCacheResponse)
async def clear_cache(handler: HandlerDep) -> ClearCacheResponse:
    """Clear all cached search results."""
    return await handler.clear_cache()


@router.get("/stats", response_model=SearchStatsResponse)
async def get_stats(handler: HandlerDep) -> SearchStatsResponse:
    """Get result cache statistics."""
    return await handler.get_stats()


async def invalid_query_handler(request: Request, exc: InvalidQuery) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


async def search_error_handler(request: Request, exc: SearchError) -> JSONResponse:
    logger.error("Search failed (%s): %s", type(exc).__name__, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "message": str(exc)},
    )


def create_app(search_service: SearchService | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        search_service: Pre-built service to serve. If None, the lifespan
            wires one from settings.

    Returns:
        The configured FastAPI app
    """
    application = FastAPI(
        title="Culinary Search API",
        description="Semantic search over recipes and ingredients using Ollama embeddings",
        version="0.1.0",
        lifespan=lifespan,
    )
    if search_service is not None:
        application.state.search_service = search_service

    application.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=[settings.cors_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_exception_handler(InvalidQuery, invalid_query_handler)
    application.add_exception_handler(SearchError, search_error_handler)
    application.add_exception_handler(RequestValidationError, request_validation_handler)

    application.include_router(router)

    @application.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "Culinary Search API",
            "version": "0.1.0",
            "description": "Semantic search over recipes and ingredients",
            "endpoints": {
                "recipes": "/search/recipes",
                "ingredients": "/search/ingredients",
                "health": "/search/health",
                "cache_clear": "/search/cache/clear",
                "stats": "/search/stats",
                "docs": "/docs",
            },
        }

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "culinary_search.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
