"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import IngredientFilter, IngredientSearchRequest, RecipeFilter, RecipeSearchRequest
from .responses import (
    ClearCacheResponse,
    ErrorResponse,
    HealthResponse,
    SearchResponse,
    SearchResultItem,
    SearchStatsResponse,
)

__all__ = [
    "RecipeFilter",
    "IngredientFilter",
    "RecipeSearchRequest",
    "IngredientSearchRequest",
    "SearchResultItem",
    "SearchResponse",
    "HealthResponse",
    "ClearCacheResponse",
    "SearchStatsResponse",
    "ErrorResponse",
]
