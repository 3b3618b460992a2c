"""Response DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class SearchResultItem(BaseModel):
    """Single ranked search hit (in results array)."""

    id: str = Field(..., description="Catalog entry identifier")
    name: str = Field(..., description="Display name")
    similarity: float = Field(
        ...,
        description="Cosine similarity as a percentage, one decimal place",
        ge=0.0,
        le=100.0,
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Collection-specific display fields",
    )


class SearchResponse(BaseModel):
    """Response DTO for recipe and ingredient searches."""

    query: str = Field(..., description="The original query text")
    count: int = Field(..., description="Number of results returned", ge=0)
    results: list[SearchResultItem] = Field(
        default_factory=list,
        description="Results sorted by similarity, highest first",
    )


class HealthResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Embedding provider, catalog sizes and cache occupancy",
    )


class ClearCacheResponse(BaseModel):
    """Response DTO for cache clear operation."""

    message: str = Field(..., description="Human-readable status message")
    deleted_count: int = Field(..., description="Number of cached queries removed", ge=0)


class SearchStatsResponse(BaseModel):
    """Response DTO for search statistics."""

    enabled: bool = Field(..., description="Whether the result cache is enabled")
    ttl_seconds: float = Field(..., description="Result cache time-to-live", ge=0)
    size: int = Field(..., description="Live cached queries", ge=0)
    entries: dict[str, int] = Field(default_factory=dict, description="Live cached queries per collection")
    hits: int = Field(..., ge=0)
    misses: int = Field(..., ge=0)
    hit_rate: float = Field(..., description="Hit percentage since the last clear")
    embedding_model: str
    catalog_location: str


class ErrorResponse(BaseModel):
    """Response DTO for failed requests."""

    error: str = Field(..., description="Error summary")
    message: str | None = Field(None, description="Details for server-side failures")
