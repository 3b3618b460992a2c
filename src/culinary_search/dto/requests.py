"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field, StrictInt, StrictStr


class RecipeFilter(BaseModel):
    """Exact-match filter for recipe searches."""

    category: StrictStr | None = Field(None, description="Recipe category, e.g. 'Cocktail'")
    alcoholic: StrictStr | None = Field(None, description="e.g. 'Alcoholic' or 'Non alcoholic'")


class IngredientFilter(BaseModel):
    """Exact-match filter for ingredient searches."""

    category: StrictStr | None = Field(None, description="Ingredient category, e.g. 'Spirits'")
    family: StrictStr | None = Field(None, description="Ingredient family, e.g. 'Vodka Family'")


class RecipeSearchRequest(BaseModel):
    """Request DTO for recipe search.

    Length and range checks on ``query`` and ``limit`` are left to the
    service layer so every caller gets the same validation.
    """

    query: StrictStr | None = Field(None, description="Free-text search query (min 3 characters)")
    limit: StrictInt = Field(10, description="Maximum number of results (1-50)")
    filter: RecipeFilter | None = Field(None, description="Optional exact-match filter")


class IngredientSearchRequest(BaseModel):
    """Request DTO for ingredient search."""

    query: StrictStr | None = Field(None, description="Free-text search query (min 3 characters)")
    limit: StrictInt = Field(10, description="Maximum number of results (1-50)")
    filter: IngredientFilter | None = Field(None, description="Optional exact-match filter")
