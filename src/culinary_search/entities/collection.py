"""Searchable collections and their collection-specific fields."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Collection:
    """A named catalog collection.

    Attributes:
        name: Collection name, also the catalog document name (``<name>.json``)
        display_fields: Metadata keys copied into each search result
        filter_fields: Metadata keys a search request may filter on
    """

    name: str
    display_fields: tuple[str, ...]
    filter_fields: tuple[str, ...]


RECIPES = Collection(
    name="recipes",
    display_fields=("category", "glass", "alcoholic", "ingredientCount"),
    filter_fields=("category", "alcoholic"),
)

INGREDIENTS = Collection(
    name="ingredients",
    display_fields=("category", "family", "usageCount"),
    filter_fields=("category", "family"),
)

COLLECTIONS: dict[str, Collection] = {c.name: c for c in (RECIPES, INGREDIENTS)}
