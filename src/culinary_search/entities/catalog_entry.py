"""Catalog entry domain entity."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CatalogEntry:
    """One searchable item of a named collection.

    Attributes:
        id: Identifier, unique within its collection
        name: Display name
        embedding: Precomputed embedding vector (never mutated)
        metadata: Collection-specific attributes (category, glass, family, ...)
    """

    id: str
    name: str
    embedding: tuple[float, ...]
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def dimension(self) -> int:
        """Length of the embedding vector."""
        return len(self.embedding)
