"""Catalog storage protocol.

Defines the interface for any read-only source of catalog entries
with precomputed embeddings.
"""

from typing import Protocol, runtime_checkable

from culinary_search.entities import CatalogEntry


@runtime_checkable
class CatalogStore(Protocol):
    """Protocol for catalog sources.

    Implementations read the whole collection on every call; they hold
    no snapshot of their own.
    """

    @property
    def location(self) -> str:
        """Return the catalog location (directory or base URL)."""
        ...

    async def load(self, collection: str) -> list[CatalogEntry]:
        """Load every entry of a collection.

        Args:
            collection: Collection name (``recipes`` or ``ingredients``)

        Returns:
            All entries, in catalog order

        Raises:
            CatalogUnavailable: If the source cannot be read or parsed
        """
        ...
