"""Repository layer for data access.

This layer abstracts external dependencies (embedding APIs, catalog
documents) behind protocol-based interfaces. This enables:
- Easy swapping of implementations (Ollama → sentence-transformers, files → HTTP)
- Unit testing with in-memory fakes
- Clear separation of concerns

``LocalEmbeddingProvider`` is not re-exported here: it needs the optional
``local`` extra and is imported only when selected.
"""

from culinary_search.protocols import CatalogStore, EmbeddingProvider

from .json_catalog_repository import JsonCatalogRepository, parse_entries
from .ollama_embedding_provider import OllamaEmbeddingProvider

__all__ = [
    "CatalogStore",
    "EmbeddingProvider",
    "JsonCatalogRepository",
    "OllamaEmbeddingProvider",
    "parse_entries",
]
