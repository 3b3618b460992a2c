"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (Ollama → sentence-transformers, files → HTTP, etc.)
- Unit testing with in-memory fakes
- Clear separation of concerns
"""

from .catalog_store import CatalogStore
from .embedding_provider import EmbeddingProvider

__all__ = [
    "CatalogStore",
    "EmbeddingProvider",
]
