"""Local sentence-transformers embedding provider.

Runs the embedding model in-process, no Ollama server required. Install with
the ``local`` extra: ``pip install culinary-search[local]``.

The model name must be the sentence-transformers equivalent of the model the
catalog was embedded with, otherwise similarities are meaningless.
"""

import asyncio
import logging
import time

import numpy as np
from sentence_transformers import SentenceTransformer

from culinary_search.config import settings
from culinary_search.exceptions import EmbeddingUnavailable

logger = logging.getLogger(__name__)


class LocalEmbeddingProvider:
    """Local sentence-transformers implementation of EmbeddingProvider.

    This class satisfies the EmbeddingProvider protocol through structural
    typing - no explicit inheritance needed.

    Encoding is CPU-bound, so it runs in a worker thread to keep the event
    loop free.
    """

    def __init__(self, model_name: str | None = None) -> None:
        """Initialize the local embedding provider.

        Args:
            model_name: Name of the sentence-transformers model.
                       Defaults to settings.embedding_model.
        """
        self._model_name = model_name or settings.embedding_model
        self._model: SentenceTransformer | None = None

    @classmethod
    def create(cls, model_name: str | None = None) -> "LocalEmbeddingProvider":
        """Factory method to create LocalEmbeddingProvider with defaults.

        Args:
            model_name: Model name. If None, uses settings.

        Returns:
            Configured LocalEmbeddingProvider
        """
        return cls(model_name=model_name)

    @property
    def model(self) -> SentenceTransformer:
        """Lazy-load the embedding model."""
        if self._model is None:
            logger.info("Loading embedding model: %s", self._model_name)
            start_time = time.time()
            self._model = SentenceTransformer(self._model_name)
            logger.info("Model loaded in %.2fs", time.time() - start_time)
        return self._model

    @property
    def model_name(self) -> str:
        """Get the model name/identifier."""
        return self._model_name

    @property
    def endpoint(self) -> str:
        """In-process provider, no remote endpoint."""
        return "local"

    def _encode_sync(self, text: str) -> list[float]:
        embedding = self.model.encode(text, show_progress_bar=False)
        if isinstance(embedding, np.ndarray):
            if embedding.ndim == 1:
                return embedding.tolist()
            return embedding[0].tolist()
        return list(embedding)

    async def encode(self, text: str) -> list[float]:
        """Generate embedding vector for a single text.

        Args:
            text: The text to encode

        Returns:
            The embedding vector as a list of floats

        Raises:
            EmbeddingUnavailable: If the model cannot be loaded or fails
        """
        try:
            return await asyncio.to_thread(self._encode_sync, text)
        except Exception as e:
            raise EmbeddingUnavailable(f"Local embedding model failed: {e}") from e

    async def list_models(self) -> list[str]:
        """The only model this provider serves is its own.

        Loads the model first, so a health check notices a model that
        cannot be loaded.

        Raises:
            EmbeddingUnavailable: If the model cannot be loaded
        """
        try:
            await asyncio.to_thread(lambda: self.model)
        except Exception as e:
            raise EmbeddingUnavailable(f"Local embedding model unavailable: {e}") from e
        return [self._model_name]
