"""Embedding provider protocol.

Defines the interface for any embedding generation service that can
convert text to vector embeddings.

Implementations can include:
- Ollama (local HTTP API, default)
- sentence-transformers (in-process)
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Protocol for embedding generation services.

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed.

    Example:
        ```python
        provider: EmbeddingProvider = OllamaEmbeddingProvider.create()
        provider: EmbeddingProvider = LocalEmbeddingProvider.create()
        ```
    """

    @property
    def model_name(self) -> str:
        """Return the name/identifier of the model."""
        ...

    @property
    def endpoint(self) -> str:
        """Return where the provider is reached (URL, or ``"local"``)."""
        ...

    async def encode(self, text: str) -> list[float]:
        """Generate embedding vector for a single text.

        Args:
            text: The text to encode

        Returns:
            The embedding vector as a list of floats

        Raises:
            EmbeddingUnavailable: If the provider fails or cannot be reached
        """
        ...

    async def list_models(self) -> list[str]:
        """List the model names the provider can serve.

        Returns:
            Model names

        Raises:
            EmbeddingUnavailable: If the provider cannot be reached
        """
        ...
