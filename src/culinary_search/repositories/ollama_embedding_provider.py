"""Ollama-based embedding provider.

Uses Ollama's local API to embed search queries. The catalog embeddings are
generated externally with the same model, so the configured model must match
the one used at ingestion time.

Requirements:
    - Ollama installed: https://ollama.com
    - Model pulled: `ollama pull nomic-embed-text`
    - Ollama running: `ollama serve` (usually runs automatically)

Endpoints used:
    - POST /api/embed   {"model", "input"} -> {"embeddings": [[...]]}
    - GET  /api/tags    -> {"models": [{"name": ...}, ...]}
"""

import httpx

from culinary_search.config import settings
from culinary_search.exceptions import EmbeddingUnavailable


class OllamaEmbeddingProvider:
    """Ollama-based implementation of EmbeddingProvider protocol.

    This class satisfies the EmbeddingProvider protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        provider = OllamaEmbeddingProvider.create(
            model_name="nomic-embed-text",
            base_url="http://localhost:11434",
        )

        embedding = await provider.encode("fruity tropical drinks")
        print(len(embedding))  # 768
        ```
    """

    def __init__(
        self,
        model_name: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Ollama embedding provider.

        Args:
            model_name: Name of the Ollama model.
                       Defaults to settings.embedding_model.
            base_url: Ollama API base URL.
                     Defaults to settings.ollama_base_url.
            timeout: Request timeout in seconds.
                    Defaults to settings.embedding_timeout.
            transport: Optional httpx transport (used by tests).
        """
        self._model_name = model_name or settings.embedding_model
        self._base_url = (base_url or settings.ollama_base_url).rstrip("/")
        self._timeout = timeout or settings.embedding_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
                transport=self._transport,
            )
        return self._client

    @classmethod
    def create(
        cls,
        model_name: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> "OllamaEmbeddingProvider":
        """Factory method to create OllamaEmbeddingProvider with defaults.

        Args:
            model_name: Model name. If None, uses settings.
            base_url: Ollama API URL. If None, uses settings.
            timeout: Request timeout in seconds. If None, uses settings.

        Returns:
            Configured OllamaEmbeddingProvider
        """
        return cls(model_name=model_name, base_url=base_url, timeout=timeout)

    @property
    def model_name(self) -> str:
        """Get the model name/identifier."""
        return self._model_name

    @property
    def endpoint(self) -> str:
        """Get the Ollama base URL."""
        return self._base_url

    async def encode(self, text: str) -> list[float]:
        """Generate embedding vector for a single text.

        Args:
            text: The text to encode

        Returns:
            The embedding vector as a list of floats

        Raises:
            EmbeddingUnavailable: If the Ollama request fails or the
                response carries no embedding
        """
        payload = {
            "model": self._model_name,
            "input": text,
        }

        try:
            response = await self.client.post("/api/embed", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise EmbeddingUnavailable(
                f"Ollama request timed out after {self._timeout}s"
            ) from e
        except httpx.HTTPError as e:
            error_msg = f"Ollama API error: {e}"
            if "connection refused" in str(e).lower() or isinstance(e, httpx.ConnectError):
                error_msg += f" (is Ollama running at {self._base_url}?)"
            elif "not found" in str(e).lower():
                error_msg += f" (model not found, try: ollama pull {self._model_name})"
            raise EmbeddingUnavailable(error_msg) from e
        except ValueError as e:
            raise EmbeddingUnavailable(f"Ollama returned invalid JSON: {e}") from e

        # Ollama returns {"embeddings": [[...]]} for single input
        embeddings = data.get("embeddings") if isinstance(data, dict) else None
        if embeddings:
            return embeddings[0]

        # Older servers: {"embedding": [...]}
        if isinstance(data, dict) and data.get("embedding"):
            return data["embedding"]

        raise EmbeddingUnavailable("Unexpected Ollama response format: no embedding returned")

    async def list_models(self) -> list[str]:
        """List the models installed on the Ollama server.

        Returns:
            Installed model names (e.g. ``"nomic-embed-text:latest"``)

        Raises:
            EmbeddingUnavailable: If Ollama cannot be reached
        """
        try:
            response = await self.client.get("/api/tags")
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise EmbeddingUnavailable(f"Ollama service unavailable: {e}") from e

        return [m.get("name", "") for m in data.get("models", []) if isinstance(m, dict)]

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
