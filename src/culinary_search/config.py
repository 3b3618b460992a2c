import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Embedding
    embedding_provider: str = os.getenv("EMBEDDING_PROVIDER", "ollama")  # or "local"
    embedding_model: str = os.getenv("EMBEDDING_MODEL", "nomic-embed-text")
    embedding_timeout: float = float(os.getenv("EMBEDDING_TIMEOUT", "10"))

    # Ollama
    ollama_base_url: str = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")

    # Catalog (directory of <collection>.json files, or an http(s) base URL)
    vector_db_path: str = os.getenv("VECTOR_DB_PATH", "../cmbm-recipe-data/vector_db")
    catalog_timeout: float = float(os.getenv("CATALOG_TIMEOUT", "5"))

    # Result cache
    search_cache_ttl: int = int(os.getenv("SEARCH_CACHE_TTL", "300"))  # 5 minutes
    search_cache_enabled: bool = os.getenv("SEARCH_CACHE_ENABLED", "true").lower() == "true"

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"
    cors_origin: str = os.getenv("CORS_ORIGIN", "*")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def is_local_provider(self) -> bool:
        """Check if embeddings are generated in-process with sentence-transformers."""
        return self.embedding_provider.lower() == "local"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.embedding_provider.lower() not in ("ollama", "local"):
            raise ValueError(
                f"EMBEDDING_PROVIDER must be 'ollama' or 'local', got {self.embedding_provider!r}"
            )

        if self.embedding_timeout <= 0:
            raise ValueError("EMBEDDING_TIMEOUT must be positive")

        if self.catalog_timeout <= 0:
            raise ValueError("CATALOG_TIMEOUT must be positive")

        if self.search_cache_ttl < 0:
            raise ValueError("SEARCH_CACHE_TTL must not be negative")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
