"""
Shared fixtures: in-memory embedding provider and catalog.
"""

import logging

import pytest

from culinary_search.entities import CatalogEntry
from culinary_search.exceptions import CatalogUnavailable, EmbeddingUnavailable
from culinary_search.logging_config import LOGGER_NAME
from culinary_search.services import ResultCache, SearchService


class FakeEmbeddingProvider:
    """Returns fixed vectors per text and counts calls."""

    def __init__(self, vectors=None, default=None, model_name="nomic-embed-text", models=None):
        self.vectors = dict(vectors or {})
        self.default = default or [1.0, 0.0, 0.0]
        self._model_name = model_name
        self.models = ["nomic-embed-text:latest"] if models is None else models
        self.calls = 0
        self.fail = False
        self.reachable = True

    @property
    def model_name(self):
        return self._model_name

    @property
    def endpoint(self):
        return "http://ollama.test"

    async def encode(self, text):
        self.calls += 1
        if self.fail:
            raise EmbeddingUnavailable("Ollama API error: connection refused")
        return list(self.vectors.get(text, self.default))

    async def list_models(self):
        if not self.reachable:
            raise EmbeddingUnavailable("Ollama service unavailable")
        return list(self.models)


class FakeCatalog:
    """Serves entries from memory and counts loads."""

    def __init__(self, collections=None):
        self.collections = dict(collections or {})
        self.loads = 0
        self.broken = set()

    @property
    def location(self):
        return "memory://catalog"

    async def load(self, collection):
        self.loads += 1
        if collection in self.broken:
            raise CatalogUnavailable(f"Failed to load {collection} database")
        return list(self.collections.get(collection, []))


def recipe(entry_id, name, embedding, **metadata):
    return CatalogEntry(id=entry_id, name=name, embedding=tuple(embedding), metadata={"name": name, **metadata})


@pytest.fixture
def recipes():
    return [
        recipe("11007", "Margarita", [1.0, 0.0, 0.0], category="Ordinary Drink", glass="Cocktail glass",
               alcoholic="Alcoholic", ingredientCount=4),
        recipe("11000", "Mojito", [0.0, 1.0, 0.0], category="Cocktail", glass="Highball glass",
               alcoholic="Alcoholic", ingredientCount=5),
        recipe("12560", "Afterglow", [0.0, 0.0, 1.0], category="Cocktail", glass="Highball glass",
               alcoholic="Non alcoholic", ingredientCount=3),
    ]


@pytest.fixture
def ingredients():
    return [
        recipe("vodka", "Vodka", [0.9, 0.1, 0.0], category="Spirits", family="Vodka Family", usageCount=120),
        recipe("gin", "Gin", [0.1, 0.9, 0.0], category="Spirits", family="Gin Family", usageCount=98),
        recipe("lime-juice", "Lime Juice", [0.0, 0.2, 0.9], category="Juices", family="Citrus", usageCount=150),
    ]


@pytest.fixture
def provider():
    return FakeEmbeddingProvider()


@pytest.fixture
def catalog(recipes, ingredients):
    return FakeCatalog({"recipes": recipes, "ingredients": ingredients})


@pytest.fixture
def clock():
    class Clock:
        now = 1000.0

        def __call__(self):
            return self.now

    return Clock()


@pytest.fixture
def service(provider, catalog, clock):
    return SearchService(
        embedding_provider=provider,
        catalog=catalog,
        cache=ResultCache(ttl=300, clock=clock),
        embedding_timeout=1.0,
        catalog_timeout=1.0,
    )


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo handler, level and propagate changes made by configure_logging."""
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
