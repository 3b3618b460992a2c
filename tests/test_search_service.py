"""
Tests for search orchestration: validation, caching, failures and health.
"""

import asyncio

import pytest

from culinary_search.exceptions import CatalogUnavailable, EmbeddingUnavailable, InternalError, InvalidQuery
from culinary_search.services import ResultCache, SearchService


def run(coro):
    return asyncio.run(coro)


def test_query_matching_entry_ranks_it_first(service, provider):
    provider.vectors["minty highball"] = [0.0, 1.0, 0.0]

    results = run(service.search_recipes("minty highball"))

    assert results[0].id == "11000"
    assert results[0].name == "Mojito"
    assert results[0].similarity == 100.0
    assert results[0].metadata == {
        "category": "Cocktail",
        "glass": "Highball glass",
        "alcoholic": "Alcoholic",
        "ingredientCount": 5,
    }


def test_ranking_and_limit_invariants(service, provider):
    provider.vectors["something bright"] = [0.3, 0.4, 0.5]

    results = run(service.search_ingredients("something bright", limit=2))

    assert len(results) == 2
    assert results[0].similarity >= results[1].similarity


def test_filter_invariant(service):
    results = run(service.search_recipes("anything", filter={"category": "Cocktail"}))

    assert results
    assert all(r.metadata["category"] == "Cocktail" for r in results)


def test_ingredient_filter(service):
    results = run(service.search_ingredients("clear spirit", filter={"family": "Gin Family"}))

    assert [r.id for r in results] == ["gin"]


def test_second_identical_request_served_from_cache(service, provider, catalog):
    first = run(service.search_recipes("tropical", 5, {"category": "Cocktail"}))
    second = run(service.search_recipes("tropical", 5, {"category": "Cocktail"}))

    assert first == second
    assert provider.calls == 1
    assert catalog.loads == 1


def test_editing_returned_results_does_not_change_cache(service, provider):
    first = run(service.search_recipes("tropical", 5, {"category": "Cocktail"}))
    first[0].metadata["category"] = "Changed"

    second = run(service.search_recipes("tropical", 5, {"category": "Cocktail"}))

    assert provider.calls == 1
    assert second[0].metadata["category"] == "Cocktail"


def test_filter_key_order_shares_cache_entry(service, provider):
    run(service.search_recipes("tropical", 5, {"category": "Cocktail", "alcoholic": "Alcoholic"}))
    run(service.search_recipes("tropical", 5, {"alcoholic": "Alcoholic", "category": "Cocktail"}))

    assert provider.calls == 1


def test_expired_entry_recomputed(service, provider, clock):
    run(service.search_recipes("tropical"))
    clock.now += 301
    run(service.search_recipes("tropical"))

    assert provider.calls == 2


def test_clear_cache_forces_recompute(service, provider):
    first = run(service.search_recipes("tropical"))
    assert service.clear_cache() == 1
    second = run(service.search_recipes("tropical"))

    assert provider.calls == 2
    assert first == second


def test_collections_cached_separately(service, provider):
    run(service.search_recipes("tropical"))
    run(service.search_ingredients("tropical"))

    assert provider.calls == 2
    assert service.cache.occupancy() == {"recipes": 1, "ingredients": 1}


def test_disabled_cache_gives_same_results(provider, catalog):
    uncached = SearchService(provider, catalog, cache=ResultCache(enabled=False))

    first = run(uncached.search_recipes("tropical"))
    second = run(uncached.search_recipes("tropical"))

    assert first == second
    assert provider.calls == 2


def test_empty_catalog_returns_no_results(provider, catalog):
    catalog.collections["recipes"] = []
    service = SearchService(provider, catalog, cache=ResultCache())

    assert run(service.search_recipes("anything")) == []


@pytest.mark.parametrize("limit", [0, 51, -1, True, 2.5, "10"])
def test_invalid_limit_rejected_before_io(service, provider, catalog, limit):
    with pytest.raises(InvalidQuery, match="Limit"):
        run(service.search_recipes("tropical", limit))

    assert provider.calls == 0
    assert catalog.loads == 0


@pytest.mark.parametrize("limit", [1, 50])
def test_limit_bounds_accepted(service, limit):
    results = run(service.search_recipes("tropical", limit))

    assert len(results) == min(limit, 3)


@pytest.mark.parametrize("query", ["", "ab", None, 123])
def test_invalid_query_rejected_before_io(service, provider, query):
    with pytest.raises(InvalidQuery):
        run(service.search_recipes(query))

    assert provider.calls == 0


def test_three_character_query_accepted(service):
    assert run(service.search_recipes("gin"))


def test_filter_must_be_mapping(service, provider):
    with pytest.raises(InvalidQuery, match="Filter"):
        run(service.search_recipes("tropical", 10, ["Cocktail"]))

    assert provider.calls == 0


def test_embedding_failure_propagates(service, provider, catalog):
    provider.fail = True

    with pytest.raises(EmbeddingUnavailable):
        run(service.search_recipes("tropical"))

    assert catalog.loads == 0
    assert len(service.cache) == 0


def test_embedding_timeout(catalog):
    class SlowProvider:
        model_name = "nomic-embed-text"
        endpoint = "http://ollama.test"

        async def encode(self, text):
            await asyncio.sleep(1)
            return [1.0, 0.0, 0.0]

    service = SearchService(SlowProvider(), catalog, cache=ResultCache(), embedding_timeout=0.01)

    with pytest.raises(EmbeddingUnavailable, match="timed out"):
        run(service.search_recipes("tropical"))


def test_unexpected_provider_error_is_embedding_failure(catalog):
    class BrokenProvider:
        model_name = "nomic-embed-text"
        endpoint = "http://ollama.test"

        async def encode(self, text):
            raise KeyError("embeddings")

    service = SearchService(BrokenProvider(), catalog, cache=ResultCache())

    with pytest.raises(EmbeddingUnavailable):
        run(service.search_recipes("tropical"))


def test_invalid_vector_is_embedding_failure(service, provider):
    provider.vectors["tropical"] = []

    with pytest.raises(EmbeddingUnavailable):
        run(service.search_recipes("tropical"))


def test_catalog_failure_propagates(service, catalog):
    catalog.broken.add("recipes")

    with pytest.raises(CatalogUnavailable):
        run(service.search_recipes("tropical"))

    assert len(service.cache) == 0


def test_catalog_timeout(provider):
    class SlowCatalog:
        location = "memory://slow"

        async def load(self, collection):
            await asyncio.sleep(1)
            return []

    service = SearchService(provider, SlowCatalog(), cache=ResultCache(), catalog_timeout=0.01)

    with pytest.raises(CatalogUnavailable, match="timed out"):
        run(service.search_recipes("tropical"))


def test_dimension_mismatch_is_internal_error(service, provider):
    provider.vectors["tropical"] = [1.0, 0.0]

    with pytest.raises(InternalError):
        run(service.search_recipes("tropical"))


def test_concurrent_identical_requests(service):
    async def both():
        return await asyncio.gather(
            service.search_recipes("tropical"),
            service.search_recipes("tropical"),
        )

    first, second = run(both())

    assert first == second
    assert len(service.cache) == 1


def test_health_reports_provider_catalog_and_cache(service):
    run(service.search_recipes("tropical"))

    report = run(service.health())

    assert report["status"] == "healthy"
    details = report["details"]
    assert details["embedding"]["connected"] is True
    assert details["embedding"]["model_available"] is True
    assert details["catalog"] == {"recipes": 3, "ingredients": 3}
    assert details["cache"] == {"recipes": 1, "ingredients": 0}


def test_health_unhealthy_when_provider_unreachable(service, provider):
    provider.reachable = False

    report = run(service.health())

    assert report["status"] == "unhealthy"
    assert report["details"]["embedding"]["connected"] is False
    assert "error" in report["details"]["embedding"]


def test_health_reports_missing_model(service, provider):
    provider.models = ["llama3:latest"]

    report = run(service.health())

    assert report["status"] == "healthy"
    assert report["details"]["embedding"]["model_available"] is False


def test_health_catalog_failure_is_informational(service, catalog):
    catalog.broken.add("ingredients")

    report = run(service.health())

    assert report["status"] == "healthy"
    assert report["details"]["catalog"]["recipes"] == 3
    assert report["details"]["catalog"]["ingredients"] is None
    assert "ingredients" in report["details"]["catalog"]["errors"]


def test_stats(service):
    run(service.search_recipes("tropical"))
    run(service.search_recipes("tropical"))

    stats = service.get_stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["embedding_model"] == "nomic-embed-text"
    assert stats["catalog_location"] == "memory://catalog"
