"""
Tests for the Ollama embedding provider against a mocked HTTP transport.
"""

import asyncio
import json

import httpx
import pytest

from culinary_search.exceptions import EmbeddingUnavailable
from culinary_search.repositories import OllamaEmbeddingProvider


def make_provider(handler):
    return OllamaEmbeddingProvider(
        model_name="nomic-embed-text",
        base_url="http://ollama.test/",
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


def test_encode_posts_model_and_input():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"embeddings": [[0.1, 0.2, 0.3]]})

    provider = make_provider(handler)

    assert asyncio.run(provider.encode("fruity tropical drinks")) == [0.1, 0.2, 0.3]
    assert seen["path"] == "/api/embed"
    assert seen["body"] == {"model": "nomic-embed-text", "input": "fruity tropical drinks"}


def test_encode_accepts_legacy_response():
    provider = make_provider(lambda request: httpx.Response(200, json={"embedding": [1.0, 2.0]}))

    assert asyncio.run(provider.encode("sour")) == [1.0, 2.0]


def test_encode_without_embedding_fails():
    provider = make_provider(lambda request: httpx.Response(200, json={"embeddings": []}))

    with pytest.raises(EmbeddingUnavailable, match="no embedding"):
        asyncio.run(provider.encode("sour"))


def test_encode_http_error():
    provider = make_provider(lambda request: httpx.Response(500, json={"error": "boom"}))

    with pytest.raises(EmbeddingUnavailable, match="Ollama API error"):
        asyncio.run(provider.encode("sour"))


def test_encode_connection_refused():
    def handler(request):
        raise httpx.ConnectError("Connection refused", request=request)

    provider = make_provider(handler)

    with pytest.raises(EmbeddingUnavailable, match="is Ollama running"):
        asyncio.run(provider.encode("sour"))


def test_encode_timeout():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    provider = make_provider(handler)

    with pytest.raises(EmbeddingUnavailable, match="timed out"):
        asyncio.run(provider.encode("sour"))


def test_list_models():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/tags"
        return httpx.Response(200, json={"models": [{"name": "nomic-embed-text:latest"}, {"name": "llama3"}]})

    provider = make_provider(handler)

    assert asyncio.run(provider.list_models()) == ["nomic-embed-text:latest", "llama3"]


def test_list_models_when_unreachable():
    def handler(request):
        raise httpx.ConnectError("Connection refused", request=request)

    provider = make_provider(handler)

    with pytest.raises(EmbeddingUnavailable, match="unavailable"):
        asyncio.run(provider.list_models())


def test_close_resets_client():
    provider = make_provider(lambda request: httpx.Response(200, json={"models": []}))

    async def scenario():
        await provider.list_models()
        await provider.close()

    asyncio.run(scenario())
    assert provider._client is None
    assert provider.endpoint == "http://ollama.test"
