"""
Tests for Ollama Client adapter.
"""

from __future__ import annotations

import json

import httpx
import pytest

from .client import OllamaClient


def make_client(handler) -> OllamaClient:
    return OllamaClient("http://ollama.test", transport=httpx.MockTransport(handler))


async def test_generate_posts_prompt():
    """Test generate sends a non-streaming request and returns the reply."""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"response": "Escrow pays taxes."})

    client = make_client(handler)
    text = await client.generate("llama3.2", "Summarize", system="Be brief", temperature=0.1)
    await client.close()

    assert text == "Escrow pays taxes."
    assert seen["path"] == "/api/generate"
    assert seen["body"]["model"] == "llama3.2"
    assert seen["body"]["stream"] is False
    assert seen["body"]["system"] == "Be brief"
    assert seen["body"]["options"] == {"temperature": 0.1}


async def test_embed_returns_one_vector_per_input():
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        assert request.url.path == "/api/embed"
        return httpx.Response(
            200, json={"embeddings": [[float(i), 1.0] for i, _ in enumerate(body["input"])]}
        )

    client = make_client(handler)
    vectors = await client.embed("nomic-embed-text", ["escrow", "insurance"])
    await client.close()

    assert vectors == [[0.0, 1.0], [1.0, 1.0]]


async def test_embed_empty_input_skips_request():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    client = make_client(handler)
    assert await client.embed("nomic-embed-text", []) == []


async def test_http_error_status_raises():
    client = make_client(lambda request: httpx.Response(500, json={"error": "boom"}))

    with pytest.raises(httpx.HTTPStatusError):
        await client.generate("llama3.2", "hi")
    await client.close()


async def test_list_models():
    client = make_client(
        lambda request: httpx.Response(
            200, json={"models": [{"name": "llama3.2"}, {"name": "nomic-embed-text"}]}
        )
    )
    assert await client.list_models() == ["llama3.2", "nomic-embed-text"]
    await client.close()
