"""
Ollama Client - Local model server for generation and embeddings.

Features:
- Async HTTP client
- Text generation (/api/generate)
- Batch embeddings (/api/embed)
- Retries with exponential backoff on transport errors
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

__all__ = ["OllamaClient"]

_RETRYABLE = (httpx.TransportError,)


class OllamaClient:
    """
    Ollama local model client.

    Example:
        >>> client = OllamaClient()
        >>> text = await client.generate("llama3.2", "Summarize: ...")
        >>> vectors = await client.embed("nomic-embed-text", ["escrow shortage"])
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize Ollama client.

        Args:
            base_url: Ollama server URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    @retry(
        retry=retry_if_exception_type(_RETRYABLE),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    async def generate(
        self,
        model: str,
        prompt: str,
        system: str | None = None,
        temperature: float = 0.7,
    ) -> str:
        """
        Generate text response.

        Args:
            model: Model name (e.g., "llama3.2")
            prompt: User prompt
            system: Optional system prompt
            temperature: Sampling temperature

        Returns:
            Generated text
        """
        client = await self._get_client()

        payload: dict[str, Any] = {
            "model": model,
            "prompt": prompt,
            "stream": False,
            "options": {"temperature": temperature},
        }
        if system:
            payload["system"] = system

        response = await client.post("/api/generate", json=payload)
        response.raise_for_status()

        data = response.json()
        return data.get("response", "")

    @retry(
        retry=retry_if_exception_type(_RETRYABLE),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    async def embed(self, model: str, texts: Sequence[str]) -> list[list[float]]:
        """
        Embed texts in one request.

        Args:
            model: Embedding model name (e.g., "nomic-embed-text")
            texts: Input texts

        Returns:
            One vector per input text
        """
        if not texts:
            return []

        client = await self._get_client()
        response = await client.post(
            "/api/embed",
            json={"model": model, "input": list(texts)},
        )
        response.raise_for_status()

        data = response.json()
        return [list(map(float, v)) for v in data.get("embeddings", [])]

    async def list_models(self) -> list[str]:
        """List available models."""
        client = await self._get_client()
        response = await client.get("/api/tags")
        response.raise_for_status()

        data = response.json()
        return [m["name"] for m in data.get("models", [])]

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
