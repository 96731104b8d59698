"""
Embedding Providers - Real backends behind the EmbeddingProvider contract.

- SentenceTransformerEmbedder: local sentence-transformers model
- OllamaEmbedder: Ollama /api/embed

Both return an empty vector for blank text and preserve input order.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

import httpx

from hybridrag.config.errors import EmbeddingError

if TYPE_CHECKING:
    from sentence_transformers import SentenceTransformer

    from hybridrag.adapters.ollama import OllamaClient

logger = logging.getLogger(__name__)

__all__ = ["SentenceTransformerEmbedder", "OllamaEmbedder"]


def _split_blank(texts: Sequence[str]) -> tuple[list[int], list[str]]:
    """Positions and values of the non-blank texts."""
    positions = [i for i, t in enumerate(texts) if t and t.strip()]
    return positions, [texts[i] for i in positions]


def _scatter(total: int, positions: list[int], vectors: list[list[float]]) -> list[list[float]]:
    """Place vectors back at their positions, empty vectors elsewhere."""
    out: list[list[float]] = [[] for _ in range(total)]
    for pos, vector in zip(positions, vectors):
        out[pos] = vector
    return out


class SentenceTransformerEmbedder:
    """
    Local embedding model via sentence-transformers.

    Example:
        >>> embedder = SentenceTransformerEmbedder("all-MiniLM-L6-v2")
        >>> vectors = await embedder.embed_batch(["escrow", "shortage"])
    """

    def __init__(self, model_name: str = "all-MiniLM-L6-v2") -> None:
        self.model_name = model_name
        self._model: SentenceTransformer | None = None

    def _get_model(self) -> SentenceTransformer:
        """Load model on first use."""
        if self._model is None:
            from sentence_transformers import SentenceTransformer

            logger.info("Loading embedding model %s", self.model_name)
            self._model = SentenceTransformer(self.model_name)
        return self._model

    def _encode(self, texts: list[str]) -> list[list[float]]:
        """Encode texts (sync helper for to_thread)."""
        embeddings = self._get_model().encode(texts)
        return [list(map(float, row)) for row in embeddings]

    async def embed(self, text: str) -> list[float]:
        """Embed a single text."""
        vectors = await self.embed_batch([text])
        return vectors[0]

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed many texts, preserving order."""
        positions, values = _split_blank(texts)
        if not values:
            return [[] for _ in texts]

        vectors = await asyncio.to_thread(self._encode, values)
        return _scatter(len(texts), positions, vectors)


class OllamaEmbedder:
    """Embeddings served by an Ollama model."""

    def __init__(self, client: OllamaClient, model: str = "nomic-embed-text") -> None:
        self._client = client
        self.model = model

    async def embed(self, text: str) -> list[float]:
        """Embed a single text."""
        vectors = await self.embed_batch([text])
        return vectors[0]

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed many texts, preserving order."""
        positions, values = _split_blank(texts)
        if not values:
            return [[] for _ in texts]

        try:
            vectors = await self._client.embed(self.model, values)
        except httpx.HTTPError as e:
            raise EmbeddingError(f"Ollama embedding failed: {e}", {"model": self.model}) from e

        if len(vectors) != len(values):
            raise EmbeddingError(
                "Ollama returned a different number of embeddings than inputs",
                {"expected": len(values), "received": len(vectors)},
            )
        return _scatter(len(texts), positions, vectors)
