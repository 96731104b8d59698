"""
Mock Embedding Provider - Deterministic pseudo-random vectors.

Stands in for a real embedding model in tests and offline runs. The same
text always maps to the same unit vector.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Sequence

import numpy as np

logger = logging.getLogger(__name__)

__all__ = ["MockEmbeddingProvider"]


class MockEmbeddingProvider:
    """
    Hash-seeded embedding provider.

    Example:
        >>> embedder = MockEmbeddingProvider(dimension=384)
        >>> vector = await embedder.embed("escrow shortage")
    """

    def __init__(self, dimension: int = 384) -> None:
        self.dimension = dimension

    def _vector(self, text: str) -> list[float]:
        if not text or not text.strip():
            return []

        seed = int.from_bytes(hashlib.sha256(text.encode("utf-8")).digest()[:8], "big")
        rng = np.random.default_rng(seed)
        vector = rng.uniform(-1.0, 1.0, self.dimension)
        vector /= np.linalg.norm(vector)
        return vector.tolist()

    async def embed(self, text: str) -> list[float]:
        """Embed a single text."""
        return self._vector(text)

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed many texts, preserving order."""
        vectors = [self._vector(text) for text in texts]
        logger.debug(
            "Generated %d mock embeddings (dimension=%d)", len(vectors), self.dimension
        )
        return vectors
