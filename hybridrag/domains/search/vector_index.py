"""
Vector Index - Exhaustive cosine-similarity search over multi-aspect embeddings.

Features:
- Async-compatible operations
- Upsert by chunk id
- Max-over-aspects scoring (content, title, keywords, summary)
- Copy-on-write batch publish, so readers never see half a batch
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

import numpy as np

from hybridrag.domains.ingestion.models import Chunk

from .models import ScoredResult

logger = logging.getLogger(__name__)

__all__ = ["InMemoryVectorIndex", "cosine_similarity"]


def cosine_similarity(a: Sequence[float] | np.ndarray, b: Sequence[float] | np.ndarray) -> float:
    """
    Cosine of the angle between two vectors.

    Returns 0.0 when the vectors differ in length, are empty, or either has
    zero magnitude.
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape or va.size == 0:
        return 0.0

    norm_a = float(np.linalg.norm(va))
    norm_b = float(np.linalg.norm(vb))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    return float(np.dot(va, vb) / (norm_a * norm_b))


class InMemoryVectorIndex:
    """
    Brute-force vector index for semantic search.

    Example:
        >>> index = InMemoryVectorIndex()
        >>> await index.index(chunks)
        >>> results = await index.search(query_embedding, top_k=10)
    """

    def __init__(self) -> None:
        # chunk id -> (chunk, non-empty aspect vectors); replaced wholesale on write
        self._entries: dict[str, tuple[Chunk, list[np.ndarray]]] = {}
        self._write_lock = asyncio.Lock()

    async def index(self, chunks: Sequence[Chunk]) -> list[Chunk]:
        """
        Upsert chunks by id.

        Args:
            chunks: Chunks to add or replace

        Returns:
            Previously indexed versions of the replaced chunks
        """
        async with self._write_lock:
            entries = dict(self._entries)
            replaced = {
                chunk.id: entries[chunk.id][0] for chunk in chunks if chunk.id in entries
            }
            for chunk in chunks:
                entries[chunk.id] = (
                    chunk,
                    [np.asarray(v, dtype=np.float64) for v in chunk.embeddings()],
                )
            self._entries = entries

        logger.info(
            "Indexed %d chunks in vector index (total=%d)", len(chunks), len(entries)
        )
        return list(replaced.values())

    async def remove(self, chunk_ids: Sequence[str]) -> None:
        """Drop chunks by id; unknown ids are ignored."""
        async with self._write_lock:
            entries = dict(self._entries)
            for chunk_id in chunk_ids:
                entries.pop(chunk_id, None)
            self._entries = entries

        logger.info("Removed chunks from vector index (total=%d)", len(entries))

    async def search(
        self,
        query_embedding: Sequence[float],
        top_k: int,
    ) -> list[ScoredResult]:
        """
        Search for the chunks most similar to a query embedding.

        Args:
            query_embedding: Query vector
            top_k: Maximum number of results

        Returns:
            Results sorted by (score desc, chunk id asc)
        """
        if len(query_embedding) == 0 or top_k <= 0:
            return []

        entries = self._entries
        if not entries:
            return []

        query = np.asarray(query_embedding, dtype=np.float64)
        results = await asyncio.to_thread(self._scan, entries, query, top_k)

        logger.debug("Vector search returned %d results", len(results))
        return results

    @staticmethod
    def _scan(
        entries: dict[str, tuple[Chunk, list[np.ndarray]]],
        query: np.ndarray,
        top_k: int,
    ) -> list[ScoredResult]:
        """Score every chunk (sync helper for to_thread)."""
        scored: list[tuple[float, str, Chunk]] = []
        for chunk_id, (chunk, aspects) in entries.items():
            if not aspects:
                continue
            best = max(cosine_similarity(query, v) for v in aspects)
            scored.append((best, chunk_id, chunk))

        scored.sort(key=lambda item: (-item[0], item[1]))
        return [
            ScoredResult(chunk=chunk, score=score, source="vector")
            for score, _, chunk in scored[:top_k]
        ]

    def get(self, chunk_id: str) -> Chunk | None:
        """Get an indexed chunk by id."""
        entry = self._entries.get(chunk_id)
        return entry[0] if entry else None

    async def clear(self) -> None:
        """Drop every indexed chunk."""
        async with self._write_lock:
            self._entries = {}

    @property
    def size(self) -> int:
        """Get number of indexed chunks."""
        return len(self._entries)
