"""
Search Contracts - Interfaces for search domain.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from hybridrag.domains.ingestion.models import Chunk

from .models import RetrievalResult, ScoredResult


@runtime_checkable
class VectorIndex(Protocol):
    """Contract for embedding similarity indexes."""

    async def index(self, chunks: Sequence[Chunk]) -> list[Chunk]:
        """Upsert chunks by id, returning the previous versions of replaced ids."""
        ...

    async def remove(self, chunk_ids: Sequence[str]) -> None:
        """Drop chunks by id."""
        ...

    async def search(
        self,
        query_embedding: Sequence[float],
        top_k: int,
    ) -> list[ScoredResult]:
        """Return the top_k most similar chunks, best first."""
        ...


@runtime_checkable
class KeywordIndex(Protocol):
    """Contract for lexical indexes."""

    async def index(self, chunks: Sequence[Chunk]) -> list[Chunk]:
        """Upsert chunks by id, returning the previous versions of replaced ids."""
        ...

    async def remove(self, chunk_ids: Sequence[str]) -> None:
        """Drop chunks by id."""
        ...

    async def search(self, query: str, top_k: int) -> list[ScoredResult]:
        """Return the top_k most relevant chunks, best first."""
        ...


@runtime_checkable
class Retriever(Protocol):
    """Contract for query-time retrieval."""

    async def retrieve(self, query: str, top_k: int = 10) -> list[Chunk]:
        """Return ranked chunks for a query."""
        ...

    async def retrieve_with_details(
        self,
        query: str,
        top_k: int = 10,
    ) -> RetrievalResult:
        """Return ranked chunks with fused scores and expansions used."""
        ...
