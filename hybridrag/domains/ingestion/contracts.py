"""
Ingestion Contracts - Interfaces for ingestion domain and its collaborators.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from .models import Document, IngestionResult


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Contract for text embedding backends."""

    async def embed(self, text: str) -> list[float]:
        """
        Embed a single text.

        Args:
            text: Input text

        Returns:
            Fixed-length vector, or an empty list for blank text
        """
        ...

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        """
        Embed many texts.

        Args:
            texts: Input texts

        Returns:
            One vector per input, in input order (blank text -> empty list)
        """
        ...


@runtime_checkable
class LanguageModelClient(Protocol):
    """Contract for the language-model calls used for enrichment and expansion."""

    async def expand_query(self, query: str) -> list[str]:
        """Generate alternate phrasings of a query."""
        ...

    async def summarize(self, text: str) -> str:
        """Generate a short summary of text."""
        ...

    async def extract_keywords(self, text: str) -> list[str]:
        """Extract keywords from text."""
        ...


@runtime_checkable
class DocumentIngestor(Protocol):
    """Contract for ingestion implementations."""

    async def ingest(self, documents: Sequence[Document]) -> IngestionResult:
        """Chunk, enrich, embed and index documents."""
        ...
