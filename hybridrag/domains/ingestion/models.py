"""
Ingestion Models - Data types for ingestion domain.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator

from pydantic import BaseModel, Field, model_validator


class Document(BaseModel):
    """Source document handed to ingestion."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    title: str = ""
    content: str = ""
    keywords: list[str] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)

    model_config = {"frozen": True}


class Chunk(BaseModel):
    """
    Atomic retrievable unit of a document.

    Each embedding is either empty (not computed) or a vector whose length is
    fixed by the embedding provider in use.
    """

    id: str
    document_id: str
    chunk_index: int = Field(..., ge=0)
    text: str
    title: str = ""
    keywords: list[str] = Field(default_factory=list)
    summary: str = ""
    content_embedding: list[float] = Field(default_factory=list)
    title_embedding: list[float] = Field(default_factory=list)
    keyword_embedding: list[float] = Field(default_factory=list)
    summary_embedding: list[float] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @staticmethod
    def make_id(document_id: str, chunk_index: int) -> str:
        """Derive a stable chunk id from its document and position."""
        return f"{document_id}_chunk_{chunk_index}"

    def embeddings(self) -> Iterator[list[float]]:
        """Yield the non-empty aspect embeddings (content, title, keyword, summary)."""
        for vector in (
            self.content_embedding,
            self.title_embedding,
            self.keyword_embedding,
            self.summary_embedding,
        ):
            if vector:
                yield vector

    def indexable_text(self) -> str:
        """Text used for lexical indexing."""
        return " ".join([self.text, self.title, " ".join(self.keywords), self.summary])


class IngestionOptions(BaseModel):
    """Chunking and enrichment settings."""

    chunk_size: int = Field(default=500, ge=1)
    chunk_overlap: int = Field(default=50, ge=0)
    generate_summaries: bool = True
    extract_keywords: bool = True

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_overlap(self) -> IngestionOptions:
        """Overlap must leave a positive stride."""
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        return self


class IngestionResult(BaseModel):
    """Outcome of a successful ingestion call."""

    documents_ingested: int = 0
    chunks_indexed: int = 0
    chunk_ids: list[str] = Field(default_factory=list)
