"""
Search Models - Data types for search domain.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from hybridrag.domains.ingestion.models import Chunk


class ScoredResult(BaseModel):
    """
    Chunk paired with a comparator-specific score.

    Scores from different indexes live on different scales and are only
    comparable after normalization.
    """

    chunk: Chunk
    score: float = 0.0
    source: str = "unknown"  # "vector", "keyword", "hybrid"


class RetrievalOptions(BaseModel):
    """Retrieval and fusion settings."""

    vector_weight: float = Field(default=0.7, ge=0.0)
    keyword_weight: float = Field(default=0.3, ge=0.0)
    query_expansion_count: int = Field(default=5, ge=0)
    enable_query_expansion: bool = True
    search_top_k: int = Field(default=20, ge=1)

    model_config = {"frozen": True}


class RetrievalResult(BaseModel):
    """Ranked chunks for one query, with the expansions that produced them."""

    query: str
    expanded_queries: list[str] = Field(default_factory=list)
    results: list[ScoredResult] = Field(default_factory=list)

    @property
    def chunks(self) -> list[Chunk]:
        """Ranked chunks without scores."""
        return [r.chunk for r in self.results]
