"""
Search Domain - Hybrid retrieval over indexed chunks.

This domain handles:
- Vector similarity search (exhaustive cosine, max over aspects)
- Keyword search (in-memory BM25)
- Query expansion
- Weighted fusion of normalized scores
"""

from .contracts import KeywordIndex, Retriever, VectorIndex
from .hybrid_search import RetrievalOrchestrator, fuse_scores, normalize_scores
from .keyword_index import InMemoryKeywordIndex, tokenize
from .models import RetrievalOptions, RetrievalResult, ScoredResult
from .vector_index import InMemoryVectorIndex, cosine_similarity

__all__ = [
    # Contracts
    "VectorIndex",
    "KeywordIndex",
    "Retriever",
    # Models
    "ScoredResult",
    "RetrievalOptions",
    "RetrievalResult",
    # Implementations
    "InMemoryVectorIndex",
    "InMemoryKeywordIndex",
    "RetrievalOrchestrator",
    "cosine_similarity",
    "fuse_scores",
    "normalize_scores",
    "tokenize",
]
