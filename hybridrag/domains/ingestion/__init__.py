"""
Ingestion Domain - Documents to indexed chunks.

This domain handles:
- Boundary-aware overlapping chunking
- LLM summaries and keyword extraction (best effort)
- Multi-aspect embeddings
- Batch publishing to the vector and keyword indexes
"""

from .chunker import Chunker, chunk_text
from .contracts import DocumentIngestor, EmbeddingProvider, LanguageModelClient
from .coordinator import IngestionCoordinator, fallback_summary
from .models import Chunk, Document, IngestionOptions, IngestionResult

__all__ = [
    # Contracts
    "DocumentIngestor",
    "EmbeddingProvider",
    "LanguageModelClient",
    # Models
    "Chunk",
    "Document",
    "IngestionOptions",
    "IngestionResult",
    # Implementations
    "Chunker",
    "chunk_text",
    "IngestionCoordinator",
    "fallback_summary",
]
