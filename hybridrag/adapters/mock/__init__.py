"""
Mock Adapters - Offline collaborators for tests and local runs.
"""

from .embeddings import MockEmbeddingProvider
from .llm import MockLLMClient

__all__ = ["MockEmbeddingProvider", "MockLLMClient"]
