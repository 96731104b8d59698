"""
Adapters - External service integrations.

All embedding and language-model calls are wrapped here to isolate domains
from third-party changes.
"""

from .embeddings import OllamaEmbedder, SentenceTransformerEmbedder
from .llm import LLMResponse, LLMService
from .mock import MockEmbeddingProvider, MockLLMClient
from .ollama import OllamaClient

__all__ = [
    # Embeddings
    "SentenceTransformerEmbedder",
    "OllamaEmbedder",
    # Language models
    "LLMService",
    "LLMResponse",
    "OllamaClient",
    # Offline stand-ins
    "MockEmbeddingProvider",
    "MockLLMClient",
]
