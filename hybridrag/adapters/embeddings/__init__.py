"""
Embedding Adapters - Text to vector backends.
"""

from .providers import OllamaEmbedder, SentenceTransformerEmbedder

__all__ = ["SentenceTransformerEmbedder", "OllamaEmbedder"]
