"""
Ollama Adapter - Local model server for generation and embeddings.
"""

from .client import OllamaClient

__all__ = ["OllamaClient"]
