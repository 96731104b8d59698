"""
LLM Adapter - Unified interface for language model access.

Supports:
- Ollama for local models
- Gemini via REST with an API key

Usage:
    from hybridrag.adapters.llm import LLMService

    llm = LLMService(provider="ollama")
    expansions = await llm.expand_query("escrow shortage")
"""

from .service import LLMResponse, LLMService, parse_list_response

__all__ = ["LLMService", "LLMResponse", "parse_list_response"]
