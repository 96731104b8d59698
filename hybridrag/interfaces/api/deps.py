"""
API Dependencies - Dependency injection for FastAPI routes.

Provides singleton collaborators and indexes, selected from settings.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from hybridrag.adapters import (
    LLMService,
    MockEmbeddingProvider,
    MockLLMClient,
    OllamaClient,
    OllamaEmbedder,
    SentenceTransformerEmbedder,
)
from hybridrag.config import HybridRagError, get_settings
from hybridrag.config.errors import ErrorCode
from hybridrag.domains.ingestion import (
    EmbeddingProvider,
    IngestionCoordinator,
    LanguageModelClient,
)
from hybridrag.domains.search import (
    InMemoryKeywordIndex,
    InMemoryVectorIndex,
    RetrievalOrchestrator,
)

logger = logging.getLogger(__name__)


@lru_cache
def get_ollama_client() -> OllamaClient:
    """Get shared Ollama client."""
    return OllamaClient(get_settings().ollama_url)


@lru_cache
def get_embedder() -> EmbeddingProvider:
    """Get embedding provider singleton."""
    settings = get_settings()
    provider = settings.embedding_provider

    if provider == "mock":
        return MockEmbeddingProvider(settings.embedding_dimension)
    if provider == "sentence-transformers":
        return SentenceTransformerEmbedder(settings.embedding_model)
    if provider == "ollama":
        return OllamaEmbedder(get_ollama_client(), settings.ollama_embedding_model)

    raise HybridRagError(
        ErrorCode.VALIDATION_ERROR,
        f"Unknown embedding provider: {provider}",
        {"allowed": ["mock", "sentence-transformers", "ollama"]},
    )


@lru_cache
def get_llm_client() -> LanguageModelClient:
    """Get language model client singleton."""
    settings = get_settings()
    if settings.llm_provider == "mock":
        return MockLLMClient()
    return LLMService(
        settings=settings,
        ollama_client=get_ollama_client(),
        expansion_count=settings.query_expansion_count,
    )


@lru_cache
def get_vector_index() -> InMemoryVectorIndex:
    """Get vector index singleton."""
    return InMemoryVectorIndex()


@lru_cache
def get_keyword_index() -> InMemoryKeywordIndex:
    """Get keyword index singleton."""
    return InMemoryKeywordIndex()


@lru_cache
def get_ingestion_coordinator() -> IngestionCoordinator:
    """Get ingestion coordinator singleton."""
    return IngestionCoordinator(
        embedder=get_embedder(),
        llm=get_llm_client(),
        vector_index=get_vector_index(),
        keyword_index=get_keyword_index(),
        options=get_settings().ingestion_options(),
    )


@lru_cache
def get_orchestrator() -> RetrievalOrchestrator:
    """Get retrieval orchestrator singleton."""
    return RetrievalOrchestrator(
        embedder=get_embedder(),
        llm=get_llm_client(),
        vector_index=get_vector_index(),
        keyword_index=get_keyword_index(),
        options=get_settings().retrieval_options(),
    )


async def init_services() -> None:
    """
    Initialize services on startup.

    This should be called from the FastAPI lifespan handler.
    """
    settings = get_settings()
    get_ingestion_coordinator()
    get_orchestrator()
    logger.info(
        "Services ready: embeddings=%s llm=%s",
        settings.embedding_provider,
        settings.llm_provider,
    )


async def cleanup_services() -> None:
    """Cleanup services on shutdown."""
    llm = get_llm_client()
    if isinstance(llm, LLMService):
        await llm.close()
    elif get_ollama_client.cache_info().currsize:
        await get_ollama_client().close()
