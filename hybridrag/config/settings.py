"""
Settings - Application configuration using Pydantic Settings.

Loads from environment variables and .env files.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from hybridrag.domains.ingestion import IngestionOptions
    from hybridrag.domains.search import RetrievalOptions


class Settings(BaseSettings):
    """Application settings."""

    # Collaborators: "mock" (deterministic, offline), "ollama" or "gemini"
    llm_provider: str = "mock"
    # "mock", "sentence-transformers" or "ollama"
    embedding_provider: str = "mock"

    # Embeddings
    embedding_model: str = "all-MiniLM-L6-v2"
    embedding_dimension: int = 384

    # Ollama
    ollama_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"
    ollama_embedding_model: str = "nomic-embed-text"

    # Gemini (REST, API key)
    gemini_model: str = "gemini-2.0-flash"
    gemini_api_key: str | None = None

    llm_temperature: float = 0.3

    # Ingestion
    chunk_size: int = 500
    chunk_overlap: int = 50
    generate_summaries: bool = True
    extract_keywords: bool = True

    # Retrieval
    vector_weight: float = 0.7
    keyword_weight: float = 0.3
    query_expansion_count: int = 5
    enable_query_expansion: bool = True
    search_top_k: int = 20

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="HYBRIDRAG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def ingestion_options(self) -> IngestionOptions:
        """Build ingestion options from settings."""
        from hybridrag.domains.ingestion import IngestionOptions

        return IngestionOptions(
            chunk_size=self.chunk_size,
            chunk_overlap=self.chunk_overlap,
            generate_summaries=self.generate_summaries,
            extract_keywords=self.extract_keywords,
        )

    def retrieval_options(self) -> RetrievalOptions:
        """Build retrieval options from settings."""
        from hybridrag.domains.search import RetrievalOptions

        return RetrievalOptions(
            vector_weight=self.vector_weight,
            keyword_weight=self.keyword_weight,
            query_expansion_count=self.query_expansion_count,
            enable_query_expansion=self.enable_query_expansion,
            search_top_k=self.search_top_k,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
