"""
Error Taxonomy - Consistent error codes across the application.

Usage:
    from hybridrag.config.errors import ErrorCode, HybridRagError

    raise HybridRagError(ErrorCode.INGESTION_FAILED, "Embedding batch failed")
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standardized error codes for machine-readable error responses."""

    # Ingestion errors
    INGESTION_FAILED = "INGESTION_FAILED"
    INGESTION_INDEXING_FAILED = "INGESTION_INDEXING_FAILED"

    # Search errors
    SEARCH_INVALID_QUERY = "SEARCH_INVALID_QUERY"
    SEARCH_INDEX_UNAVAILABLE = "SEARCH_INDEX_UNAVAILABLE"

    # Collaborator errors
    LLM_UNAVAILABLE = "LLM_UNAVAILABLE"
    LLM_RATE_LIMITED = "LLM_RATE_LIMITED"
    LLM_INVALID_RESPONSE = "LLM_INVALID_RESPONSE"
    LLM_AUTH_FAILED = "LLM_AUTH_FAILED"
    EMBEDDING_UNAVAILABLE = "EMBEDDING_UNAVAILABLE"

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"


class HybridRagError(Exception):
    """Base exception with error code support."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(f"[{code.value}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to API-friendly dictionary."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


# Domain-specific exceptions for cleaner imports
class IngestionError(HybridRagError):
    """Ingestion domain errors. Always fatal for the whole ingestion call."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        code: ErrorCode = ErrorCode.INGESTION_FAILED,
    ) -> None:
        super().__init__(code, message, details)


class SearchError(HybridRagError):
    """Search domain errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        code: ErrorCode = ErrorCode.SEARCH_INVALID_QUERY,
    ) -> None:
        super().__init__(code, message, details)


class LLMError(HybridRagError):
    """LLM/model errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.LLM_UNAVAILABLE, message, details)


class EmbeddingError(HybridRagError):
    """Embedding provider errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.EMBEDDING_UNAVAILABLE, message, details)
