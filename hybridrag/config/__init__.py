"""
Configuration - Application settings and error taxonomy.
"""

from .errors import (
    EmbeddingError,
    ErrorCode,
    HybridRagError,
    IngestionError,
    LLMError,
    SearchError,
)
from .settings import Settings, get_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    # Errors
    "ErrorCode",
    "HybridRagError",
    "IngestionError",
    "SearchError",
    "LLMError",
    "EmbeddingError",
]
