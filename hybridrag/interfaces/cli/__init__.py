"""
CLI Interface - Command-line tools for hybridrag.

Provides commands for:
- Document ingestion
- Hybrid retrieval queries
- Running the API server
"""

from .main import app, main

__all__ = ["app", "main"]
