"""
API Routes.
"""

from . import health, rag

__all__ = ["health", "rag"]
