"""
Health Routes - System health and status endpoints.
"""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter

from hybridrag import __version__

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "hybridrag",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/api")
async def api_info() -> dict[str, Any]:
    """API info endpoint."""
    return {
        "name": "hybridrag API",
        "version": __version__,
        "description": "Hybrid BM25 + embedding document retrieval",
        "docs": "/docs",
    }
