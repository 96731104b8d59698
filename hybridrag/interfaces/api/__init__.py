"""
API Interface - FastAPI REST API.

Endpoints:
- POST /api/ingest
- POST /api/ask
- GET /health
"""

from .main import app, create_app

__all__ = ["app", "create_app"]
