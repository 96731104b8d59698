"""
hybridrag - Hybrid document retrieval: BM25 + embedding search with score fusion.

Example:
    >>> from hybridrag.interfaces.api.deps import get_orchestrator
    >>> orchestrator = get_orchestrator()
    >>> chunks = await orchestrator.retrieve("escrow shortage")
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
