"""
Hybrid Search - Query expansion, vector + keyword retrieval and score fusion.

Features:
- LLM query expansion (optional, non-fatal)
- Per-variant vector search, merged by max score
- BM25 keyword search on the original query
- Max-normalized weighted score fusion
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from hybridrag.config.errors import ErrorCode, SearchError

from .models import RetrievalOptions, RetrievalResult, ScoredResult

if TYPE_CHECKING:
    from hybridrag.domains.ingestion.contracts import EmbeddingProvider, LanguageModelClient
    from hybridrag.domains.ingestion.models import Chunk

    from .contracts import KeywordIndex, VectorIndex

logger = logging.getLogger(__name__)

__all__ = ["RetrievalOrchestrator", "fuse_scores", "normalize_scores"]


def normalize_scores(results: dict[str, ScoredResult]) -> dict[str, float]:
    """
    Divide every score by the set's maximum.

    An empty set, or one whose maximum is not positive, is divided by 1.
    """
    if not results:
        return {}
    max_score = max(r.score for r in results.values())
    if max_score <= 0:
        max_score = 1.0
    return {chunk_id: r.score / max_score for chunk_id, r in results.items()}


def fuse_scores(
    vector_results: dict[str, ScoredResult],
    keyword_results: dict[str, ScoredResult],
    vector_weight: float,
    keyword_weight: float,
) -> list[ScoredResult]:
    """
    Combine two result sets into one hybrid ranking.

    hybrid = vector_weight * norm_vector + keyword_weight * norm_keyword,
    where a chunk missing from a set contributes 0 for that set.

    Args:
        vector_results: Vector hits keyed by chunk id
        keyword_results: Keyword hits keyed by chunk id
        vector_weight: Weight of the normalized vector score
        keyword_weight: Weight of the normalized keyword score

    Returns:
        Fused results sorted by (score desc, chunk id asc)
    """
    norm_vector = normalize_scores(vector_results)
    norm_keyword = normalize_scores(keyword_results)

    fused: list[ScoredResult] = []
    for chunk_id in vector_results.keys() | keyword_results.keys():
        source = vector_results.get(chunk_id) or keyword_results[chunk_id]
        score = vector_weight * norm_vector.get(chunk_id, 0.0) + keyword_weight * norm_keyword.get(
            chunk_id, 0.0
        )
        fused.append(ScoredResult(chunk=source.chunk, score=score, source="hybrid"))

    fused.sort(key=lambda r: (-r.score, r.chunk.id))
    return fused


class RetrievalOrchestrator:
    """
    Hybrid retrieval combining vector and keyword approaches.

    Example:
        >>> orchestrator = RetrievalOrchestrator(embedder, llm, vector_index, keyword_index)
        >>> chunks = await orchestrator.retrieve("escrow shortage", top_k=5)
    """

    def __init__(
        self,
        embedder: EmbeddingProvider,
        llm: LanguageModelClient,
        vector_index: VectorIndex,
        keyword_index: KeywordIndex,
        options: RetrievalOptions | None = None,
    ) -> None:
        """
        Initialize retrieval orchestrator.

        Args:
            embedder: Embedding provider for query vectors
            llm: Language model used for query expansion
            vector_index: Embedding similarity index
            keyword_index: BM25 keyword index
            options: Fusion weights, expansion and candidate settings
        """
        self._embedder = embedder
        self._llm = llm
        self._vector = vector_index
        self._keyword = keyword_index
        self.options = options or RetrievalOptions()

    async def retrieve(self, query: str, top_k: int = 10) -> list[Chunk]:
        """Return the top_k chunks for a query, best first."""
        result = await self.retrieve_with_details(query, top_k)
        return result.chunks

    async def retrieve_with_details(self, query: str, top_k: int = 10) -> RetrievalResult:
        """
        Execute hybrid retrieval.

        Args:
            query: User query
            top_k: Number of chunks to return

        Returns:
            Ranked results with fused scores and the expansions used

        Raises:
            SearchError: Blank query, non-positive top_k, or both indexes failed
        """
        if not query or not query.strip():
            raise SearchError("Query is required")
        if top_k < 1:
            raise SearchError("top_k must be at least 1", {"top_k": top_k})

        logger.info("Starting retrieval for query='%s'", query[:50])

        expansions = await self._expand(query)
        queries = [query, *expansions]

        vector_results, vector_failed = await self._vector_search_all(queries)
        keyword_results, keyword_failed = await self._keyword_search(query)

        if vector_failed and keyword_failed:
            raise SearchError(
                "Both vector and keyword search failed",
                {"query": query[:100]},
                code=ErrorCode.SEARCH_INDEX_UNAVAILABLE,
            )

        fused = fuse_scores(
            vector_results,
            keyword_results,
            self.options.vector_weight,
            self.options.keyword_weight,
        )
        ranked = fused[:top_k]

        logger.info(
            "Hybrid search: query='%s' -> %d results (queries=%d, vector=%d, keyword=%d)",
            query[:50],
            len(ranked),
            len(queries),
            len(vector_results),
            len(keyword_results),
        )

        return RetrievalResult(query=query, expanded_queries=expansions, results=ranked)

    async def _expand(self, query: str) -> list[str]:
        """Ask the LLM for paraphrases; any failure leaves only the original query."""
        if not self.options.enable_query_expansion or self.options.query_expansion_count == 0:
            return []

        try:
            raw = await self._llm.expand_query(query)
        except Exception as e:
            logger.warning(
                "Query expansion failed, continuing with original query: %s", e, exc_info=True
            )
            return []

        seen = {query.strip().lower()}
        expansions: list[str] = []
        for candidate in raw:
            text = (candidate or "").strip()
            key = text.lower()
            if not text or key in seen:
                continue
            seen.add(key)
            expansions.append(text)
            if len(expansions) >= self.options.query_expansion_count:
                break

        logger.info("Generated %d query expansions", len(expansions))
        return expansions

    async def _vector_search_one(self, query: str) -> list[ScoredResult]:
        embedding = await self._embedder.embed(query)
        return await self._vector.search(embedding, self.options.search_top_k)

    async def _vector_search_all(
        self, queries: list[str]
    ) -> tuple[dict[str, ScoredResult], bool]:
        """
        Search every query variant concurrently and keep each chunk's best score.

        Returns:
            Merged results and whether every variant failed
        """
        outcomes = await asyncio.gather(
            *(self._vector_search_one(q) for q in queries),
            return_exceptions=True,
        )

        merged: dict[str, ScoredResult] = {}
        failures = 0
        for q, outcome in zip(queries, outcomes):
            if isinstance(outcome, BaseException):
                failures += 1
                logger.warning(
                    "Vector search failed for query='%s': %s",
                    q[:50],
                    outcome,
                    exc_info=outcome,
                )
                continue
            for result in outcome:
                current = merged.get(result.chunk.id)
                if current is None or current.score < result.score:
                    merged[result.chunk.id] = result

        logger.info("Vector search found %d unique chunks", len(merged))
        return merged, failures == len(queries)

    async def _keyword_search(self, query: str) -> tuple[dict[str, ScoredResult], bool]:
        """Run BM25 once on the original query; failure yields an empty set."""
        try:
            results = await self._keyword.search(query, self.options.search_top_k)
        except Exception as e:
            logger.warning("Keyword search failed: %s", e, exc_info=True)
            return {}, True

        logger.info("Keyword search found %d chunks", len(results))
        return {r.chunk.id: r for r in results}, False
