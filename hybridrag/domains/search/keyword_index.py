"""
Keyword Index - In-memory inverted index with BM25 scoring.

Tokenizer: lower-case, split on non-word runs, drop tokens shorter than
three characters and stop words.

Index text per chunk: text + title + keywords + summary.
"""

from __future__ import annotations

import asyncio
import logging
import math
import re
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field

from hybridrag.domains.ingestion.models import Chunk

from .models import ScoredResult

logger = logging.getLogger(__name__)

__all__ = ["InMemoryKeywordIndex", "tokenize", "STOP_WORDS", "K1", "B"]

# BM25 parameters
K1 = 1.5
B = 0.75

MIN_TOKEN_LENGTH = 3

STOP_WORDS = frozenset(
    {
        "the", "is", "at", "which", "on", "a", "an", "and", "or", "but",
        "in", "with", "to", "for", "of", "as", "by", "that", "this", "it",
        "from", "are", "was", "were", "been", "be", "have", "has", "had",
        "do", "does", "did", "will", "would", "could", "should", "may", "might",
    }
)

_SPLIT_RE = re.compile(r"\W+")


def tokenize(text: str) -> list[str]:
    """Split text into index terms, keeping duplicates."""
    if not text or not text.strip():
        return []
    return [
        token
        for token in _SPLIT_RE.split(text.lower())
        if len(token) >= MIN_TOKEN_LENGTH and token not in STOP_WORDS
    ]


@dataclass(frozen=True)
class _IndexState:
    """Immutable snapshot of the index, swapped in whole on every write."""

    chunks: dict[str, Chunk] = field(default_factory=dict)
    # term -> chunk id -> term frequency
    postings: dict[str, dict[str, int]] = field(default_factory=dict)
    doc_lengths: dict[str, int] = field(default_factory=dict)
    avg_doc_length: float = 0.0


class InMemoryKeywordIndex:
    """
    BM25 keyword index over chunks.

    Example:
        >>> index = InMemoryKeywordIndex()
        >>> await index.index(chunks)
        >>> results = await index.search("escrow shortage", top_k=20)
    """

    def __init__(self, k1: float = K1, b: float = B) -> None:
        self.k1 = k1
        self.b = b
        self._state = _IndexState()
        self._write_lock = asyncio.Lock()

    async def index(self, chunks: Sequence[Chunk]) -> list[Chunk]:
        """
        Upsert chunks by id and refresh corpus statistics.

        Re-indexing an id drops its previous postings first.

        Args:
            chunks: Chunks to add or replace

        Returns:
            Previously indexed versions of the replaced chunks
        """
        async with self._write_lock:
            replaced = {
                chunk.id: self._state.chunks[chunk.id]
                for chunk in chunks
                if chunk.id in self._state.chunks
            }
            state = self._rebuild(upserts=chunks)

        logger.info(
            "Indexed %d chunks in keyword index (total=%d, terms=%d, avg_len=%.2f)",
            len(chunks),
            len(state.chunks),
            len(state.postings),
            state.avg_doc_length,
        )
        return list(replaced.values())

    async def remove(self, chunk_ids: Sequence[str]) -> None:
        """Drop chunks by id and refresh corpus statistics; unknown ids are ignored."""
        async with self._write_lock:
            state = self._rebuild(removals=chunk_ids)

        logger.info(
            "Removed chunks from keyword index (total=%d, avg_len=%.2f)",
            len(state.chunks),
            state.avg_doc_length,
        )

    def _rebuild(
        self,
        upserts: Sequence[Chunk] = (),
        removals: Sequence[str] = (),
    ) -> _IndexState:
        """Copy the current state, apply a write and publish it. Caller holds the lock."""
        state = self._state
        docs = dict(state.chunks)
        postings = dict(state.postings)
        lengths = dict(state.doc_lengths)
        copied: set[str] = set()

        def writable(term: str) -> dict[str, int]:
            # Copy a posting list before its first mutation in this write
            if term not in copied:
                postings[term] = dict(postings.get(term, {}))
                copied.add(term)
            return postings[term]

        def drop(chunk_id: str) -> None:
            previous = docs.pop(chunk_id, None)
            if previous is None:
                return
            lengths.pop(chunk_id, None)
            for term in set(tokenize(previous.indexable_text())):
                plist = writable(term)
                plist.pop(chunk_id, None)
                if not plist:
                    del postings[term]
                    copied.discard(term)

        for chunk_id in removals:
            drop(chunk_id)

        for chunk in upserts:
            drop(chunk.id)
            terms = tokenize(chunk.indexable_text())
            docs[chunk.id] = chunk
            lengths[chunk.id] = len(terms)
            for term, tf in Counter(terms).items():
                writable(term)[chunk.id] = tf

        # Full recompute keeps BM25 consistent with the current corpus
        avg = sum(lengths.values()) / len(lengths) if lengths else 0.0

        self._state = _IndexState(
            chunks=docs,
            postings=postings,
            doc_lengths=lengths,
            avg_doc_length=avg,
        )
        return self._state

    async def search(self, query: str, top_k: int) -> list[ScoredResult]:
        """
        Score chunks against a query with BM25.

        Args:
            query: Free-text query
            top_k: Maximum number of results

        Returns:
            Results sorted by (score desc, chunk id asc)
        """
        state = self._state
        if top_k <= 0 or not state.chunks:
            return []

        query_terms = tokenize(query)
        if not query_terms:
            return []

        n_docs = len(state.chunks)
        avg_len = state.avg_doc_length or 1.0
        scores: dict[str, float] = {}

        for term in dict.fromkeys(query_terms):
            plist = state.postings.get(term)
            if not plist:
                continue

            idf = self._idf(n_docs, len(plist))
            for chunk_id, tf in plist.items():
                norm_len = state.doc_lengths[chunk_id] / avg_len
                component = idf * (tf * (self.k1 + 1)) / (
                    tf + self.k1 * (1 - self.b + self.b * norm_len)
                )
                scores[chunk_id] = scores.get(chunk_id, 0.0) + component

        ranked = sorted(scores.items(), key=lambda item: (-item[1], item[0]))
        results = [
            ScoredResult(chunk=state.chunks[chunk_id], score=score, source="keyword")
            for chunk_id, score in ranked[:top_k]
        ]

        logger.debug("Keyword search returned %d results", len(results))
        return results

    @staticmethod
    def _idf(n_docs: int, doc_freq: int) -> float:
        return math.log((n_docs - doc_freq + 0.5) / (doc_freq + 0.5) + 1.0)

    def idf(self, term: str) -> float:
        """Inverse document frequency of a (raw) term in the current corpus."""
        state = self._state
        tokens = tokenize(term)
        if not tokens:
            return 0.0
        return self._idf(len(state.chunks), len(state.postings.get(tokens[0], {})))

    def document_frequency(self, term: str) -> int:
        """Number of chunks containing a term."""
        tokens = tokenize(term)
        if not tokens:
            return 0
        return len(self._state.postings.get(tokens[0], {}))

    def get(self, chunk_id: str) -> Chunk | None:
        """Get an indexed chunk by id."""
        return self._state.chunks.get(chunk_id)

    async def clear(self) -> None:
        """Drop every indexed chunk."""
        async with self._write_lock:
            self._state = _IndexState()

    @property
    def size(self) -> int:
        """Get number of indexed chunks."""
        return len(self._state.chunks)

    @property
    def avg_doc_length(self) -> float:
        """Mean token count across indexed chunks."""
        return self._state.avg_doc_length
