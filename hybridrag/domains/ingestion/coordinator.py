"""
Ingestion Coordinator - Chunk, enrich, embed and index documents.

Pipeline per document:
1. Split content with the Chunker
2. Summarize / extract keywords per chunk (optional, non-fatal)
3. Embed content, title, keywords and summary in four parallel batches

All chunks of the call are indexed together at the end, so a caller sees
either a fully indexed batch or an IngestionError. If the keyword index
rejects the batch, the vector index write is rolled back first.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from hybridrag.config.errors import ErrorCode, HybridRagError, IngestionError

from .chunker import Chunker
from .models import Chunk, Document, IngestionOptions, IngestionResult

if TYPE_CHECKING:
    from hybridrag.domains.search.contracts import KeywordIndex, VectorIndex

    from .contracts import EmbeddingProvider, LanguageModelClient

logger = logging.getLogger(__name__)

__all__ = ["IngestionCoordinator", "fallback_summary", "SUMMARY_FALLBACK_LENGTH"]

SUMMARY_FALLBACK_LENGTH = 100


def fallback_summary(text: str) -> str:
    """Truncated text used when no generated summary is available."""
    if len(text) > SUMMARY_FALLBACK_LENGTH:
        return text[:SUMMARY_FALLBACK_LENGTH] + "..."
    return text


class IngestionCoordinator:
    """
    Drives chunking, enrichment and embedding, then publishes to both indexes.

    Example:
        >>> coordinator = IngestionCoordinator(embedder, llm, vector_index, keyword_index)
        >>> result = await coordinator.ingest([Document(title="Escrow", content="...")])
    """

    def __init__(
        self,
        embedder: EmbeddingProvider,
        llm: LanguageModelClient,
        vector_index: VectorIndex,
        keyword_index: KeywordIndex,
        options: IngestionOptions | None = None,
    ) -> None:
        """
        Initialize coordinator.

        Args:
            embedder: Embedding provider for the four chunk aspects
            llm: Language model for summaries and keywords
            vector_index: Destination embedding index
            keyword_index: Destination BM25 index
            options: Chunking and enrichment settings
        """
        self._embedder = embedder
        self._llm = llm
        self._vector = vector_index
        self._keyword = keyword_index
        self.options = options or IngestionOptions()
        self._chunker = Chunker(self.options.chunk_size, self.options.chunk_overlap)

    async def ingest(self, documents: Sequence[Document]) -> IngestionResult:
        """
        Ingest documents.

        Args:
            documents: Documents to chunk and index

        Returns:
            Counts of documents and chunks indexed

        Raises:
            IngestionError: Any document failed, or indexing failed
        """
        all_chunks: list[Chunk] = []

        for document in documents:
            logger.info("Processing document: %s (id=%s)", document.title, document.id)
            try:
                chunks = await self._process_document(document)
            except Exception as e:
                logger.exception("Failed to process document %s", document.id)
                if isinstance(e, HybridRagError):
                    details = {"document_id": document.id, **e.details}
                    raise IngestionError(
                        f"Failed to process document {document.id}: {e.message}", details
                    ) from e
                raise IngestionError(
                    f"Failed to process document {document.id}: {e}",
                    {"document_id": document.id},
                ) from e

            all_chunks.extend(chunks)
            logger.info("Created %d chunks for document %s", len(chunks), document.id)

        logger.info("Indexing %d total chunks", len(all_chunks))
        try:
            replaced = await self._vector.index(all_chunks)
        except Exception as e:
            logger.exception("Failed to index %d chunks", len(all_chunks))
            raise IngestionError(
                f"Failed to index chunks: {e}",
                {"chunk_count": len(all_chunks)},
                code=ErrorCode.INGESTION_INDEXING_FAILED,
            ) from e

        try:
            await self._keyword.index(all_chunks)
        except Exception as e:
            logger.exception("Failed to index %d chunks", len(all_chunks))
            await self._rollback_vector(all_chunks, replaced)
            raise IngestionError(
                f"Failed to index chunks: {e}",
                {"chunk_count": len(all_chunks)},
                code=ErrorCode.INGESTION_INDEXING_FAILED,
            ) from e

        logger.info(
            "Successfully ingested %d documents with %d chunks",
            len(documents),
            len(all_chunks),
        )
        return IngestionResult(
            documents_ingested=len(documents),
            chunks_indexed=len(all_chunks),
            chunk_ids=[c.id for c in all_chunks],
        )

    async def _rollback_vector(
        self, chunks: Sequence[Chunk], replaced: Sequence[Chunk]
    ) -> None:
        """Undo a vector-index write, restoring the chunk versions it replaced."""
        logger.warning("Rolling back %d chunks from vector index", len(chunks))
        try:
            await self._vector.remove([c.id for c in chunks])
            if replaced:
                await self._vector.index(replaced)
        except Exception:
            # The indexing error is still raised to the caller
            logger.exception("Vector index rollback failed")

    async def _process_document(self, document: Document) -> list[Chunk]:
        """Turn one document into fully embedded chunks."""
        segments = self._chunker.chunk(document.content)
        if not segments:
            return []

        enriched = await asyncio.gather(
            *(self._enrich(document, i, text) for i, text in enumerate(segments))
        )
        return await self._embed(list(enriched))

    async def _enrich(self, document: Document, index: int, text: str) -> Chunk:
        """Build a chunk and attach summary and keywords."""
        chunk_id = Chunk.make_id(document.id, index)
        keywords = list(document.keywords)
        summary = ""

        if self.options.generate_summaries and text.strip():
            try:
                summary = await self._llm.summarize(text)
            except Exception as e:
                logger.warning("Failed to generate summary for chunk %s: %s", chunk_id, e)
                summary = fallback_summary(text)

        if self.options.extract_keywords and not keywords and text.strip():
            try:
                keywords.extend(await self._llm.extract_keywords(text))
            except Exception as e:
                logger.warning("Failed to extract keywords for chunk %s: %s", chunk_id, e)

        return Chunk(
            id=chunk_id,
            document_id=document.id,
            chunk_index=index,
            text=text,
            title=document.title,
            keywords=keywords,
            summary=summary,
            metadata=dict(document.metadata),
        )

    async def _embed(self, chunks: list[Chunk]) -> list[Chunk]:
        """Embed the four aspects of every chunk in parallel batches."""
        content, title, keyword, summary = await asyncio.gather(
            self._embedder.embed_batch([c.text for c in chunks]),
            self._embedder.embed_batch([c.title for c in chunks]),
            self._embedder.embed_batch([" ".join(c.keywords) for c in chunks]),
            self._embedder.embed_batch([c.summary for c in chunks]),
        )

        for name, batch in (
            ("content", content),
            ("title", title),
            ("keyword", keyword),
            ("summary", summary),
        ):
            if len(batch) != len(chunks):
                raise IngestionError(
                    f"Embedding provider returned {len(batch)} {name} vectors for {len(chunks)} chunks",
                    {"aspect": name, "expected": len(chunks), "received": len(batch)},
                )

        embedded = [
            chunk.model_copy(
                update={
                    "content_embedding": list(content[i]),
                    "title_embedding": list(title[i]),
                    "keyword_embedding": list(keyword[i]),
                    "summary_embedding": list(summary[i]),
                }
            )
            for i, chunk in enumerate(chunks)
        ]

        logger.info("Generated embeddings for %d chunks", len(embedded))
        return embedded
