"""
RAG Routes - Document ingestion and hybrid retrieval endpoints.
"""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from hybridrag.config import HybridRagError
from hybridrag.config.errors import ErrorCode
from hybridrag.domains.ingestion import Document, IngestionCoordinator
from hybridrag.domains.search import RetrievalOrchestrator
from hybridrag.interfaces.api.deps import get_ingestion_coordinator, get_orchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


class DocumentItem(BaseModel):
    """Document in an ingest request."""

    id: str | None = None
    title: str = ""
    content: str = ""
    keywords: list[str] | None = None
    metadata: dict[str, str] | None = None


class IngestRequest(BaseModel):
    """Ingest request body."""

    documents: list[DocumentItem] = Field(default_factory=list)


class IngestResponse(BaseModel):
    """Ingest response."""

    success: bool
    documents_ingested: int
    chunks_indexed: int
    message: str


class AskRequest(BaseModel):
    """Retrieval request body."""

    query: str = Field(..., min_length=1, description="User query")
    top_k: int = Field(default=10, ge=1, le=100)


class RetrievedChunkItem(BaseModel):
    """Single retrieved chunk."""

    chunk_id: str
    document_id: str
    title: str
    text: str
    chunk_index: int
    keywords: list[str]
    summary: str
    metadata: dict[str, str]


class AskResponse(BaseModel):
    """Retrieval response."""

    original_query: str
    expanded_queries: list[str]
    retrieved_chunks: list[RetrievedChunkItem]


@router.post("/ingest", response_model=IngestResponse)
async def ingest(
    request: IngestRequest,
    coordinator: IngestionCoordinator = Depends(get_ingestion_coordinator),
):
    """
    Ingest documents into both indexes.

    - **documents**: list of {id?, title, content, keywords?, metadata?}

    Documents without an id get a generated one.
    """
    if not request.documents:
        raise HybridRagError(ErrorCode.VALIDATION_ERROR, "No documents provided")

    logger.info("Ingesting %d documents", len(request.documents))

    documents = [
        Document(
            id=item.id or uuid.uuid4().hex,
            title=item.title,
            content=item.content,
            keywords=item.keywords or [],
            metadata=item.metadata or {},
        )
        for item in request.documents
    ]

    result = await coordinator.ingest(documents)

    return IngestResponse(
        success=True,
        documents_ingested=result.documents_ingested,
        chunks_indexed=result.chunks_indexed,
        message="Documents successfully ingested and indexed",
    )


@router.post("/ask", response_model=AskResponse)
async def ask(
    request: AskRequest,
    orchestrator: RetrievalOrchestrator = Depends(get_orchestrator),
):
    """
    Retrieve the most relevant chunks for a query.

    - **query**: Search query text
    - **top_k**: Maximum chunks returned (1-100)
    """
    logger.info("Processing query: %s", request.query[:100])

    result = await orchestrator.retrieve_with_details(request.query, request.top_k)

    return AskResponse(
        original_query=result.query,
        expanded_queries=result.expanded_queries,
        retrieved_chunks=[
            RetrievedChunkItem(
                chunk_id=chunk.id,
                document_id=chunk.document_id,
                title=chunk.title,
                text=chunk.text,
                chunk_index=chunk.chunk_index,
                keywords=chunk.keywords,
                summary=chunk.summary,
                metadata=chunk.metadata,
            )
            for chunk in result.chunks
        ],
    )
