"""
CLI Main - Typer-based command-line interface.

Indexes are in-memory, so every command builds a fresh engine and ingests
its input files in the same process.

Usage:
    hybridrag ingest docs/*.txt --query "escrow shortage"
    hybridrag ask "escrow shortage" --file docs/escrow.txt
    hybridrag serve
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.text import Text

from hybridrag.domains.ingestion import Document

app = typer.Typer(
    name="hybridrag",
    help="hybridrag - Hybrid BM25 + embedding document retrieval",
    add_completion=False,
)
console = Console()


def load_documents(paths: list[Path], title: str | None = None) -> list[Document]:
    """
    Read documents from disk.

    JSON files hold a list of document objects (or {"documents": [...]});
    any other file becomes one document titled by its file stem, or by
    ``title`` when given.
    """
    documents: list[Document] = []
    for path in paths:
        if path.suffix.lower() == ".json":
            data = json.loads(path.read_text(encoding="utf-8"))
            items = data.get("documents", []) if isinstance(data, dict) else data
            documents.extend(Document.model_validate(item) for item in items)
        else:
            documents.append(
                Document(
                    id=path.stem,
                    title=title or path.stem.replace("_", " "),
                    content=path.read_text(encoding="utf-8"),
                    metadata={"source": str(path)},
                )
            )
    return documents


def _check_paths(paths: list[Path]) -> None:
    for path in paths:
        if not path.exists():
            console.print(f"[red]Error:[/red] File not found: {path}")
            raise typer.Exit(1)


def _load_or_exit(paths: list[Path], title: str | None = None) -> list[Document]:
    """Load documents, reporting unreadable files instead of a traceback."""
    documents: list[Document] = []
    for path in paths:
        try:
            documents.extend(load_documents([path], title))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            console.print(f"[red]Error:[/red] Cannot read {escape(str(path))}: {escape(str(e))}")
            raise typer.Exit(1)
        except ValidationError as e:
            console.print(
                f"[red]Error:[/red] Invalid document in {escape(str(path))}: "
                f"{e.error_count()} validation error(s)"
            )
            for error in e.errors():
                location = ".".join(str(part) for part in error["loc"]) or "document"
                console.print(f"  - {escape(location)}: {escape(error['msg'])}")
            raise typer.Exit(1)
    return documents


def _build_engine(expand: bool = True):
    """Wire collaborators and indexes from settings."""
    from hybridrag.config import get_settings
    from hybridrag.domains.ingestion import IngestionCoordinator
    from hybridrag.domains.search import (
        InMemoryKeywordIndex,
        InMemoryVectorIndex,
        RetrievalOrchestrator,
    )
    from hybridrag.interfaces.api.deps import get_embedder, get_llm_client

    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    embedder = get_embedder()
    llm = get_llm_client()
    vector_index = InMemoryVectorIndex()
    keyword_index = InMemoryKeywordIndex()

    retrieval_options = settings.retrieval_options()
    if not expand:
        retrieval_options = retrieval_options.model_copy(
            update={"enable_query_expansion": False}
        )

    coordinator = IngestionCoordinator(
        embedder, llm, vector_index, keyword_index, settings.ingestion_options()
    )
    orchestrator = RetrievalOrchestrator(
        embedder, llm, vector_index, keyword_index, retrieval_options
    )
    return coordinator, orchestrator


def _print_results(result) -> None:
    """Render a RetrievalResult."""
    if result.expanded_queries:
        console.print("\n[bold]Expanded queries:[/bold]")
        for variant in result.expanded_queries:
            console.print(f"  - {escape(variant)}")

    if not result.results:
        console.print("\n[yellow]No matching chunks.[/yellow]")
        return

    for rank, scored in enumerate(result.results, 1):
        chunk = scored.chunk
        console.print(
            Panel(
                Text(chunk.text),
                title=escape(f"#{rank} {chunk.title} ({chunk.id})"),
                subtitle=f"score {scored.score:.3f}",
            )
        )


@app.command()
def ingest(
    paths: list[Path] = typer.Argument(..., help="Text or JSON document files"),
    title: str | None = typer.Option(None, "--title", "-t", help="Title for text documents"),
    query: str | None = typer.Option(None, "--query", "-q", help="Ask a question afterwards"),
    top_k: int = typer.Option(5, "--top-k", "-k", help="Number of chunks to return"),
) -> None:
    """Chunk, embed and index documents, then report what was indexed."""
    _check_paths(paths)
    asyncio.run(_ingest_async(paths, title, query, top_k))


async def _ingest_async(
    paths: list[Path], title: str | None, query: str | None, top_k: int
) -> None:
    """Async ingestion implementation."""
    from hybridrag.config import HybridRagError

    documents = _load_or_exit(paths, title)
    coordinator, orchestrator = _build_engine()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        progress.add_task(f"Ingesting {len(documents)} documents...", total=None)
        try:
            result = await coordinator.ingest(documents)
        except HybridRagError as e:
            console.print(f"[red]Error:[/red] {escape(e.message)}")
            raise typer.Exit(1)

    table = Table(title="Ingestion Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Documents", str(result.documents_ingested))
    table.add_row("Chunks", str(result.chunks_indexed))
    console.print(table)

    if query:
        try:
            retrieval = await orchestrator.retrieve_with_details(query, top_k)
        except HybridRagError as e:
            console.print(f"[red]Error:[/red] {escape(e.message)}")
            raise typer.Exit(1)
        _print_results(retrieval)


@app.command()
def ask(
    query: str = typer.Argument(..., help="Question or search query"),
    files: list[Path] = typer.Option(..., "--file", "-f", help="Document files to search"),
    top_k: int = typer.Option(5, "--top-k", "-k", help="Number of chunks to return"),
    expand: bool = typer.Option(True, "--expand/--no-expand", help="Use query expansion"),
) -> None:
    """Ingest documents and retrieve the chunks most relevant to a query."""
    _check_paths(files)
    asyncio.run(_ask_async(query, files, top_k, expand))


async def _ask_async(query: str, files: list[Path], top_k: int, expand: bool) -> None:
    """Async retrieval implementation."""
    from hybridrag.config import HybridRagError

    documents = _load_or_exit(files)
    coordinator, orchestrator = _build_engine(expand)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Ingesting...", total=None)
        try:
            await coordinator.ingest(documents)
            progress.update(task, description="Searching...")
            result = await orchestrator.retrieve_with_details(query, top_k)
        except HybridRagError as e:
            console.print(f"[red]Error:[/red] {escape(e.message)}")
            raise typer.Exit(1)

    _print_results(result)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Host to bind"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to bind"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
) -> None:
    """Start the API server."""
    import uvicorn

    console.print("\n[green]Starting hybridrag API server[/green]")
    console.print(f"[dim]http://{host}:{port}[/dim]\n")

    uvicorn.run(
        "hybridrag.interfaces.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


@app.command()
def version() -> None:
    """Show version information."""
    from hybridrag import __version__

    console.print(f"hybridrag v{__version__}")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
