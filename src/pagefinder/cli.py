"""Command line interface for PageFinder."""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from pagefinder.config import AppConfig
from pagefinder.index.indexer import Indexer
from pagefinder.index.search import Searcher
from pagefinder.index.storage import IndexRegistry
from pagefinder.ingestion.pdf_loader import PDFExtractionError, read_pdf

console = Console()
app = typer.Typer(help="PageFinder - find the pages of a PDF that answer a question")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


@app.command()
def search(
    pdf: Path = typer.Argument(..., help="PDF file to search.", exists=True, dir_okay=False),
    query: str = typer.Argument(..., help="Query text"),
    top_k: int = typer.Option(AppConfig().top_k, help="Number of pages to display"),
    min_score: float = typer.Option(AppConfig().min_score, help="Minimum similarity score"),
    snippet_chars: int = typer.Option(80, help="Snippet length shown per page"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Rank the pages of a single PDF against a query."""
    _setup_logging(verbose)
    registry = IndexRegistry(max_indexes=1)
    indexer = Indexer(registry)
    try:
        metadata, pages = read_pdf(pdf)
    except PDFExtractionError as exc:
        raise typer.BadParameter(str(exc)) from exc
    document = indexer.ingest(pdf.name, pdf.name, pages, source_location=str(pdf))

    console.print(f"Searching [bold]{metadata['title']}[/bold] ({document.page_count} pages)...")

    searcher = Searcher(registry, top_k=top_k, min_score=min_score, snippet_chars=snippet_chars)
    results = searcher.search(document.id, query) or []
    if not results:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Page")
    table.add_column("Score")
    table.add_column("Snippet")

    for result in results:
        table.add_row(
            str(result.page_number), f"{result.score:.4f}", result.snippet.replace("\n", " ")
        )

    console.print(table)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(3001, help="Server port"),
    max_indexes: int = typer.Option(None, help="Maximum number of PDF indexes kept in memory"),
    upload_dir: Path = typer.Option(None, "--upload-dir", help="Directory for uploaded PDFs"),
) -> None:
    """Start the upload and query server."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    overrides: dict = {}
    if max_indexes is not None:
        overrides["max_indexes"] = max_indexes
    if upload_dir is not None:
        overrides["upload_dir"] = upload_dir
    try:
        # Importing the web module builds its default app from the environment.
        from pagefinder.web.app import create_app

        config = replace(AppConfig.from_env(), **overrides)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    console.print(
        f"Starting server on http://{host}:{port} (max {config.max_indexes} PDFs in memory)"
    )
    uvicorn.run(
        create_app(config),
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
