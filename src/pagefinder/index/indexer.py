"""Document indexing pipeline."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from pagefinder.index.storage import IndexRegistry
from pagefinder.index.tfidf import build_index
from pagefinder.ingestion.pdf_loader import extract_pages
from pagefinder.models import DocumentIndex

LOGGER = logging.getLogger(__name__)


class Indexer:
    """Builds document indexes and publishes them to a registry."""

    def __init__(self, registry: IndexRegistry) -> None:
        self.registry = registry

    def ingest(
        self,
        document_id: str,
        name: str,
        pages: Sequence[str],
        *,
        source_location: str = "",
    ) -> DocumentIndex:
        """Index extracted page texts under ``document_id``.

        The index is fully built before it is handed to the registry, so
        concurrent readers never observe a partial document.
        """
        idf, vectors = build_index(pages)
        document = DocumentIndex(
            id=document_id,
            name=name,
            source_location=source_location,
            pages=tuple(pages),
            idf=idf,
            vectors=tuple(vectors),
        )
        self.registry.put(document_id, document)
        LOGGER.info(
            "Indexed %s (%s): %d pages, %d terms",
            document_id,
            name,
            document.page_count,
            len(idf),
        )
        return document

    def ingest_pdf(
        self,
        path: Path,
        *,
        document_id: str | None = None,
        name: str | None = None,
        source_location: str | None = None,
    ) -> DocumentIndex:
        """Extract a PDF's pages and index them."""
        pages = extract_pages(path)
        if not any(page.strip() for page in pages):
            LOGGER.warning("No text extracted from %s", path)
        return self.ingest(
            document_id or path.name,
            name or path.name,
            pages,
            source_location=source_location if source_location is not None else str(path),
        )
