"""PDF page text extraction.

Uses PyMuPDF (fitz) for fast PDF text extraction.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterator, List, Tuple

import fitz  # PyMuPDF

from pagefinder.utils.text import normalize_whitespace

LOGGER = logging.getLogger(__name__)


class PDFExtractionError(RuntimeError):
    """Raised when a PDF cannot be opened for text extraction."""


def _open(path: Path) -> "fitz.Document":
    try:
        return fitz.open(path)
    except Exception as exc:
        LOGGER.error("Failed to open PDF %s: %s", path, exc)
        raise PDFExtractionError(f"Unable to open PDF {path.name}: {exc}") from exc


def _page_texts(doc: "fitz.Document", path: Path) -> Iterator[str]:
    for index in range(len(doc)):
        try:
            text = doc[index].get_text() or ""
        except Exception as exc:
            LOGGER.warning("Failed to read page %s in %s: %s", index + 1, path, exc)
            text = ""
        yield normalize_whitespace(text.splitlines())


def _metadata(doc: "fitz.Document", path: Path) -> Dict[str, str]:
    metadata = doc.metadata or {}
    return {
        "title": metadata.get("title") or path.stem,
        "page_count": str(len(doc)),
    }


def iter_page_texts(path: Path) -> Iterator[str]:
    """Yield the text of every page in order.

    A page that fails to read yields an empty string so page numbers stay aligned.
    """
    doc = _open(path)
    try:
        yield from _page_texts(doc, path)
    finally:
        doc.close()


def extract_pages(path: Path) -> List[str]:
    """Extract the text of every page of a PDF."""
    pages = list(iter_page_texts(path))
    LOGGER.debug("Extracted %d pages from %s", len(pages), path)
    return pages


def read_pdf(path: Path) -> Tuple[Dict[str, str], List[str]]:
    """Metadata and page texts of a PDF, read with a single open."""
    doc = _open(path)
    try:
        return _metadata(doc, path), list(_page_texts(doc, path))
    finally:
        doc.close()
