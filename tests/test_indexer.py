"""Tests for Indexer."""

from unittest.mock import patch

import pytest

from pagefinder.index.indexer import Indexer
from pagefinder.index.storage import IndexRegistry
from pagefinder.ingestion.pdf_loader import PDFExtractionError


@pytest.fixture
def registry():
    return IndexRegistry(max_indexes=5)


class TestIngest:
    """Test Indexer.ingest."""

    def test_ingest_builds_complete_index(self, registry):
        indexer = Indexer(registry)

        document = indexer.ingest(
            "abc123", "animals.pdf", ["the cat sat", "the dog ran"], source_location="/uploads/abc123"
        )

        assert document.id == "abc123"
        assert document.name == "animals.pdf"
        assert document.source_location == "/uploads/abc123"
        assert document.pages == ("the cat sat", "the dog ran")
        assert len(document.vectors) == 2
        assert set(document.idf) == {"the", "cat", "sat", "dog", "ran"}
        assert registry.get("abc123") is document

    def test_ingest_empty_document(self, registry):
        document = Indexer(registry).ingest("empty", "empty.pdf", [])

        assert document.page_count == 0
        assert dict(document.idf) == {}
        assert registry.get("empty") is document

    def test_index_is_not_published_before_it_is_built(self, registry):
        """The registry only ever sees a finished index."""
        seen = []
        original_put = registry.put

        def spy_put(document_id, index):
            seen.append((document_id, index.page_count, len(index.vectors)))
            original_put(document_id, index)

        registry.put = spy_put
        Indexer(registry).ingest("doc", "doc.pdf", ["one page", "two page", "three"])

        assert seen == [("doc", 3, 3)]

    def test_ingest_respects_capacity(self):
        registry = IndexRegistry(max_indexes=2)
        indexer = Indexer(registry)
        for name in ("a", "b", "c"):
            indexer.ingest(name, f"{name}.pdf", [f"text {name}"])

        assert registry.ids() == ["b", "c"]


class TestIngestPdf:
    """Test Indexer.ingest_pdf."""

    @patch("pagefinder.index.indexer.extract_pages")
    def test_ingest_pdf_defaults(self, mock_extract, registry, tmp_path):
        mock_extract.return_value = ["page one text", "page two text"]
        pdf_path = tmp_path / "report.pdf"

        document = Indexer(registry).ingest_pdf(pdf_path)

        mock_extract.assert_called_once_with(pdf_path)
        assert document.id == "report.pdf"
        assert document.name == "report.pdf"
        assert document.source_location == str(pdf_path)
        assert document.page_count == 2

    @patch("pagefinder.index.indexer.extract_pages")
    def test_ingest_pdf_explicit_identity(self, mock_extract, registry, tmp_path):
        mock_extract.return_value = ["content"]

        document = Indexer(registry).ingest_pdf(
            tmp_path / "f00d",
            document_id="f00d",
            name="Original Name.pdf",
            source_location="http://testserver/uploads/f00d",
        )

        assert registry.get("f00d") is document
        assert document.name == "Original Name.pdf"
        assert document.source_location == "http://testserver/uploads/f00d"

    @patch("pagefinder.index.indexer.extract_pages")
    @patch("pagefinder.index.indexer.LOGGER")
    def test_ingest_pdf_warns_when_no_text(self, mock_logger, mock_extract, registry, tmp_path):
        mock_extract.return_value = ["", "   "]

        document = Indexer(registry).ingest_pdf(tmp_path / "scan.pdf")

        mock_logger.warning.assert_called_once()
        assert document.page_count == 2
        assert registry.get("scan.pdf") is document

    @patch("pagefinder.index.indexer.extract_pages")
    def test_ingest_pdf_extraction_error_propagates(self, mock_extract, registry, tmp_path):
        mock_extract.side_effect = PDFExtractionError("broken")

        with pytest.raises(PDFExtractionError):
            Indexer(registry).ingest_pdf(tmp_path / "broken.pdf")

        assert len(registry) == 0
