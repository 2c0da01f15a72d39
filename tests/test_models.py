"""Tests for core data models."""

from __future__ import annotations

import dataclasses

import pytest

from pagefinder.models import Citation, DocumentIndex, QueryResponse, ScoredPage


def _index(**overrides) -> DocumentIndex:
    fields = {
        "id": "abc",
        "name": "doc.pdf",
        "source_location": "/uploads/abc",
        "pages": ("first page", "second page"),
        "idf": {"first": 1.4, "second": 1.4, "page": 1.0},
        "vectors": ({"first": 0.7, "page": 0.5}, {"second": 0.7, "page": 0.5}),
    }
    fields.update(overrides)
    return DocumentIndex(**fields)


class TestDocumentIndex:
    """Test DocumentIndex dataclass."""

    def test_create_index(self) -> None:
        """Should expose all fields."""
        index = _index()

        assert index.id == "abc"
        assert index.name == "doc.pdf"
        assert index.page_count == 2
        assert index.idf["page"] == 1.0
        assert index.vectors[1]["second"] == 0.7

    def test_mismatched_lengths_rejected(self) -> None:
        """Pages and vectors must line up."""
        with pytest.raises(ValueError, match="mismatch"):
            _index(vectors=({},))

    def test_index_is_frozen(self) -> None:
        """Fields cannot be reassigned."""
        index = _index()
        with pytest.raises(dataclasses.FrozenInstanceError):
            index.name = "other.pdf"  # type: ignore[misc]

    def test_mappings_are_read_only(self) -> None:
        """IDF and vectors cannot be mutated in place."""
        index = _index()
        with pytest.raises(TypeError):
            index.idf["new"] = 1.0  # type: ignore[index]
        with pytest.raises(TypeError):
            index.vectors[0]["first"] = 0.0  # type: ignore[index]

    def test_source_mappings_copied(self) -> None:
        """Mutating the input dict later does not change the index."""
        idf = {"first": 1.0}
        index = _index(pages=("first",), idf=idf, vectors=({"first": 1.0},))
        idf["first"] = 9.0

        assert index.idf["first"] == 1.0

    def test_pages_list_converted_to_tuple(self) -> None:
        """A list of pages is stored as a tuple."""
        index = _index(pages=["a page"], vectors=[{}])

        assert index.pages == ("a page",)
        assert isinstance(index.vectors, tuple)


class TestScoredPage:
    """Test ScoredPage dataclass."""

    def test_page_number_is_one_based(self) -> None:
        """Should convert the index to a page number."""
        assert ScoredPage(index=0, score=0.5).page_number == 1
        assert ScoredPage(index=9, score=0.5).page_number == 10

    def test_default_snippet(self) -> None:
        assert ScoredPage(index=0, score=0.5).snippet == ""


class TestQueryResponse:
    """Test QueryResponse dataclass."""

    def test_defaults(self) -> None:
        """Should default to no citations and zero timing."""
        response = QueryResponse(matched=False, response_text="nope")

        assert response.citations == []
        assert response.timing_millis == 0.0

    def test_with_citations(self) -> None:
        response = QueryResponse(
            matched=True, response_text="yes", citations=[Citation(page=2)], timing_millis=1.5
        )

        assert response.citations[0].page == 2
