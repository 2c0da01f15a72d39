"""Core PageFinder data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Tuple


@dataclass(frozen=True, slots=True)
class DocumentIndex:
    """Retrieval structure for one uploaded document.

    Built once from the extracted page texts and never mutated afterwards.
    ``vectors[i]`` is the weighted term vector of ``pages[i]``.
    """

    id: str
    name: str
    source_location: str
    pages: Tuple[str, ...]
    idf: Mapping[str, float]
    vectors: Tuple[Mapping[str, float], ...]

    def __post_init__(self) -> None:
        if len(self.pages) != len(self.vectors):
            raise ValueError(
                f"pages and vectors length mismatch ({len(self.pages)} != {len(self.vectors)})"
            )
        # Freeze the containers so shared references stay safe after eviction.
        object.__setattr__(self, "pages", tuple(self.pages))
        object.__setattr__(self, "idf", MappingProxyType(dict(self.idf)))
        object.__setattr__(
            self, "vectors", tuple(MappingProxyType(dict(vec)) for vec in self.vectors)
        )

    @property
    def page_count(self) -> int:
        return len(self.pages)


@dataclass(slots=True)
class ScoredPage:
    """Page matched by a query."""

    index: int
    score: float
    snippet: str = ""

    @property
    def page_number(self) -> int:
        return self.index + 1


@dataclass(slots=True)
class Citation:
    page: int


@dataclass(slots=True)
class QueryResponse:
    """Answer returned to the caller for a single query."""

    matched: bool
    response_text: str
    citations: List[Citation] = field(default_factory=list)
    timing_millis: float = 0.0
