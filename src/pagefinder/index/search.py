"""Page ranking and the query interface."""

from __future__ import annotations

import logging
import time
from typing import List, Mapping, Sequence

import numpy as np

from pagefinder.index.storage import IndexRegistry
from pagefinder.index.tfidf import cosine_similarity, vectorize
from pagefinder.models import Citation, QueryResponse, ScoredPage
from pagefinder.utils.text import make_snippet

LOGGER = logging.getLogger(__name__)

DEFAULT_TOP_K = 3
DEFAULT_MIN_SCORE = 0.01

NOT_FOUND_MESSAGE = "PDF not found. Please upload a PDF first."
NO_MATCH_MESSAGE = "I could not find relevant content. Try rephrasing your question."
EXCERPTS_HEADER = "Here are the most relevant excerpts:"


def rank(
    query_vector: Mapping[str, float],
    page_vectors: Sequence[Mapping[str, float]],
    *,
    k: int = DEFAULT_TOP_K,
    min_score: float = DEFAULT_MIN_SCORE,
) -> List[ScoredPage]:
    """Return up to ``k`` pages scoring strictly above ``min_score``, best first.

    Equal scores keep ascending page order.
    """
    if not page_vectors or k <= 0:
        return []

    scores = np.array(
        [cosine_similarity(query_vector, vector) for vector in page_vectors], dtype=float
    )
    # Stable sort on the negated scores keeps ties in page order.
    order = np.argsort(-scores, kind="stable")

    results: List[ScoredPage] = []
    for idx in order:
        score = float(scores[idx])
        if score <= min_score:
            break
        results.append(ScoredPage(index=int(idx), score=score))
        if len(results) >= k:
            break
    return results


class Searcher:
    """Answers free-text questions against documents held in a registry."""

    def __init__(
        self,
        registry: IndexRegistry,
        *,
        top_k: int = DEFAULT_TOP_K,
        min_score: float = DEFAULT_MIN_SCORE,
        snippet_chars: int = 500,
    ) -> None:
        self.registry = registry
        self.top_k = top_k
        self.min_score = min_score
        self.snippet_chars = snippet_chars

    def search(self, document_id: str, text: str) -> List[ScoredPage] | None:
        """Ranked pages with snippets, or ``None`` for an unknown document."""
        document = self.registry.get(document_id)
        if document is None:
            return None

        query_vector = vectorize(text, document.idf)
        results = rank(query_vector, document.vectors, k=self.top_k, min_score=self.min_score)
        for result in results:
            result.snippet = make_snippet(document.pages[result.index], max_chars=self.snippet_chars)
        return results

    def query(self, document_id: str, text: str) -> QueryResponse:
        start = time.perf_counter()
        results = self.search(document_id, text)
        if results is None:
            LOGGER.info("Query against unknown document %s", document_id)
            return QueryResponse(matched=False, response_text=NOT_FOUND_MESSAGE)

        if results:
            excerpts = "\n\n".join(f"Page {r.page_number}: {r.snippet}" for r in results)
            response_text = f"{EXCERPTS_HEADER}\n\n{excerpts}"
        else:
            response_text = NO_MATCH_MESSAGE

        elapsed = (time.perf_counter() - start) * 1000
        LOGGER.info("Query processed in %.1fms (%d matches)", elapsed, len(results))
        return QueryResponse(
            matched=True,
            response_text=response_text,
            citations=[Citation(page=r.page_number) for r in results],
            timing_millis=elapsed,
        )
