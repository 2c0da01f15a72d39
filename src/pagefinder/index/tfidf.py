"""TF-IDF weighting over page texts.

Page vectors and query vectors go through the same ``_weigh`` step so that the
two are directly comparable with :func:`cosine_similarity`.
"""

from __future__ import annotations

import math
from collections import Counter
from typing import Dict, List, Mapping, Sequence, Tuple

from pagefinder.utils.text import tokenize


def term_counts(text: str | None) -> Counter[str]:
    """Raw term frequencies for a piece of text."""
    return Counter(tokenize(text))


def _weigh(counts: Mapping[str, int], idf: Mapping[str, float]) -> Dict[str, float]:
    # TF is normalised by the number of distinct terms, not by the token count.
    vector: Dict[str, float] = {}
    distinct = len(counts)
    for term, tf in counts.items():
        weight = (tf / distinct) * idf.get(term, 0.0)
        if weight:
            vector[term] = weight
    return vector


def compute_idf(page_counts: Sequence[Mapping[str, int]]) -> Dict[str, float]:
    """Smoothed inverse document frequency for every term seen in the pages."""
    df: Counter[str] = Counter()
    for counts in page_counts:
        df.update(set(counts))

    n_pages = len(page_counts)
    return {term: math.log((1 + n_pages) / (1 + dfi)) + 1 for term, dfi in df.items()}


def build_index(pages: Sequence[str]) -> Tuple[Dict[str, float], List[Dict[str, float]]]:
    """Build the IDF table and one weighted term vector per page."""
    page_counts = [term_counts(text) for text in pages]
    idf = compute_idf(page_counts)
    vectors = [_weigh(counts, idf) for counts in page_counts]
    return idf, vectors


def vectorize(query: str | None, idf: Mapping[str, float]) -> Dict[str, float]:
    """Weight a free-text query against an existing IDF table.

    Terms unknown to the table are dropped.
    """
    return _weigh(term_counts(query), idf)


def _norm(vector: Mapping[str, float]) -> float:
    return math.sqrt(math.fsum(weight * weight for weight in vector.values()))


def cosine_similarity(a: Mapping[str, float], b: Mapping[str, float]) -> float:
    """Cosine similarity of two sparse vectors; 0.0 when either is empty."""
    norm_a = _norm(a)
    norm_b = _norm(b)
    if not norm_a or not norm_b:
        return 0.0

    # fsum keeps the result independent of argument and iteration order.
    smaller, larger = (a, b) if len(a) < len(b) else (b, a)
    dot = math.fsum(weight * larger[term] for term, weight in smaller.items() if term in larger)
    return dot / (norm_a * norm_b)
