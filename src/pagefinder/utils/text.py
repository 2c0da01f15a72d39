"""Text helpers: tokenization, whitespace cleanup and snippets."""

from __future__ import annotations

import re
from typing import Iterable, List

_NON_TERM_CHARS = re.compile(r"[^a-z0-9\s]")


def tokenize(text: str | None) -> List[str]:
    """Split text into lower-case alphanumeric terms.

    Punctuation is replaced by spaces so word boundaries survive. Terms shorter
    than two characters are dropped; duplicates and order are kept.
    """
    cleaned = _NON_TERM_CHARS.sub(" ", (text or "").lower())
    return [token for token in cleaned.split() if len(token) > 1]


def normalize_whitespace(lines: Iterable[str]) -> str:
    """Collapse whitespace and join lines."""
    return "\n".join(line.strip() for line in lines if line.strip())


def make_snippet(text: str, *, max_chars: int = 500) -> str:
    """Truncate text to ``max_chars``, appending an ellipsis when cut."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "..."
