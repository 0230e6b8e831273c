"""Vector and keyword scoring used by the retriever."""

from __future__ import annotations

import math
import re
from typing import Sequence

_EPSILON = 1e-12
_NON_WORD = re.compile(r"\W+")

# Returned for missing or mismatched vectors so they never win a ranking.
MISMATCH_SCORE = -1.0


def cosine_similarity(
    a: Sequence[float] | None,
    b: Sequence[float] | None,
) -> float:
    """Cosine similarity of *a* and *b*.

    Returns :data:`MISMATCH_SCORE` when either vector is missing or empty,
    or when their lengths differ.
    """
    if not a or not b or len(a) != len(b):
        return MISMATCH_SCORE
    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y
    return dot / (math.sqrt(norm_a) * math.sqrt(norm_b) + _EPSILON)


def tokenize_query(query: str | None) -> list[str]:
    """Split *query* on non-word characters, lower-cased, empties dropped."""
    return [token for token in _NON_WORD.split((query or "").lower()) if token]


def keyword_overlap(tokens: Sequence[str], text: str | None) -> int:
    """Count how many *tokens* occur as substrings of the lower-cased *text*."""
    haystack = (text or "").lower()
    return sum(1 for token in tokens if token in haystack)
