"""
String Similarity - Levenshtein-based fuzzy matching primitive.

Strings are compared case-insensitively as sequences of Unicode code points
(Python's native ``str`` unit); no normalization is applied, so a precomposed
"é" and "e" + combining accent are different sequences.
"""

from __future__ import annotations

from rapidfuzz.distance import Levenshtein

__all__ = ["edit_distance", "similarity"]


def edit_distance(a: str, b: str) -> int:
    """Unit-cost insert/delete/substitute distance between ``a`` and ``b``."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """
    Similarity in [0, 1], 1.0 meaning identical ignoring case.

    Computed as ``1 - distance / max(len(a), len(b))`` over the lower-cased
    strings; two empty strings are identical.
    """
    a = a.lower()
    b = b.lower()
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - edit_distance(a, b) / longest
