"""
Field Scoring - Weighted relevance of one text field against query terms.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .similarity import similarity

__all__ = ["FUZZY_THRESHOLD", "HIGHLIGHT_THRESHOLD", "FieldScore", "score_field", "tokenize"]

FUZZY_THRESHOLD = 0.6
HIGHLIGHT_THRESHOLD = 0.8


@dataclass(frozen=True)
class FieldScore:
    """Score contribution of one field, plus the fragments that earned it."""

    score: float = 0.0
    highlights: list[str] = field(default_factory=list)


def tokenize(query: str) -> list[str]:
    """Lower-case, trim and split a free-text query on whitespace."""
    return query.lower().split()


def score_field(value: str | None, terms: list[str], weight: float) -> FieldScore:
    """
    Score ``value`` against already-tokenized ``terms``.

    A term found as a substring earns ``weight * 2``. Otherwise the first
    word of the field whose similarity reaches FUZZY_THRESHOLD earns
    ``weight * similarity``; that word is highlighted only above
    HIGHLIGHT_THRESHOLD. Later words are not considered even if they would
    score higher.
    """
    if not value:
        return FieldScore()

    lowered = value.lower()
    words = lowered.split()
    total = 0.0
    highlights: list[str] = []

    for term in terms:
        if term in lowered:
            total += weight * 2
            highlights.append(term)
            continue

        for word in words:
            sim = similarity(word, term)
            if sim >= FUZZY_THRESHOLD:
                total += weight * sim
                if sim > HIGHLIGHT_THRESHOLD:
                    highlights.append(word)
                break

    return FieldScore(score=total, highlights=highlights)
