# src/scoring/overlap_scorer.py — v1
"""Word-overlap baseline scorer (no inference).

Score is the fraction of query words that share a substring relation with
at least one content word, so it lies in [0, 1].
"""

from __future__ import annotations

from gguf_reranker.core.errors import InferenceError
from gguf_reranker.scoring.base_scorer import BaseScorer


def word_overlap(query: str, content: str) -> float:
    """Fraction of query words matched by some content word."""
    query_words = query.lower().split()
    content_words = content.lower().split()
    if not query_words or not content_words:
        return 0.0

    matches = 0
    for qword in query_words:
        if any(qword in cword or cword in qword for cword in content_words):
            matches += 1
    return matches / len(query_words)


class OverlapScorer(BaseScorer):
    """Heuristic baseline; never falls back because score() cannot fail."""

    def __init__(self, model: str = "simple-reranker") -> None:
        self._model_name = model

    async def score(self, query: str, text: str) -> float:
        return word_overlap(query, text)

    async def embed(self, text: str) -> list[float]:
        raise InferenceError("OverlapScorer does not produce embeddings")

    @property
    def model_name(self) -> str:
        return self._model_name
