# src/scoring/base_scorer.py — v1
"""Abstract scorer capability used by the ranking engine.

Production scorers run an external process; tests bind an in-process
double. Both methods raise InferenceError subclasses on failure.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseScorer(ABC):
    """Unified interface for relevance scorers."""

    @abstractmethod
    async def score(self, query: str, text: str) -> float:
        """Direct relevance score for a (query, document) pair."""

    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        """Embedding vector for a single text (fallback path)."""

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Model identifier."""
