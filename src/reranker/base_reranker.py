# src/reranker/base_reranker.py — v1
"""Abstract reranker interface consumed by the CLI and benchmark harness."""

from __future__ import annotations

from abc import ABC, abstractmethod

from gguf_reranker.core.models import Document, RerankerConfig, RerankResult


class BaseReranker(ABC):
    """Unified interface for all reranker implementations."""

    @abstractmethod
    async def rerank(
        self, query: str, documents: list[Document], timeout: float | None = None
    ) -> list[Document]:
        """Scored copies of documents, sorted, filtered and truncated to max_docs."""

    @abstractmethod
    async def compute_scores(
        self, query: str, documents: list[Document], timeout: float | None = None
    ) -> list[float]:
        """One score per document, in input order."""

    @abstractmethod
    async def rank(
        self,
        query: str,
        documents: list[Document],
        top_n: int = 0,
        timeout: float | None = None,
    ) -> list[RerankResult]:
        """Sorted, filtered results truncated to top_n (all when top_n <= 0)."""

    @abstractmethod
    def configure(self, config: RerankerConfig) -> None:
        """Replace threshold, max_docs and model."""

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Configured model path or identifier (display only)."""

    def get_model_name(self) -> str:
        return self.model_name

    def close(self) -> None:
        """Release per-instance state."""
