# src/reranker/engine.py — v1
"""Ranking engine: scores documents through a BaseScorer, then sorts,
threshold-filters and truncates.

Per document the engine tries, in order:
1. the score cache;
2. direct rank scoring;
3. cosine similarity of query and document embeddings (scaled by 10);
4. FAILED_SCORE, which is never cached so a later call retries.

Documents are scored sequentially, one external call at a time. Ties are
broken by original input index.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from gguf_reranker.cache.fingerprint import score_cache_key
from gguf_reranker.cache.score_cache import ScoreCache
from gguf_reranker.core.errors import InferenceError, QueryEmbeddingError
from gguf_reranker.core.models import Document, RerankerConfig, RerankResult
from gguf_reranker.core.similarity import embedding_score
from gguf_reranker.logging.context import query_context, set_document_context, set_stage
from gguf_reranker.reranker.base_reranker import BaseReranker
from gguf_reranker.scoring.base_scorer import BaseScorer

logger = logging.getLogger(__name__)

FAILED_SCORE = -5.0

T = TypeVar("T")


class _QueryEmbedding:
    """Embeds the query at most once per call, on first fallback."""

    def __init__(self, scorer: BaseScorer, query: str) -> None:
        self._scorer = scorer
        self._query = query
        self._vector: list[float] | None = None

    async def get(self) -> list[float]:
        if self._vector is None:
            try:
                self._vector = await self._scorer.embed(self._query)
            except InferenceError as e:
                raise QueryEmbeddingError(f"Failed to get query embedding: {e}") from e
        return self._vector


class RerankEngine(BaseReranker):
    """Reranker over any BaseScorer, with a per-instance score cache."""

    def __init__(self, scorer: BaseScorer, config: RerankerConfig | None = None) -> None:
        self._scorer = scorer
        self._config = config or RerankerConfig(model=scorer.model_name)
        self._cache = ScoreCache()

    @property
    def config(self) -> RerankerConfig:
        return self._config

    @property
    def cache(self) -> ScoreCache:
        return self._cache

    @property
    def scorer(self) -> BaseScorer:
        return self._scorer

    @property
    def model_name(self) -> str:
        return self._config.model or self._scorer.model_name

    def configure(self, config: RerankerConfig) -> None:
        if config.model != self._config.model:
            self._cache.clear()
        self._config = config

    def close(self) -> None:
        self._cache.clear()

    # --- Scoring ---

    async def compute_scores(
        self, query: str, documents: list[Document], timeout: float | None = None
    ) -> list[float]:
        if not documents:
            return []
        return await _with_timeout(self._compute_scores(query, documents), timeout)

    async def _compute_scores(self, query: str, documents: list[Document]) -> list[float]:
        query_embedding = _QueryEmbedding(self._scorer, query)
        scores: list[float] = []
        failed = 0
        with query_context(self.model_name):
            try:
                for doc in documents:
                    set_document_context(doc.id)
                    score = await self._score_document(query, doc, query_embedding)
                    if score is None:
                        failed += 1
                        score = FAILED_SCORE
                    scores.append(score)
            finally:
                set_document_context(None)
            logger.info(
                "Scored %d documents (%d failed) with %s",
                len(documents), failed, self.model_name,
            )
        return scores

    async def _score_document(
        self, query: str, doc: Document, query_embedding: _QueryEmbedding
    ) -> float | None:
        """Score one document; None when every strategy failed."""
        key = score_cache_key(query, doc.content)
        cached, found = self._cache.get(key)
        if found:
            logger.debug("Cache hit for %s", doc.id)
            return cached
        logger.debug("Cache miss for %s", doc.id)

        set_stage("rank")
        try:
            score = await self._scorer.score(query, doc.content)
        except InferenceError as e:
            logger.warning(
                "Rank scoring failed (%s), falling back to embedding similarity", e
            )
            set_stage("embedding")
            query_vector = await query_embedding.get()
            try:
                doc_vector = await self._scorer.embed(doc.content)
            except InferenceError as exc:
                logger.warning(
                    "Embedding fallback failed (%s), assigning score %.1f",
                    exc, FAILED_SCORE,
                )
                return None
            score = embedding_score(query_vector, doc_vector)

        self._cache.put(key, score)
        return score

    # --- Ranking ---

    async def rerank(
        self, query: str, documents: list[Document], timeout: float | None = None
    ) -> list[Document]:
        if not documents:
            return []
        scores = await self.compute_scores(query, documents, timeout=timeout)

        scored = [
            (i, doc.model_copy(update={"score": score}))
            for i, (doc, score) in enumerate(zip(documents, scores))
        ]
        scored.sort(key=lambda pair: (-pair[1].score, pair[0]))

        threshold = self._config.threshold
        kept = [doc for _, doc in scored if doc.score >= threshold]
        return kept[: self._config.max_docs]

    async def rank(
        self,
        query: str,
        documents: list[Document],
        top_n: int = 0,
        timeout: float | None = None,
    ) -> list[RerankResult]:
        if not documents:
            return []
        scores = await self.compute_scores(query, documents, timeout=timeout)

        results = [
            RerankResult(
                document=doc.model_copy(update={"score": score}),
                score=score,
                index=i,
            )
            for i, (doc, score) in enumerate(zip(documents, scores))
        ]
        results.sort(key=lambda r: (-r.score, r.index))

        threshold = self._config.threshold
        filtered = [r for r in results if r.score >= threshold]
        if top_n > 0:
            filtered = filtered[: min(top_n, self._config.max_docs)]
        return filtered


async def _with_timeout(coro: Awaitable[T], timeout: float | None) -> T:
    """Await coro, cancelling it (and any running child process) after timeout."""
    if timeout is None:
        return await coro
    return await asyncio.wait_for(coro, timeout=timeout)
