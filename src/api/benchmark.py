# src/api/benchmark.py — v1
"""Throughput benchmark over a reranker's rank() call."""

from __future__ import annotations

import logging
import time

from pydantic import BaseModel

from gguf_reranker.core.errors import RerankerError
from gguf_reranker.core.models import Document
from gguf_reranker.reranker.base_reranker import BaseReranker

logger = logging.getLogger(__name__)


class BenchmarkResult(BaseModel):
    """Outcome of repeated rank() calls for one reranker."""

    model_name: str
    duration_s: float = 0.0
    docs_per_sec: float = 0.0
    avg_score: float = 0.0
    num_docs: int = 0
    iterations: int = 0
    error: str | None = None


async def benchmark_reranker(
    reranker: BaseReranker,
    query: str,
    documents: list[Document],
    iterations: int = 1,
) -> BenchmarkResult:
    """Run rank() `iterations` times and report throughput.

    avg_score is the mean over successful runs of each run's mean result
    score. A RerankerError stops the benchmark and is recorded in `error`.
    """
    iterations = max(iterations, 1)
    result = BenchmarkResult(model_name=reranker.model_name, num_docs=len(documents))

    total_score = 0.0
    successful_runs = 0
    start = time.perf_counter()
    for _ in range(iterations):
        try:
            ranked = await reranker.rank(query, documents, top_n=len(documents))
        except RerankerError as e:
            logger.warning("Benchmark of %s failed: %s", reranker.model_name, e)
            result.error = str(e)
            break
        if ranked:
            total_score += sum(r.score for r in ranked) / len(ranked)
            successful_runs += 1

    result.duration_s = time.perf_counter() - start
    result.iterations = successful_runs
    if successful_runs and result.duration_s > 0:
        result.avg_score = total_score / successful_runs
        result.docs_per_sec = (len(documents) * successful_runs) / result.duration_s
    return result
