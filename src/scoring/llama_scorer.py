# src/scoring/llama_scorer.py — v1
"""llama.cpp scorer: binds BaseScorer to the llama-embedding process."""

from __future__ import annotations

import logging

from gguf_reranker.inference.invoker import InferenceInvoker
from gguf_reranker.inference.parser import parse_embedding, parse_rank_score
from gguf_reranker.scoring.base_scorer import BaseScorer

logger = logging.getLogger(__name__)


class LlamaCppScorer(BaseScorer):
    """Rank-pooling scores and JSON embeddings from a local GGUF model."""

    def __init__(self, invoker: InferenceInvoker) -> None:
        self._invoker = invoker

    @property
    def invoker(self) -> InferenceInvoker:
        return self._invoker

    async def score(self, query: str, text: str) -> float:
        output = await self._invoker.run_rank(query, text)
        return parse_rank_score(output.stdout, output.stderr)

    async def embed(self, text: str) -> list[float]:
        output = await self._invoker.run_embedding(text)
        return parse_embedding(output.stdout)

    @property
    def model_name(self) -> str:
        return self._invoker.model_path
