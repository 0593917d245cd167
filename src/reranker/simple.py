# src/reranker/simple.py — v1
"""Word-overlap reranker used as a no-inference baseline."""

from __future__ import annotations

from gguf_reranker.core.models import RerankerConfig
from gguf_reranker.reranker.engine import RerankEngine
from gguf_reranker.scoring.overlap_scorer import OverlapScorer

SIMPLE_MODEL_NAME = "simple-reranker"


class SimpleReranker(RerankEngine):
    """RerankEngine over OverlapScorer; scores lie in [0, 1]."""

    def __init__(self, config: RerankerConfig | None = None) -> None:
        config = config or RerankerConfig(model=SIMPLE_MODEL_NAME)
        super().__init__(OverlapScorer(config.model or SIMPLE_MODEL_NAME), config)
