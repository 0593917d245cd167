# src/core/similarity.py — v3
"""Cosine similarity used by the embedding fallback path.

Similarity in [-1, 1] is mapped onto the rank-score scale by SIMILARITY_SCALE
so fallback scores stay roughly comparable with rank-pooling scores. The
mapping is a heuristic, not a calibrated probability.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

logger = logging.getLogger(__name__)

SIMILARITY_SCALE = 10.0


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two vectors.

    Degenerate inputs (different lengths, empty, zero magnitude) yield 0.0
    instead of raising.
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.ndim != 1 or va.shape != vb.shape or va.size == 0:
        logger.debug("Degenerate vectors for cosine: %s vs %s", va.shape, vb.shape)
        return 0.0

    norm_a = float(np.linalg.norm(va))
    norm_b = float(np.linalg.norm(vb))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    sim = float(np.dot(va, vb)) / (norm_a * norm_b)
    return float(np.clip(sim, -1.0, 1.0))


def similarity_to_score(similarity: float) -> float:
    """Map a cosine similarity onto the rank-score scale."""
    return similarity * SIMILARITY_SCALE


def embedding_score(a: Sequence[float], b: Sequence[float]) -> float:
    """Fallback relevance score for a query/document embedding pair."""
    return similarity_to_score(cosine_similarity(a, b))
