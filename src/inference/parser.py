# src/inference/parser.py — v1
"""Extracts scores and embeddings from llama-embedding output.

Rank mode prints ``rerank score <index>: <value>`` on stderr; some builds
print the bare value on stdout instead. Embedding mode prints an
OpenAI-style JSON list on stdout.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ValidationError

from gguf_reranker.core.errors import EmbeddingQualityError, ScoreParseError

RANK_SCORE_MARKER = "rerank score"


class EmbeddingItem(BaseModel):
    """One entry of the embedding JSON ``data`` list."""

    object: str = "embedding"
    index: int
    embedding: list[float]


class EmbeddingResponse(BaseModel):
    """Top-level JSON document printed with ``--embd-output-format json``."""

    object: str = "list"
    data: list[EmbeddingItem]


def _parse_finite(token: str) -> float | None:
    try:
        value = float(token)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_rank_score(stdout: str, stderr: str) -> float:
    """Extract the relevance score of a rank-pooling run.

    Strategy:
    1. First stderr line containing the marker: the token two places after
       ``score`` (the one in between is the index, e.g. ``0:``).
    2. The whole trimmed stdout as a single number.

    Raises:
        ScoreParseError: If neither strategy yields a finite number.
    """
    for line in stderr.splitlines():
        line = line.strip()
        if RANK_SCORE_MARKER not in line:
            continue
        parts = line.split()
        for i, part in enumerate(parts):
            if part == "score" and i + 2 < len(parts):
                value = _parse_finite(parts[i + 2])
                if value is not None:
                    return value

    text = stdout.strip()
    if text:
        value = _parse_finite(text)
        if value is not None:
            return value

    raise ScoreParseError("Could not parse reranker score from output")


def parse_embedding(stdout: str) -> list[float]:
    """Return the first embedding vector from JSON output.

    Raises:
        ScoreParseError: If the JSON is malformed or has the wrong shape.
        EmbeddingQualityError: If no vector is returned, or it is empty or all zeros.
    """
    try:
        response = EmbeddingResponse.model_validate_json(stdout)
    except ValidationError as e:
        raise ScoreParseError(f"Failed to parse embedding response: {e}") from e

    if not response.data:
        raise EmbeddingQualityError("No embedding data returned")

    vector = response.data[0].embedding
    if not vector:
        raise EmbeddingQualityError("Empty embedding vector returned")
    if all(v == 0.0 for v in vector):
        raise EmbeddingQualityError("All-zero embedding vector returned")
    return vector
