# src/core/errors.py — v1
"""Exception hierarchy for reranker construction and inference.

Construction-time errors (invalid input, initialization) are fatal and raised
immediately. Inference errors are mostly recovered per document by the
ranking engine; only QueryEmbeddingError escapes a scoring call.
"""

from __future__ import annotations


class RerankerError(Exception):
    """Base class for all reranker errors."""


class InvalidInputError(RerankerError):
    """Raised when a required input (e.g. model path) is missing or invalid."""


class ModelNotFoundError(RerankerError):
    """Raised when a model name is not present in the registry."""


class InitializationError(RerankerError):
    """Raised when the inference binary or model artifact cannot be used."""


class InferenceError(RerankerError):
    """Base class for failures while obtaining a score or embedding."""


class InferenceExecutionError(InferenceError):
    """The external process could not be started or exited non-zero."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str = ""):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)


class InferenceTimeoutError(InferenceExecutionError):
    """The external process exceeded its time budget and was killed."""


class ScoreParseError(InferenceError):
    """No parsing strategy could extract a value from process output."""


class EmbeddingQualityError(ScoreParseError):
    """Embedding output parsed but is unusable (empty or all-zero vector)."""


class QueryEmbeddingError(InferenceError):
    """The fallback path could not embed the query, so no document can be scored."""
