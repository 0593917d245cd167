# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

No module redefines these types — all imports come from core.models.
"""

from __future__ import annotations

import uuid
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_MAX_DOCS = 100


def _generate_document_id() -> str:
    return f"doc_{uuid.uuid4().hex[:12]}"


# === DOCUMENTS ===


class Document(BaseModel):
    """Candidate document to be ranked against a query."""

    id: str = Field(default_factory=_generate_document_id)
    content: str
    score: float = 0.0
    metadata: dict[str, Any] = Field(default_factory=dict)


class RerankResult(BaseModel):
    """A scored document together with its position in the input sequence."""

    model_config = ConfigDict(frozen=True)

    document: Document
    score: float
    index: int


# === CONFIGURATION ===


class RerankerOptions(BaseModel):
    """Recognised options for the external inference process.

    threads: CPU threads passed to llama.cpp (``-t``). None lets the binary decide.
    """

    model_config = ConfigDict(extra="forbid")

    threads: int | None = None

    @field_validator("threads")
    @classmethod
    def validate_threads(cls, v: int | None) -> int | None:  # noqa: N805
        if v is not None and v <= 0:
            raise ValueError("threads must be > 0")
        return v


class RerankerConfig(BaseModel):
    """Active reranker configuration.

    max_docs of 0 means "unset" and becomes DEFAULT_MAX_DOCS. threshold is an
    inclusive lower bound on scores kept in rerank/rank output.
    """

    model: str = ""
    max_docs: int = DEFAULT_MAX_DOCS
    threshold: float = 0.0
    options: RerankerOptions = Field(default_factory=RerankerOptions)

    @field_validator("max_docs")
    @classmethod
    def default_max_docs(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("max_docs must be >= 0")
        return v or DEFAULT_MAX_DOCS


# === MODEL CATALOGUE ===


class ModelInfo(BaseModel):
    """Catalogue entry for a known reranker model."""

    name: str
    display_name: str
    provider: str
    model_id: str
    strengths: list[str] = Field(default_factory=list)
    type: Literal["gguf-local", "simple"] = "gguf-local"
