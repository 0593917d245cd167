# src/logging/context.py — v2
"""Contextual logging support — attach query, model and document ids to records."""

from __future__ import annotations

import contextvars
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

_query_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "query_id", default=None
)
_model: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "model", default=None
)
_document_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "document_id", default=None
)
_stage: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "stage", default=None
)


@dataclass
class LogContext:
    """Snapshot of the current logging context."""

    query_id: str | None = None
    model: str | None = None
    document_id: str | None = None
    stage: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        query_id=_query_id.get(),
        model=_model.get(),
        document_id=_document_id.get(),
        stage=_stage.get(),
    )


@contextmanager
def query_context(model: str, query_id: str | None = None) -> Iterator[str]:
    """Bind a query id and model for the duration of one scoring call."""
    qid = query_id or uuid.uuid4().hex[:8]
    tokens = (_query_id.set(qid), _model.set(model))
    try:
        yield qid
    finally:
        _model.reset(tokens[1])
        _query_id.reset(tokens[0])


def set_document_context(document_id: str | None, stage: str | None = None) -> None:
    """Set the document currently being scored and the scoring stage."""
    _document_id.set(document_id)
    _stage.set(stage)


def set_stage(stage: str | None) -> None:
    _stage.set(stage)


def clear_context() -> None:
    """Reset all context variables."""
    _query_id.set(None)
    _model.set(None)
    _document_id.set(None)
    _stage.set(None)
