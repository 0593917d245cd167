# src/logging/logger.py — v2
"""Logger factory with JSON and text formatters.

Records carry the scoring context (query id, model, document id, stage)
bound through logging.context while a compute_scores call is running.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Any

from gguf_reranker.logging.context import LogContext, get_context

ROOT_LOGGER = "gguf_reranker"


def _record_time(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with scoring context when bound."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": _record_time(record).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = get_context().as_dict()
        if context:
            entry["context"] = context

        # logger.info(..., extra={"data": {...}})
        data = getattr(record, "data", None)
        if data:
            entry["data"] = data

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Single-line terminal format: time, level, logger, context, message."""

    def format(self, record: logging.LogRecord) -> str:
        line = " ".join([
            _record_time(record).strftime("%Y-%m-%d %H:%M:%S"),
            f"[{record.levelname:8s}]",
            record.name,
            *_context_tags(get_context()),
            f"- {record.getMessage()}",
        ])
        if record.exc_info and record.exc_info[1] is not None:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def _context_tags(ctx: LogContext) -> list[str]:
    tags = []
    if ctx.query_id:
        tags.append(f"[q={ctx.query_id}]")
    if ctx.document_id:
        tags.append(f"[doc={ctx.document_id}]")
    if ctx.stage:
        tags.append(f"({ctx.stage})")
    return tags


def setup_logging(
    level: str = "INFO",
    log_format: str = "text",
    log_file: str | None = None,
    rotation: str = "10MB",
    retention: int = 5,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Configure the package root logger. Safe to call repeatedly.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        log_format: Output format ("json" or "text").
        log_file: Path to log file (None = console only).
        rotation: Max file size before rotation (e.g. "10MB").
        retention: Number of rotated files to keep.
        stream: Console stream, stderr by default. Results go to stdout.

    Returns:
        The configured root logger.
    """
    formatter = JsonFormatter() if log_format == "json" else TextFormatter()

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers.clear()
    for handler in _build_handlers(log_file, rotation, retention, stream):
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    return root_logger


def _build_handlers(
    log_file: str | None,
    rotation: str,
    retention: int,
    stream: IO[str] | None,
) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stderr)]
    if log_file:
        from gguf_reranker.logging.handlers import create_rotating_handler

        handlers.append(
            create_rotating_handler(log_file, rotation=rotation, retention=retention)
        )
    return handlers
