# src/reranker/factory.py — v1
"""Factory: instantiate a reranker from configuration."""

from __future__ import annotations

import importlib
import logging

from gguf_reranker.config.settings import Settings
from gguf_reranker.core.models import RerankerConfig
from gguf_reranker.reranker.base_reranker import BaseReranker
from gguf_reranker.reranker.registry import resolve_model

logger = logging.getLogger(__name__)

_RERANKER_REGISTRY: dict[str, str] = {
    "gguf-local": "gguf_reranker.reranker.gguf_local.GGUFLocalReranker",
    "simple": "gguf_reranker.reranker.simple.SimpleReranker",
}


class UnsupportedRerankerError(ValueError):
    """Raised when a reranker kind is not registered."""


def create_reranker(
    config: RerankerConfig | None = None,
    settings: Settings | None = None,
    kind: str | None = None,
) -> BaseReranker:
    """Instantiate the configured reranker.

    Args:
        config: Ranking configuration. Built from settings when omitted.
        settings: Application settings (reranker kind, binary, models dir).
        kind: Overrides settings.reranker_kind.

    Returns:
        Configured BaseReranker instance.

    Raises:
        UnsupportedRerankerError: If kind is not registered.
        InvalidInputError, InitializationError: From GGUF construction.
    """
    settings = settings or Settings()
    kind = kind or settings.reranker_kind
    if kind not in _RERANKER_REGISTRY:
        raise UnsupportedRerankerError(
            f"Unsupported reranker: {kind!r}. "
            f"Available: {', '.join(sorted(_RERANKER_REGISTRY))}"
        )

    if config is None:
        config = (
            settings.to_reranker_config()
            if kind == "gguf-local"
            else RerankerConfig(
                model=settings.reranker_model,
                max_docs=settings.reranker_max_docs,
                threshold=settings.reranker_threshold,
            )
        )

    cls = _import_class(_RERANKER_REGISTRY[kind])
    logger.debug("Creating reranker: kind=%s model=%s", kind, config.model)

    if kind == "gguf-local":
        resolved = resolve_model(config.model, settings.models_dir)
        config = config.model_copy(update={"model": resolved})
        return cls(config, settings=settings)
    return cls(config)


def register_reranker(kind: str, class_path: str) -> None:
    """Register a custom reranker implementation."""
    _RERANKER_REGISTRY[kind] = class_path


def _import_class(class_path: str) -> type:
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
