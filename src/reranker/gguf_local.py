# src/reranker/gguf_local.py — v1
"""GGUF reranker backed by llama.cpp's llama-embedding binary.

Construction resolves the model to an absolute path, locates the binary and
runs a startup self-check; any failure is raised before scoring can start.
"""

from __future__ import annotations

import logging
from pathlib import Path

from gguf_reranker.config.settings import Settings
from gguf_reranker.core.models import RerankerConfig
from gguf_reranker.inference.binary import (
    check_model_file,
    find_inference_binary,
    resolve_model_path,
    self_check,
)
from gguf_reranker.inference.invoker import InferenceInvoker
from gguf_reranker.reranker.engine import RerankEngine
from gguf_reranker.reranker.registry import resolve_model
from gguf_reranker.scoring.llama_scorer import LlamaCppScorer

logger = logging.getLogger(__name__)


class GGUFLocalReranker(RerankEngine):
    """RerankEngine bound to a local GGUF model file."""

    def __init__(
        self,
        config: RerankerConfig,
        settings: Settings | None = None,
        binary: str | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._explicit_binary = binary or self._settings.llama_embedding_binary or None
        config = self._resolve(config)
        self._llama_scorer: LlamaCppScorer = self._build_scorer(config)
        super().__init__(self._llama_scorer, config)
        logger.info(
            "GGUF reranker ready: model=%s binary=%s", self.model_path, self.binary_path
        )

    def _resolve(self, config: RerankerConfig) -> RerankerConfig:
        """Map a catalogue name onto its file under models_dir."""
        model = resolve_model(config.model, self._settings.models_dir)
        if model == config.model:
            return config
        return config.model_copy(update={"model": model})

    def _build_scorer(self, config: RerankerConfig) -> LlamaCppScorer:
        model_path = resolve_model_path(config.model)
        binary_path = find_inference_binary(model_path, self._explicit_binary)
        check_model_file(model_path)
        self_check(binary_path, model_path)

        invoker = InferenceInvoker(
            binary=str(binary_path),
            model_path=str(model_path),
            threads=config.options.threads,
            timeout_s=self._settings.inference_timeout_s,
            embedding_pooling=self._settings.embedding_pooling,
        )
        return LlamaCppScorer(invoker)

    @property
    def model_path(self) -> Path:
        return Path(self._llama_scorer.invoker.model_path)

    @property
    def binary_path(self) -> Path:
        return Path(self._llama_scorer.invoker.binary)

    def configure(self, config: RerankerConfig) -> None:
        """Apply a new configuration, rebinding the scorer when model or threads change.

        Catalogue names such as "qwen-0.6b" resolve under settings.models_dir.

        Raises:
            InvalidInputError: If the new model path is empty.
            InitializationError: If the new model or binary cannot be used.
        """
        config = self._resolve(config)
        if (
            config.model != self._config.model
            or config.options.threads != self._config.options.threads
        ):
            self._llama_scorer = self._build_scorer(config)
            self._scorer = self._llama_scorer
        super().configure(config)
