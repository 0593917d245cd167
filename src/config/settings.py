# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for deployment-specific settings. Per-call ranking
parameters live in core.models.RerankerConfig; to_reranker_config() bridges
the two.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gguf_reranker.core.models import RerankerConfig, RerankerOptions


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Reranker ===
    reranker_kind: Literal["gguf-local", "simple"] = "gguf-local"
    reranker_model: str = ""
    reranker_max_docs: int = 100
    reranker_threshold: float = 0.0
    reranker_threads: int | None = None

    # === Inference process ===
    llama_embedding_binary: str = ""
    models_dir: Path = Path("models")
    inference_timeout_s: float | None = 120.0
    embedding_pooling: Literal["default", "mean"] = "default"

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("reranker_max_docs")
    @classmethod
    def validate_max_docs(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("reranker_max_docs must be >= 0")
        return v

    @field_validator("reranker_threads")
    @classmethod
    def validate_threads(cls, v: int | None) -> int | None:  # noqa: N805
        if v is not None and v <= 0:
            raise ValueError("reranker_threads must be > 0")
        return v

    @field_validator("inference_timeout_s")
    @classmethod
    def validate_timeout(cls, v: float | None) -> float | None:  # noqa: N805
        if v is not None and v <= 0:
            raise ValueError("inference_timeout_s must be > 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Cross-field consistency rules."""
        errors: list[str] = []

        if self.reranker_kind == "simple" and self.llama_embedding_binary:
            errors.append(
                "LLAMA_EMBEDDING_BINARY is set but RERANKER_KIND is simple"
            )

        if self.log_file is not None:
            from gguf_reranker.logging.handlers import parse_size

            try:
                parse_size(self.log_rotation)
            except ValueError as e:
                errors.append(f"LOG_ROTATION: {e}")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    def to_reranker_config(self) -> RerankerConfig:
        """Build the ranking configuration from settings.

        Raises:
            ConfigurationError: If a GGUF reranker is requested without a model.
        """
        if self.reranker_kind == "gguf-local" and not self.reranker_model:
            raise ConfigurationError("RERANKER_MODEL is required for gguf-local")
        return RerankerConfig(
            model=self.reranker_model,
            max_docs=self.reranker_max_docs,
            threshold=self.reranker_threshold,
            options=RerankerOptions(threads=self.reranker_threads),
        )


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
