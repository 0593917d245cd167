# src/inference/binary.py — v1
"""Locates the llama-embedding binary and validates model artifacts.

Search order for the binary:
1. explicit path (setting or argument);
2. ``<model dir>/../llama.cpp/build/bin/llama-embedding``;
3. ``llama.cpp/build/bin/llama-embedding`` relative to cwd, its parent and
   grandparent;
4. ``llama-embedding`` on PATH.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from gguf_reranker.core.errors import InitializationError, InvalidInputError

logger = logging.getLogger(__name__)

BINARY_NAME = "llama-embedding"

_RELATIVE_CANDIDATES = (
    "./llama.cpp/build/bin/llama-embedding",
    "../llama.cpp/build/bin/llama-embedding",
    "../../llama.cpp/build/bin/llama-embedding",
)


def resolve_model_path(model: str) -> Path:
    """Absolute path of a model artifact.

    Raises:
        InvalidInputError: If the model path is empty.
    """
    if not model or not model.strip():
        raise InvalidInputError("Model path is required for GGUF reranker")
    return Path(model).expanduser().absolute()


def _is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def find_inference_binary(model_path: Path, explicit: str | None = None) -> Path:
    """Find a usable llama-embedding executable.

    Raises:
        InitializationError: If no candidate exists and is executable.
    """
    if explicit:
        path = Path(explicit).expanduser()
        if _is_executable(path):
            return path.absolute()
        found = shutil.which(explicit)
        if found:
            return Path(found)
        raise InitializationError(f"{BINARY_NAME} binary not found: {explicit}")

    beside_model = model_path.parent / ".." / "llama.cpp" / "build" / "bin" / BINARY_NAME
    candidates = [beside_model, *(Path(c) for c in _RELATIVE_CANDIDATES)]
    for candidate in candidates:
        if _is_executable(candidate):
            logger.debug("Using inference binary %s", candidate)
            return candidate.resolve()

    found = shutil.which(BINARY_NAME)
    if found:
        logger.debug("Using inference binary from PATH: %s", found)
        return Path(found)

    raise InitializationError(f"{BINARY_NAME} binary not found")


def check_model_file(model_path: Path) -> None:
    """Raise InitializationError unless the model is a readable file."""
    if not model_path.is_file():
        raise InitializationError(f"Model file not found: {model_path}")
    if not os.access(model_path, os.R_OK):
        raise InitializationError(f"Model file not readable: {model_path}")


def self_check(binary: Path, model_path: Path) -> None:
    """Startup check that the binary and model are still usable. Runs no inference."""
    if not _is_executable(binary):
        raise InitializationError(f"Inference binary not executable: {binary}")
    check_model_file(model_path)
