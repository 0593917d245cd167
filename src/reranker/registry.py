# src/reranker/registry.py — v1
"""Catalogue of known reranker models and friendly-name resolution.

Friendly names and Hugging Face ids map to GGUF file names under the
models directory. Unknown names are treated as model paths.
"""

from __future__ import annotations

from pathlib import Path

from gguf_reranker.core.errors import ModelNotFoundError
from gguf_reranker.core.models import ModelInfo

_MODEL_FILES: dict[str, str] = {
    "jina-v2": "jina-reranker-v2-base-multilingual-Q4_K_M.gguf",
    "jina-m0": "jina-reranker-m0-Q4_K_M.gguf",
    "jina-v1-tiny": "jina-reranker-v1-tiny-en-Q4_K_M.gguf",
    "mxbai-v1": "mxbai-rerank-large-v2-Q4_K_M.gguf",
    "mxbai-v2": "mxbai-rerank-large-v2-Q4_K_M.gguf",
    "qwen-0.6b": "Qwen3-Reranker-0.6B.Q4_K_M.gguf",
    "qwen-4b": "Qwen3-Reranker-4B.Q4_K_M.gguf",
    "qwen-8b": "Qwen3-Reranker-8B.Q4_K_M.gguf",
    "ms-marco-v2": "ms-marco-MiniLM-L12-v2.Q4_K_M.gguf",
    "ms-marco-l4-v2": "ms-marco-MiniLM-L4-v2.Q4_K_M.gguf",
    "bge-base": "bge-reranker-base-q4_k_m.gguf",
    "bge-large": "bge-reranker-large-q4_k_m.gguf",
    "bge-v2-m3": "bge-reranker-v2-m3-Q4_K_M.gguf",
    "bge-v2-gemma": "bge-reranker-v2-gemma.Q4_K_M.gguf",
    "colbert-v2": "colbertv2.0.Q4_K_M.gguf",
}

# Hugging Face ids and "gguf/" prefixed names resolve through the friendly name.
_ALIASES: dict[str, str] = {
    "jinaai/jina-reranker-v2-base-multilingual": "jina-v2",
    "mixedbread-ai/mxbai-rerank-large-v1": "mxbai-v1",
    "mixedbread-ai/mxbai-rerank-large-v2": "mxbai-v2",
    "Qwen/Qwen3-Reranker-0.6B": "qwen-0.6b",
    "Qwen/Qwen3-Reranker-4B": "qwen-4b",
    "Qwen/Qwen3-Reranker-8B": "qwen-8b",
    "cross-encoder/ms-marco-MiniLM-L12-v2": "ms-marco-v2",
    "BAAI/bge-reranker-base": "bge-base",
    "BAAI/bge-reranker-large": "bge-large",
    "BAAI/bge-reranker-v2-m3": "bge-v2-m3",
    "BAAI/bge-reranker-v2-gemma": "bge-v2-gemma",
    "gguf/qwen-0.6b": "qwen-0.6b",
    "gguf/qwen-4b": "qwen-4b",
    "gguf/qwen-8b": "qwen-8b",
    "gguf/bge-base": "bge-base",
    "gguf/bge-large": "bge-large",
    "gguf/bge-v2-m3": "bge-v2-m3",
}

# name, display name, provider, strengths
_CATALOGUE: list[tuple[str, str, str, list[str]]] = [
    ("jina-v2", "Jina Reranker V2", "Jina AI", ["Fast inference", "Multilingual"]),
    ("jina-m0", "Jina Reranker M0", "Jina AI", ["Medium size", "Multilingual"]),
    ("jina-v1-tiny", "Jina Reranker V1 Tiny EN", "Jina AI", ["Tiny", "English only"]),
    ("mxbai-v1", "MixedBread AI Reranker V1", "MixedBread AI", ["Balanced performance"]),
    ("mxbai-v2", "MixedBread AI Reranker V2", "MixedBread AI", ["High accuracy"]),
    ("qwen-0.6b", "Qwen Reranker 0.6B", "Alibaba", ["Fastest", "Smallest model"]),
    ("qwen-4b", "Qwen Reranker 4B", "Alibaba", ["Balanced size and quality"]),
    ("qwen-8b", "Qwen Reranker 8B", "Alibaba", ["Largest", "Highest accuracy"]),
    ("ms-marco-v2", "MS MARCO MiniLM-L12-v2", "Microsoft", ["Fast", "Well-established"]),
    ("ms-marco-l4-v2", "MS MARCO MiniLM-L4-v2", "Microsoft", ["Ultra fast", "4-layer model"]),
    ("bge-base", "BGE Reranker Base", "BAAI", ["Fast", "Lightweight baseline"]),
    ("bge-large", "BGE Reranker Large", "BAAI", ["More accurate"]),
    ("bge-v2-m3", "BGE Reranker V2-M3", "BAAI", ["Multilingual"]),
    ("bge-v2-gemma", "BGE Reranker V2-Gemma", "BAAI", ["LLM-based reranker"]),
    ("colbert-v2", "ColBERT v2.0", "Stanford", ["ColBERT architecture"]),
]


def canonical_name(name: str) -> str | None:
    """Friendly name for a friendly name or alias, None when unknown."""
    if name in _MODEL_FILES:
        return name
    return _ALIASES.get(name)


def resolve_model(name: str, models_dir: str | Path = "models") -> str:
    """Model path for a registry name; unknown names are returned unchanged."""
    friendly = canonical_name(name)
    if friendly is None:
        return name
    return str(Path(models_dir) / _MODEL_FILES[friendly])


def list_models(models_dir: str | Path = "models") -> list[ModelInfo]:
    """Catalogue entries with model ids resolved under models_dir."""
    return [
        ModelInfo(
            name=name,
            display_name=display,
            provider=provider,
            model_id=str(Path(models_dir) / _MODEL_FILES[name]),
            strengths=["Local inference", *strengths],
        )
        for name, display, provider, strengths in _CATALOGUE
    ]


def get_model_info(name: str, models_dir: str | Path = "models") -> ModelInfo:
    """Raises ModelNotFoundError for names outside the registry."""
    friendly = canonical_name(name)
    for info in list_models(models_dir):
        if info.name == friendly:
            return info
    raise ModelNotFoundError(f"Model {name!r} not found")


def available_model_names() -> list[str]:
    return [name for name, *_ in _CATALOGUE]
