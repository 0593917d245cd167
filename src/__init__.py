"""gguf-reranker — relevance ranking with local GGUF models via llama.cpp."""

from gguf_reranker.version import __version__

__all__ = ["__version__"]
