# tests/unit/reranker/test_gguf_local.py — v1
"""Tests for reranker/gguf_local.py — construction checks and reconfiguration."""

from __future__ import annotations

import stat
import sys
from pathlib import Path

import pytest

from gguf_reranker.config.settings import Settings
from gguf_reranker.core.errors import InitializationError, InvalidInputError
from gguf_reranker.core.models import RerankerConfig, RerankerOptions
from gguf_reranker.reranker.gguf_local import GGUFLocalReranker
from gguf_reranker.scoring.llama_scorer import LlamaCppScorer

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")


@pytest.fixture
def layout(tmp_path: Path) -> dict[str, Path]:
    """models/ and llama.cpp/build/bin/ side by side, as in a checkout."""
    models = tmp_path / "models"
    models.mkdir()
    model_a = models / "a.gguf"
    model_b = models / "b.gguf"
    model_a.write_bytes(b"GGUF")
    model_b.write_bytes(b"GGUF")
    binary = tmp_path / "llama.cpp" / "build" / "bin" / "llama-embedding"
    binary.parent.mkdir(parents=True)
    binary.write_text("#!/bin/sh\nexit 0\n")
    binary.chmod(binary.stat().st_mode | stat.S_IXUSR)
    return {"a": model_a, "b": model_b, "binary": binary}


def _settings(**kwargs) -> Settings:
    return Settings(_env_file=None, **kwargs)


class TestConstruction:
    def test_valid(self, layout):
        r = GGUFLocalReranker(RerankerConfig(model=str(layout["a"])), settings=_settings())
        assert r.model_path == layout["a"]
        assert r.binary_path == layout["binary"].resolve()
        assert r.get_model_name() == str(layout["a"])
        assert isinstance(r.scorer, LlamaCppScorer)

    def test_missing_model_path(self):
        with pytest.raises(InvalidInputError):
            GGUFLocalReranker(RerankerConfig(model=""), settings=_settings())

    def test_model_file_not_found(self, layout):
        missing = layout["a"].parent / "missing.gguf"
        with pytest.raises(InitializationError, match="Model file not found"):
            GGUFLocalReranker(RerankerConfig(model=str(missing)), settings=_settings())

    def test_binary_not_found(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("PATH", "")
        model = tmp_path / "m.gguf"
        model.write_bytes(b"GGUF")
        with pytest.raises(InitializationError, match="binary not found"):
            GGUFLocalReranker(RerankerConfig(model=str(model)), settings=_settings())

    def test_explicit_binary_setting(self, layout, tmp_path):
        other = tmp_path / "custom-embedding"
        other.write_text("#!/bin/sh\nexit 0\n")
        other.chmod(other.stat().st_mode | stat.S_IXUSR)
        r = GGUFLocalReranker(
            RerankerConfig(model=str(layout["a"])),
            settings=_settings(llama_embedding_binary=str(other)),
        )
        assert r.binary_path == other

    def test_options_reach_invoker(self, layout):
        r = GGUFLocalReranker(
            RerankerConfig(model=str(layout["a"]), options=RerankerOptions(threads=3)),
            settings=_settings(inference_timeout_s=5.0, embedding_pooling="mean"),
        )
        invoker = r.scorer.invoker  # type: ignore[attr-defined]
        assert invoker.rank_args("q", "d")[-2:] == ["-t", "3"]
        assert "--pooling" in invoker.embedding_args("t")

    def test_max_docs_default(self, layout):
        r = GGUFLocalReranker(RerankerConfig(model=str(layout["a"]), max_docs=0), settings=_settings())
        assert r.config.max_docs == 100


class TestConfigure:
    def test_model_change_rebinds_scorer(self, layout):
        r = GGUFLocalReranker(RerankerConfig(model=str(layout["a"])), settings=_settings())
        r.cache.put("k", 1.0)
        r.configure(RerankerConfig(model=str(layout["b"]), threshold=-2.0))
        assert r.model_path == layout["b"]
        assert r.config.threshold == -2.0
        assert len(r.cache) == 0

    def test_threshold_only_keeps_scorer(self, layout):
        r = GGUFLocalReranker(RerankerConfig(model=str(layout["a"])), settings=_settings())
        scorer = r.scorer
        r.configure(RerankerConfig(model=str(layout["a"]), max_docs=5))
        assert r.scorer is scorer
        assert r.config.max_docs == 5

    def test_invalid_model_keeps_previous_state(self, layout):
        r = GGUFLocalReranker(RerankerConfig(model=str(layout["a"])), settings=_settings())
        with pytest.raises(InitializationError):
            r.configure(RerankerConfig(model=str(layout["a"].parent / "nope.gguf")))
        assert r.model_path == layout["a"]
        assert r.get_model_name() == str(layout["a"])

    def test_close_clears_cache(self, layout):
        r = GGUFLocalReranker(RerankerConfig(model=str(layout["a"])), settings=_settings())
        r.cache.put("k", 1.0)
        r.close()
        assert len(r.cache) == 0


class TestCatalogueNames:
    QWEN_FILE = "Qwen3-Reranker-0.6B.Q4_K_M.gguf"

    def test_construct_by_name(self, layout):
        qwen = layout["a"].parent / self.QWEN_FILE
        qwen.write_bytes(b"GGUF")
        r = GGUFLocalReranker(
            RerankerConfig(model="qwen-0.6b"),
            settings=_settings(models_dir=layout["a"].parent),
        )
        assert r.model_path == qwen
        assert r.get_model_name() == str(qwen)

    def test_configure_by_name(self, layout):
        qwen = layout["a"].parent / self.QWEN_FILE
        qwen.write_bytes(b"GGUF")
        r = GGUFLocalReranker(
            RerankerConfig(model=str(layout["a"])),
            settings=_settings(models_dir=layout["a"].parent),
        )
        r.configure(RerankerConfig(model="qwen-0.6b"))
        assert r.model_path == qwen
        assert r.config.model == str(qwen)

    def test_configure_same_model_by_name_keeps_scorer(self, layout):
        qwen = layout["a"].parent / self.QWEN_FILE
        qwen.write_bytes(b"GGUF")
        r = GGUFLocalReranker(
            RerankerConfig(model=str(qwen)),
            settings=_settings(models_dir=layout["a"].parent),
        )
        scorer = r.scorer
        r.configure(RerankerConfig(model="qwen-0.6b", threshold=1.0))
        assert r.scorer is scorer
        assert r.config.threshold == 1.0
