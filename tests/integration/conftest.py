# tests/integration/conftest.py — v8
"""Shared fixtures for integration tests against a stand-in inference binary.

The stand-in is a POSIX shell script installed where a llama.cpp checkout
would put ``llama-embedding`` next to a ``models/`` directory. It mimics the
two output modes:

- rank pooling: ``rerank score 0: <value>`` on stderr, chosen by keywords
  in the prompt ("deep learning" 9.0, "AI research" 8.0, otherwise -2.0);
- embedding: a JSON list with the vector [0.6, 0.8] on stdout.

Prompts containing "crash" exit with code 3, "broken" prints no score,
"zero" returns an all-zero vector and "slow" sleeps for five seconds.
"""

from __future__ import annotations

import stat
import sys
from pathlib import Path

import pytest

FAKE_LLAMA_EMBEDDING = """#!/bin/sh
prompt=""
mode="embedding"
while [ $# -gt 0 ]; do
  case "$1" in
    -p) prompt="$2"; shift 2 ;;
    --pooling) if [ "$2" = "rank" ]; then mode="rank"; fi; shift 2 ;;
    *) shift ;;
  esac
done
case "$prompt" in
  *crash*) echo "llama_model_load: fatal error" >&2; exit 3 ;;
  *slow*) exec sleep 5 ;;
esac
if [ "$mode" = "rank" ]; then
  case "$prompt" in
    *broken*) echo "main: no pooled output" >&2; exit 0 ;;
    *"deep learning"*) s=9.0 ;;
    *"AI research"*) s=8.0 ;;
    *) s=-2.0 ;;
  esac
  echo "batch_decode: n_tokens = 12" >&2
  echo "rerank score 0: $s" >&2
else
  case "$prompt" in
    *zero*) v="0.0, 0.0" ;;
    *) v="0.6, 0.8" ;;
  esac
  echo "{\\"object\\": \\"list\\", \\"data\\": [{\\"object\\": \\"embedding\\", \\"index\\": 0, \\"embedding\\": [$v]}]}"
fi
"""


def pytest_collection_modifyitems(config, items):
    if sys.platform == "win32":
        skip = pytest.mark.skip(reason="stand-in binary is a POSIX shell script")
        for item in items:
            item.add_marker(skip)


@pytest.fixture
def llama_layout(tmp_path: Path) -> dict[str, Path]:
    """models/model.gguf beside llama.cpp/build/bin/llama-embedding."""
    models = tmp_path / "models"
    models.mkdir()
    model = models / "model.gguf"
    model.write_bytes(b"GGUF")
    binary = tmp_path / "llama.cpp" / "build" / "bin" / "llama-embedding"
    binary.parent.mkdir(parents=True)
    binary.write_text(FAKE_LLAMA_EMBEDDING, encoding="utf-8")
    binary.chmod(binary.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return {"root": tmp_path, "models": models, "model": model, "binary": binary}
