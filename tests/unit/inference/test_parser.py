# tests/unit/inference/test_parser.py — v1
"""Tests for inference/parser.py — rank score and embedding extraction."""

from __future__ import annotations

import json

import pytest

from gguf_reranker.core.errors import EmbeddingQualityError, ScoreParseError
from gguf_reranker.inference.parser import parse_embedding, parse_rank_score

_STDERR = """\
main: prompt 0: 'machine learning</s><s>deep learning'
main: number of tokens in prompt = 9
batch_decode: n_tokens = 9, n_seq = 1
rerank score 0:    -6.851
"""


class TestParseRankScore:
    def test_stderr_marker(self):
        assert parse_rank_score("", _STDERR) == pytest.approx(-6.851)

    def test_first_match_wins(self):
        stderr = "rerank score 0: 1.5\nrerank score 1: 2.5\n"
        assert parse_rank_score("", stderr) == 1.5

    def test_surrounding_whitespace(self):
        assert parse_rank_score("", "   rerank score 0:  3.25   ") == 3.25

    def test_skips_unparseable_marker_line(self):
        stderr = "rerank score 0: n/a\nrerank score 1: 0.75\n"
        assert parse_rank_score("", stderr) == 0.75

    def test_stderr_takes_priority_over_stdout(self):
        assert parse_rank_score("9.0", "rerank score 0: 1.0") == 1.0

    def test_stdout_fallback(self):
        assert parse_rank_score("  4.2\n", "no scores here") == pytest.approx(4.2)

    def test_marker_without_value_uses_stdout(self):
        assert parse_rank_score("0.5", "rerank score") == 0.5

    def test_nothing_parseable(self):
        with pytest.raises(ScoreParseError):
            parse_rank_score("embedding 0: 0.1 0.2", "verbose output")

    def test_empty_output(self):
        with pytest.raises(ScoreParseError):
            parse_rank_score("", "")

    def test_non_finite_rejected(self):
        with pytest.raises(ScoreParseError):
            parse_rank_score("nan", "rerank score 0: inf")


def _embedding_json(*vectors: list[float]) -> str:
    return json.dumps({
        "object": "list",
        "data": [
            {"object": "embedding", "index": i, "embedding": v}
            for i, v in enumerate(vectors)
        ],
    })


class TestParseEmbedding:
    def test_first_vector(self):
        stdout = _embedding_json([0.1, 0.2], [0.3, 0.4])
        assert parse_embedding(stdout) == [0.1, 0.2]

    def test_minimal_shape(self):
        stdout = '{"data": [{"index": 0, "embedding": [1, 2, 3]}]}'
        assert parse_embedding(stdout) == [1.0, 2.0, 3.0]

    def test_empty_data(self):
        with pytest.raises(EmbeddingQualityError, match="No embedding"):
            parse_embedding('{"object": "list", "data": []}')

    def test_empty_vector(self):
        with pytest.raises(EmbeddingQualityError, match="Empty"):
            parse_embedding(_embedding_json([]))

    def test_all_zero_vector(self):
        with pytest.raises(EmbeddingQualityError, match="All-zero"):
            parse_embedding(_embedding_json([0.0, 0.0, 0.0]))

    def test_malformed_json(self):
        with pytest.raises(ScoreParseError, match="parse embedding"):
            parse_embedding("not json")

    def test_wrong_shape(self):
        with pytest.raises(ScoreParseError):
            parse_embedding('{"embeddings": [[0.1, 0.2]]}')

    def test_quality_error_is_parse_error(self):
        assert issubclass(EmbeddingQualityError, ScoreParseError)
