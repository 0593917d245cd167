# tests/conftest.py — v2
"""Shared test fixtures for unit and integration tests.

Provides a deterministic in-process scorer double, sample documents and
configurations. No external processes are spawned by these fixtures.
"""

from __future__ import annotations

import pytest

from gguf_reranker.core.errors import EmbeddingQualityError, ScoreParseError
from gguf_reranker.core.models import Document, RerankerConfig
from gguf_reranker.logging.context import clear_context
from gguf_reranker.scoring.base_scorer import BaseScorer


class FakeScorer(BaseScorer):
    """Scorer double keyed by document text.

    A missing key raises the error the real parser would raise; an Exception
    value is raised as-is.
    """

    def __init__(
        self,
        scores: dict[str, float | Exception] | None = None,
        embeddings: dict[str, list[float] | Exception] | None = None,
        model: str = "fake-model",
    ) -> None:
        self.scores = scores or {}
        self.embeddings = embeddings or {}
        self.score_calls: list[tuple[str, str]] = []
        self.embed_calls: list[str] = []
        self._model = model

    async def score(self, query: str, text: str) -> float:
        self.score_calls.append((query, text))
        value = self.scores.get(text)
        if value is None:
            raise ScoreParseError("Could not parse reranker score from output")
        if isinstance(value, Exception):
            raise value
        return value

    async def embed(self, text: str) -> list[float]:
        self.embed_calls.append(text)
        value = self.embeddings.get(text)
        if value is None:
            raise EmbeddingQualityError("No embedding data returned")
        if isinstance(value, Exception):
            raise value
        return value

    @property
    def model_name(self) -> str:
        return self._model


# === FIXTURES: Sample data ===


@pytest.fixture(autouse=True)
def _clean_log_context():
    clear_context()
    yield
    clear_context()


@pytest.fixture
def fake_scorer_cls() -> type[FakeScorer]:
    return FakeScorer


@pytest.fixture
def ml_query() -> str:
    return "machine learning"


@pytest.fixture
def ml_documents() -> list[Document]:
    """Three documents in a fixed input order."""
    return [
        Document(id="doc_1", content="AI research"),
        Document(id="doc_2", content="cooking recipes"),
        Document(id="doc_3", content="deep learning"),
    ]


@pytest.fixture
def ml_scores() -> dict[str, float | Exception]:
    return {"AI research": 8.0, "cooking recipes": -2.0, "deep learning": 9.0}


@pytest.fixture
def ml_scorer(ml_scores) -> FakeScorer:
    return FakeScorer(scores=dict(ml_scores))


@pytest.fixture
def permissive_config() -> RerankerConfig:
    return RerankerConfig(model="fake-model", max_docs=100, threshold=-10.0)
