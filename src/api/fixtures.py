# src/api/fixtures.py — v1
"""Query fixtures: JSON files holding a query and candidate documents.

Format::

    {"query": "...", "documents": ["...", "..."], "instruction": "..."}
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ValidationError

from gguf_reranker.core.errors import InvalidInputError
from gguf_reranker.core.models import Document


class QueryFixture(BaseModel):
    """A query with its candidate documents."""

    query: str
    documents: list[str]
    instruction: str | None = None


def load_query_fixture(path: str | Path) -> QueryFixture:
    """Load and validate a fixture file.

    Raises:
        InvalidInputError: If the file is missing or not a valid fixture.
    """
    file_path = Path(path)
    try:
        raw = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise InvalidInputError(f"Failed to read fixture {file_path}: {e}") from e
    try:
        return QueryFixture.model_validate_json(raw)
    except ValidationError as e:
        raise InvalidInputError(f"Failed to parse fixture {file_path}: {e}") from e


def list_fixtures(directory: str | Path) -> list[Path]:
    """JSON files directly under directory, sorted by name."""
    return sorted(p for p in Path(directory).glob("*.json") if p.is_file())


def strings_to_documents(texts: list[str]) -> list[Document]:
    """Documents with ids doc_1, doc_2, ... in input order."""
    return [Document(id=f"doc_{i}", content=text) for i, text in enumerate(texts, start=1)]
