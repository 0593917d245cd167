# src/cache/score_cache.py — v1
"""In-memory relevance score cache owned by a single engine instance.

Readers run concurrently; a writer excludes readers and other writers.
There is no eviction: the cache grows until clear() is called or the
owning engine is discarded.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager


class ReadWriteLock:
    """Writer-preferring reader/writer lock built on a Condition."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class ScoreCache:
    """Maps score cache keys to relevance scores."""

    def __init__(self) -> None:
        self._scores: dict[str, float] = {}
        self._lock = ReadWriteLock()

    def get(self, key: str) -> tuple[float, bool]:
        """Return (score, found). score is 0.0 when not found."""
        with self._lock.read():
            if key in self._scores:
                return self._scores[key], True
        return 0.0, False

    def put(self, key: str, score: float) -> None:
        with self._lock.write():
            self._scores[key] = score

    def clear(self) -> None:
        with self._lock.write():
            self._scores = {}

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._scores)

    def __contains__(self, key: object) -> bool:
        with self._lock.read():
            return key in self._scores
