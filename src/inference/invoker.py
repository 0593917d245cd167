# src/inference/invoker.py — v1
"""Runs the llama.cpp ``llama-embedding`` binary for one text input.

Two argument sets are supported:
- rank: ``query</s><s>document`` with rank pooling, un-normalised scores and
  verbose diagnostics (the score is printed on stderr);
- embedding: one text, JSON output, L2-normalised vector.

Each call spawns and reaps exactly one child process. There are no retries
here; fallback policy lives in the ranking engine. A timeout or task
cancellation kills the child before the error propagates.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Literal

from gguf_reranker.core.errors import InferenceExecutionError, InferenceTimeoutError

logger = logging.getLogger(__name__)

# Boundary between query and document expected by llama.cpp rank pooling.
RANK_SEPARATOR = "</s><s>"

_STDERR_TAIL_CHARS = 500

EmbeddingPooling = Literal["default", "mean"]


@dataclass(frozen=True)
class InferenceOutput:
    """Separately captured output streams of one process run."""

    stdout: str
    stderr: str
    returncode: int


class InferenceInvoker:
    """Builds argument lists and runs the inference binary."""

    def __init__(
        self,
        binary: str,
        model_path: str,
        threads: int | None = None,
        timeout_s: float | None = None,
        embedding_pooling: EmbeddingPooling = "default",
    ) -> None:
        self._binary = binary
        self._model_path = model_path
        self._threads = threads
        self._timeout_s = timeout_s
        self._embedding_pooling = embedding_pooling

    @property
    def binary(self) -> str:
        return self._binary

    @property
    def model_path(self) -> str:
        return self._model_path

    def rank_args(self, query: str, document: str) -> list[str]:
        args = [
            "-m", self._model_path,
            "-p", f"{query}{RANK_SEPARATOR}{document}",
            "--pooling", "rank",
            "--embd-normalize", "-1",
            "--verbose-prompt",
        ]
        return args + self._thread_args()

    def embedding_args(self, text: str) -> list[str]:
        args = [
            "-m", self._model_path,
            "-p", text,
            "--embd-output-format", "json",
            "--embd-normalize", "2",
        ]
        if self._embedding_pooling == "mean":
            args.extend(["--pooling", "mean"])
        return args + self._thread_args()

    def _thread_args(self) -> list[str]:
        if self._threads and self._threads > 0:
            return ["-t", str(self._threads)]
        return []

    async def run_rank(self, query: str, document: str) -> InferenceOutput:
        return await self.run(self.rank_args(query, document))

    async def run_embedding(self, text: str) -> InferenceOutput:
        return await self.run(self.embedding_args(text))

    async def run(self, args: list[str]) -> InferenceOutput:
        """Execute the binary once and capture stdout/stderr.

        Raises:
            InferenceExecutionError: If the process cannot start or exits non-zero.
            InferenceTimeoutError: If the process exceeds the configured timeout.
        """
        try:
            proc = await asyncio.create_subprocess_exec(
                self._binary,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (OSError, ValueError) as e:
            # ValueError: an argument holds a NUL byte
            raise InferenceExecutionError(
                f"Failed to start {self._binary}: {e}"
            ) from e

        try:
            out_b, err_b = await asyncio.wait_for(
                proc.communicate(), timeout=self._timeout_s
            )
        except asyncio.TimeoutError as e:
            await _kill(proc)
            raise InferenceTimeoutError(
                f"{self._binary} exceeded {self._timeout_s}s and was killed"
            ) from e
        except asyncio.CancelledError:
            await _kill(proc)
            raise

        stdout = out_b.decode("utf-8", "replace")
        stderr = err_b.decode("utf-8", "replace")
        returncode = proc.returncode if proc.returncode is not None else -1

        if returncode != 0:
            tail = stderr[-_STDERR_TAIL_CHARS:]
            logger.debug("Inference exited with code %d: %s", returncode, tail)
            raise InferenceExecutionError(
                f"{self._binary} exited with code {returncode}",
                returncode=returncode,
                stderr=tail,
            )

        return InferenceOutput(stdout=stdout, stderr=stderr, returncode=returncode)


async def _kill(proc: asyncio.subprocess.Process) -> None:
    """Kill and reap a child process that is still running."""
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
    await proc.wait()
