# src/main.py — v3
"""CLI entry point — rank, models, benchmark commands.

Usage:
    gguf-reranker rank --query "..." --documents "a,b,c" [options]
    gguf-reranker rank --test-file fixture.json [options]
    gguf-reranker rank --test-all [test_data] [options]
    gguf-reranker models
    gguf-reranker benchmark --test-file fixture.json [-r all] [options]

With the gguf-local kind, ``-r all`` (or no model at all) runs every
catalogue model in turn.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from gguf_reranker.version import __version__

if TYPE_CHECKING:
    from gguf_reranker.api.benchmark import BenchmarkResult
    from gguf_reranker.config.settings import Settings
    from gguf_reranker.core.models import Document
    from gguf_reranker.reranker.base_reranker import BaseReranker

logger = logging.getLogger(__name__)

ALL_MODELS = "all"
DEFAULT_TEST_DIR = Path("test_data")

# (source label, query, documents)
InputSet = tuple[str, str, list[str]]


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        _setup_logging(args.verbose)
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _add_input_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--test-file", type=Path, default=None, help="JSON query fixture")
    parser.add_argument(
        "--test-all", type=Path, nargs="?", const=DEFAULT_TEST_DIR, default=None,
        metavar="DIR", help=f"Run every JSON fixture in DIR (default: {DEFAULT_TEST_DIR})",
    )
    parser.add_argument("--query", default=None, help="Query string")
    parser.add_argument(
        "--documents", default=None,
        help="Comma-separated documents (used with --query)",
    )
    parser.add_argument(
        "-r", "--reranker", default=None,
        help="Model name, GGUF path or 'all' (default: RERANKER_MODEL, else all)",
    )
    parser.add_argument(
        "--kind", choices=["gguf-local", "simple"], default=None,
        help="Reranker implementation (default: RERANKER_KIND)",
    )
    parser.add_argument(
        "--threshold", type=float, default=-10.0,
        help="Minimum score to keep (default: -10.0)",
    )
    parser.add_argument("--threads", type=int, default=None, help="Inference threads")


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="gguf-reranker",
        description=f"gguf-reranker v{__version__} — local GGUF document reranking",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- rank ---
    p_rank = subparsers.add_parser("rank", help="Rank documents against a query")
    _add_input_args(p_rank)
    p_rank.add_argument(
        "-k", "--top-k", type=int, default=3,
        help="Number of top results to show (default: 3)",
    )
    p_rank.set_defaults(func=_cmd_rank)

    # --- models ---
    p_models = subparsers.add_parser("models", help="List known models")
    p_models.set_defaults(func=_cmd_models)

    # --- benchmark ---
    p_bench = subparsers.add_parser("benchmark", help="Measure ranking throughput")
    _add_input_args(p_bench)
    p_bench.add_argument(
        "-n", "--iterations", type=int, default=3,
        help="Number of rank() runs (default: 3)",
    )
    p_bench.set_defaults(func=_cmd_benchmark)

    return parser


def _load_inputs(args: argparse.Namespace) -> tuple[list[InputSet], int] | None:
    """Input sets from --test-all, --test-file or --query/--documents.

    Returns the loaded sets and the number of fixtures that failed to load,
    or None when no input was given.

    Raises:
        InvalidInputError: If --test-file cannot be loaded.
    """
    from gguf_reranker.api.fixtures import list_fixtures, load_query_fixture
    from gguf_reranker.core.errors import InvalidInputError

    if args.test_all is not None:
        paths = list_fixtures(args.test_all) if args.test_all.is_dir() else []
        if not paths:
            logger.error("No JSON fixtures found in %s", args.test_all)
            return None
        print(f"Found {len(paths)} JSON fixtures in {args.test_all}")
        inputs: list[InputSet] = []
        failed = 0
        for path in paths:
            try:
                fixture = load_query_fixture(path)
            except InvalidInputError as e:
                print(f"\nSkipping {path.name}: {e}")
                failed += 1
                continue
            inputs.append((path.name, fixture.query, fixture.documents))
        return inputs, failed

    if args.test_file is not None:
        fixture = load_query_fixture(args.test_file)
        return [(str(args.test_file), fixture.query, fixture.documents)], 0
    if args.query and args.documents:
        docs = [d.strip() for d in args.documents.split(",") if d.strip()]
        return [("--query", args.query, docs)], 0
    logger.error(
        "Either --test-file, --test-all or both --query and --documents are required"
    )
    return None


def _model_names(args: argparse.Namespace, settings: Settings) -> list[str]:
    """Models to run: the catalogue for gguf-local with 'all' or no model."""
    from gguf_reranker.reranker.registry import available_model_names

    model = args.reranker or settings.reranker_model
    kind = args.kind or settings.reranker_kind
    if kind == "gguf-local" and model in ("", ALL_MODELS):
        return available_model_names()
    return [model]


def _make_reranker(args: argparse.Namespace, settings: Settings, model: str) -> BaseReranker:
    from gguf_reranker.core.models import RerankerConfig, RerankerOptions
    from gguf_reranker.reranker.factory import create_reranker

    config = RerankerConfig(
        model=model,
        max_docs=settings.reranker_max_docs,
        threshold=args.threshold,
        options=RerankerOptions(threads=args.threads or settings.reranker_threads),
    )
    return create_reranker(config, settings=settings, kind=args.kind or settings.reranker_kind)


def _banner(title: str, width: int = 60) -> None:
    print(f"\n{'=' * width}\n{title}\n{'=' * width}")


async def _cmd_rank(args: argparse.Namespace) -> int:
    """Rank documents and print the top results, per input set and model."""
    from gguf_reranker.api.fixtures import strings_to_documents
    from gguf_reranker.config.settings import load_settings

    loaded = _load_inputs(args)
    if loaded is None:
        return 1
    inputs, failed = loaded

    settings = load_settings()
    models = _model_names(args, settings)
    runs = successes = 0
    for source, query, texts in inputs:
        if len(inputs) > 1:
            _banner(f"Fixture: {source}", width=80)
        documents = strings_to_documents(texts)
        for model in models:
            if len(models) > 1:
                _banner(f"Testing: {model}")
            runs += 1
            if await _rank_one(args, settings, model, query, documents):
                successes += 1

    if runs + failed > 1:
        _banner(f"SUMMARY: {successes}/{runs + failed} runs succeeded")
    return 0 if successes == runs + failed else 1


async def _rank_one(
    args: argparse.Namespace,
    settings: Settings,
    model: str,
    query: str,
    documents: list[Document],
) -> bool:
    """One rank() run; construction and scoring errors are reported, not raised."""
    from gguf_reranker.config.settings import ConfigurationError
    from gguf_reranker.core.errors import RerankerError

    try:
        reranker = _make_reranker(args, settings, model)
    except (RerankerError, ConfigurationError) as e:
        print(f"Error initializing reranker {model or '(none)'}: {e}")
        return False
    try:
        results = await reranker.rank(query, documents, top_n=args.top_k)
    except RerankerError as e:
        print(f"Error ranking documents with {reranker.model_name}: {e}")
        return False
    finally:
        reranker.close()

    print(f"\nQuery: {query}")
    print(f"Model: {reranker.model_name}")
    print(f"Documents: {len(documents)}\n")
    for position, result in enumerate(results, start=1):
        preview = result.document.content[:100]
        if len(result.document.content) > 100:
            preview += "..."
        print(f"  {position}. [{result.score:8.4f}] (#{result.index}) {preview}")
    return True


async def _cmd_models(args: argparse.Namespace) -> int:
    """Print the model catalogue."""
    from gguf_reranker.config.settings import load_settings
    from gguf_reranker.reranker.registry import list_models

    settings = load_settings()
    print("\nAvailable reranker models:")
    for info in list_models(settings.models_dir):
        print(f"\n  {info.name}: {info.display_name} ({info.provider})")
        print(f"    Model ID:  {info.model_id}")
        print(f"    Strengths: {', '.join(info.strengths)}")
    return 0


async def _cmd_benchmark(args: argparse.Namespace) -> int:
    """Benchmark each model on each input set; summary sorted fastest first."""
    from gguf_reranker.api.fixtures import strings_to_documents
    from gguf_reranker.config.settings import load_settings

    loaded = _load_inputs(args)
    if loaded is None:
        return 1
    inputs, failed = loaded

    settings = load_settings()
    models = _model_names(args, settings)
    results: list[BenchmarkResult] = []
    for source, query, texts in inputs:
        if len(inputs) > 1:
            _banner(f"Fixture: {source}", width=80)
        documents = strings_to_documents(texts)
        for model in models:
            result = await _benchmark_one(args, settings, model, query, documents)
            _print_benchmark(result)
            results.append(result)

    if len(results) > 1:
        _banner("BENCHMARK SUMMARY", width=50)
        print("\nReranker performance (fastest to slowest):")
        for position, result in enumerate(sorted(results, key=lambda r: r.duration_s), start=1):
            if result.error:
                print(f"  {position}. {result.model_name}: ERROR - {result.error}")
            else:
                print(
                    f"  {position}. {result.model_name}: {result.duration_s:.4f} seconds "
                    f"({result.docs_per_sec:.2f} docs/sec)"
                )
    return 1 if failed or any(r.error for r in results) else 0


async def _benchmark_one(
    args: argparse.Namespace,
    settings: Settings,
    model: str,
    query: str,
    documents: list[Document],
) -> BenchmarkResult:
    from gguf_reranker.api.benchmark import BenchmarkResult, benchmark_reranker
    from gguf_reranker.config.settings import ConfigurationError
    from gguf_reranker.core.errors import RerankerError

    try:
        reranker = _make_reranker(args, settings, model)
    except (RerankerError, ConfigurationError) as e:
        return BenchmarkResult(model_name=model, num_docs=len(documents), error=str(e))
    try:
        return await benchmark_reranker(
            reranker, query, documents, iterations=args.iterations
        )
    finally:
        reranker.close()


def _print_benchmark(result: BenchmarkResult) -> None:
    print(f"\nBenchmark: {result.model_name}")
    if result.error:
        print(f"  ERROR: {result.error}")
        return
    print(f"  Documents:  {result.num_docs}")
    print(f"  Runs:       {result.iterations}")
    print(f"  Duration:   {result.duration_s:.4f}s")
    print(f"  Docs/sec:   {result.docs_per_sec:.2f}")
    print(f"  Avg score:  {result.avg_score:.4f}")


def _setup_logging(verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from gguf_reranker.config.settings import load_settings
    from gguf_reranker.logging.logger import setup_logging

    settings = load_settings()
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
