# =============================================================================
# docsearch/cli/bootstrap.py: CLI Bootstrap Command (Index Management)
# =============================================================================
#
# Standalone CLI for populating the docsearch vector index outside of the
# web server.  Runs the same pipeline as ``POST /api/v1/bootstrap`` but in
# the foreground, printing the final result and exiting with a status code.
#
# Supported subcommands:
#
#   bootstrap  Populate the index (skipped when it already holds vectors)
#   plan       Dry run: load, match and chunk the corpus without calling
#              the embedding provider or the vector store
#
# Usage examples:
#   python -m docsearch.cli bootstrap
#   python -m docsearch.cli bootstrap --index thundersearch --docs-dir ./docs
#   python -m docsearch.cli plan --catalog ./docs/db.json
# =============================================================================

"""Standalone CLI for bootstrapping the docsearch vector index.

Usage::

    python -m docsearch.cli bootstrap --index thundersearch

    python -m docsearch.cli plan --docs-dir ./docs

Exit code is 0 when the run succeeded or was skipped, 1 otherwise.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Any

from docsearch.config.loader import load_config
from docsearch.config.settings import Settings
from docsearch.models.bootstrap import BootstrapResult
from docsearch.utils.errors import DocSearchError
from docsearch.utils.logging import configure_logging


def _resolve_config(args: argparse.Namespace, app_settings: Settings) -> dict[str, Any]:
    """Load the merged config and apply command-line overrides on top."""
    config = load_config(path=args.config, settings=app_settings)
    corpus = config.setdefault("corpus", {})
    if args.docs_dir:
        corpus["docs_dir"] = args.docs_dir
    if args.catalog:
        corpus["metadata_catalog_path"] = args.catalog
    if args.index:
        config.setdefault("vector_store", {})["index_name"] = args.index
    return config


def _index_name(config: dict[str, Any], app_settings: Settings) -> str:
    return config.get("vector_store", {}).get("index_name", app_settings.vector_index_name)


def _print_result(result: BootstrapResult) -> None:
    print(f"\nBootstrap {result.status.value} ({result.status_code}): {result.message}")
    print(f"  Index:               {result.index_name}")
    print(f"  Documents loaded:    {result.documents_loaded}")
    print(f"  Documents processed: {result.documents_processed}")
    print(f"  Skipped (unmatched): {result.skipped_unmatched}")
    print(f"  Skipped (invalid):   {result.skipped_invalid}")
    print(f"  Catalog orphans:     {result.unmatched_records}")
    print(f"  Chunks created:      {result.chunks_created}")
    if result.batches_total:
        print(f"  Batches:             {result.batches_total} ({result.batches_failed} failed)")
    print(f"  Vectors upserted:    {result.vectors_upserted}")
    print(f"  Time:                {result.elapsed_seconds:.2f}s")


# ---------------------------------------------------------------------------
# Subcommand handlers
# ---------------------------------------------------------------------------


async def _handle_bootstrap(config: dict[str, Any], app_settings: Settings) -> int:
    """Run a full bootstrap against the configured providers."""
    # Deferred: pulls in the provider SDKs.
    from docsearch.main import build_components

    components = build_components(app_settings, config)
    registry = components["provider_registry"]
    print(
        f"Providers: embedding={registry['embedding_name']} "
        f"| store={registry['vector_store_name']}"
    )

    result = await components["orchestrator"].run(components["index_name"])
    _print_result(result)
    return 0 if result.is_success else 1


async def _handle_plan(config: dict[str, Any], app_settings: Settings) -> int:
    """Report what a bootstrap would index without touching any provider."""
    from docsearch.config.ingestion import IngestionConfig
    from docsearch.main import build_preparer

    preparer = build_preparer(config, IngestionConfig.from_config(config))
    result = await preparer.plan(_index_name(config, app_settings))
    _print_result(result)
    return 0 if result.is_success else 1


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the bootstrap CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m docsearch.cli",
        description="Populate the docsearch vector index from a document directory.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Index commands")

    for name, help_text in (
        ("bootstrap", "Populate the index if it is empty"),
        ("plan", "Dry run: load and chunk documents without writing"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--index", help="Target index name (default: VECTOR_INDEX_NAME)")
        sub.add_argument("--docs-dir", dest="docs_dir", help="Document directory")
        sub.add_argument("--catalog", help="Path to the metadata catalog JSON")
        sub.add_argument(
            "--config",
            default="config/config.yaml",
            help="YAML config file (default: config/config.yaml)",
        )

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.  Returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    app_settings = Settings()
    configure_logging(log_level=app_settings.log_level)

    try:
        config = _resolve_config(args, app_settings)
        if args.command == "plan":
            return asyncio.run(_handle_plan(config, app_settings))
        return asyncio.run(_handle_bootstrap(config, app_settings))
    except DocSearchError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
