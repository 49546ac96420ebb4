# =============================================================================
# docsearch/cli/__init__.py: CLI Module Overview
# =============================================================================
#
# Command-line entry points for operators who need to populate the vector
# index without running the web server (first deploy, CI seeding, or a
# local dry run against a new document drop).
#
#   bootstrap.py   ``bootstrap`` and ``plan`` subcommands
#
# Heavy imports (provider SDKs) are deferred inside the handlers so the
# ``plan`` dry run starts without loading fastembed, chromadb or pinecone.
# =============================================================================

"""CLI tools for the docsearch pipeline.

- ``python -m docsearch.cli bootstrap``: populate the vector index.
- ``python -m docsearch.cli plan``: dry-run the corpus preparation.
"""
