"""Background execution of bootstrap runs."""

from docsearch.pipeline.bootstrap_runner import BootstrapHandle, BootstrapRunner

__all__ = [
    "BootstrapHandle",
    "BootstrapRunner",
]
