"""Fire-and-forget launching of bootstrap runs.

The HTTP endpoint must answer immediately while a bootstrap can take
minutes, so runs execute as detached ``asyncio`` tasks.  Instead of a bare
un-awaited coroutine, each run is wrapped in a :class:`BootstrapHandle`
that exposes its current phase and, once finished, its result.

# ─── HOW LAUNCHING WORKS ──────────────────────────────────────────────
#
#   POST /bootstrap ──launch()──→ BootstrapRunner ──create_task()──→ orchestrator.run()
#                                     │
#                                     └──→ BootstrapHandle (phase, done(), result())
#
#   - One in-flight run per index name within this process: launching an
#     index that is still bootstrapping returns the existing handle.
#   - Finished handles are kept (latest per index) so status can be read
#     after the fact.
#   - There is no cancellation; a run always reaches DONE or FAILED.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from docsearch.models.bootstrap import BootstrapPhase, BootstrapResult

if TYPE_CHECKING:
    from docsearch.services.ingestion.bootstrap import BootstrapOrchestrator

logger = structlog.get_logger(logger_name=__name__)


class BootstrapHandle:
    """Observable view of one background bootstrap run."""

    def __init__(self, index_name: str) -> None:
        self._index_name = index_name
        self._phase = BootstrapPhase.PENDING
        self._task: asyncio.Task[BootstrapResult] | None = None

    @property
    def index_name(self) -> str:
        return self._index_name

    @property
    def phase(self) -> BootstrapPhase:
        return self._phase

    def done(self) -> bool:
        return self._task is not None and self._task.done()

    def result(self) -> BootstrapResult | None:
        """Return the run's result, or ``None`` while it is still running."""
        if not self.done():
            return None
        return self._task.result()  # type: ignore[union-attr]

    async def wait(self) -> BootstrapResult:
        """Block until the run finishes and return its result."""
        if self._task is None:
            raise RuntimeError(f"Bootstrap for {self._index_name!r} was never started")
        return await asyncio.shield(self._task)

    def _set_phase(self, phase: BootstrapPhase) -> None:
        self._phase = phase

    def _attach(self, task: asyncio.Task[BootstrapResult]) -> None:
        self._task = task


class BootstrapRunner:
    """Schedules orchestrator runs as background tasks.

    Parameters
    ----------
    orchestrator:
        The bootstrap orchestrator every launched run uses.
    """

    def __init__(self, orchestrator: BootstrapOrchestrator) -> None:
        self._orchestrator = orchestrator
        # Latest handle per index name (running or finished).
        self._handles: dict[str, BootstrapHandle] = {}

    def launch(self, index_name: str) -> BootstrapHandle:
        """Start a bootstrap of *index_name* and return without waiting.

        Must be called from inside a running event loop.  If a run for the
        same index is still in flight, its handle is returned and no second
        run starts.
        """
        current = self._handles.get(index_name)
        if current is not None and not current.done():
            logger.info("bootstrap_already_running", index_name=index_name)
            return current

        handle = BootstrapHandle(index_name)
        task = asyncio.create_task(
            self._orchestrator.run(index_name, on_phase=handle._set_phase),
            name=f"bootstrap:{index_name}",
        )
        handle._attach(task)
        self._handles[index_name] = handle
        logger.info("bootstrap_launched", index_name=index_name)
        return handle

    def get(self, index_name: str) -> BootstrapHandle | None:
        """Return the latest handle for *index_name*, if one was launched."""
        return self._handles.get(index_name)

    async def shutdown(self) -> None:
        """Wait for every in-flight run to finish."""
        pending = [handle.wait() for handle in self._handles.values() if not handle.done()]
        if pending:
            logger.info("bootstrap_runner_draining", runs=len(pending))
            await asyncio.gather(*pending)
