"""Runs solver jobs off the caller's thread.

The bridge speaks plain data in both directions so the same job can run
in a thread or in a separate process:

    request  -> ``SolveRequest(tiles=[...], grid_size=n)``
    response -> list of tile lists, or ``None`` when there is no solution

Only one job may be outstanding at a time.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass

from tilepuzzle.engine.gamesolver.solver import solve_tiles
from tilepuzzle.errors import ConcurrentSolveRejected

logger = logging.getLogger(__name__)

SolveResponse = list[list[int]] | None


@dataclass(frozen=True)
class SolveRequest:
    tiles: list[int]
    grid_size: int


def run_request(request: SolveRequest) -> SolveResponse:
    return solve_tiles(request.tiles, request.grid_size)


class SolveBridge:
    """Dispatches ``SolveRequest`` jobs to an executor, one at a time.

    The executor is created lazily.  Pass one in to share a pool or to
    run jobs inline in tests.
    """

    def __init__(self, executor: Executor | None = None, use_processes: bool = False) -> None:
        self._executor = executor
        self._owns_executor = executor is None
        self._use_processes = use_processes
        self._pending: Future[SolveResponse] | None = None

    @property
    def busy(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def submit(self, request: SolveRequest) -> Future[SolveResponse]:
        """Start *request*; raises ``ConcurrentSolveRejected`` if a job is running."""
        if self.busy:
            raise ConcurrentSolveRejected("A solve job is already in progress.")

        if self._executor is None:
            if self._use_processes:
                self._executor = ProcessPoolExecutor(max_workers=1)
            else:
                self._executor = ThreadPoolExecutor(
                    max_workers=1, thread_name_prefix="solver"
                )

        logger.debug("Dispatching %d×%d solve job", request.grid_size, request.grid_size)
        self._pending = self._executor.submit(run_request, request)
        return self._pending

    def shutdown(self, wait: bool = False) -> None:
        """Release the executor if the bridge created it.

        Running jobs are not cancelled; their results are simply dropped.
        """
        if self._owns_executor and self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None
        self._pending = None
