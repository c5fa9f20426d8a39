"""Shared fixtures: executors that give tests control over solver jobs."""

from __future__ import annotations

from concurrent.futures import Executor, Future

import pytest

from tilepuzzle.engine.worker import SolveBridge


class InlineExecutor(Executor):
    """Runs every job immediately on the calling thread."""

    def submit(self, fn, /, *args, **kwargs) -> Future:
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


class ManualExecutor(Executor):
    """Queues jobs until ``run_all()`` is called."""

    def __init__(self) -> None:
        self.jobs: list[tuple[Future, object, tuple, dict]] = []

    def submit(self, fn, /, *args, **kwargs) -> Future:
        future: Future = Future()
        self.jobs.append((future, fn, args, kwargs))
        return future

    def run_all(self) -> None:
        jobs, self.jobs = self.jobs, []
        for future, fn, args, kwargs in jobs:
            future.set_result(fn(*args, **kwargs))


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def inline_bridge() -> SolveBridge:
    return SolveBridge(executor=InlineExecutor())


@pytest.fixture
def manual_executor() -> ManualExecutor:
    return ManualExecutor()


@pytest.fixture
def manual_bridge(manual_executor: ManualExecutor) -> SolveBridge:
    return SolveBridge(executor=manual_executor)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
