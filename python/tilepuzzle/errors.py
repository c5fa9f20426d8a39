"""Exceptions raised by the puzzle engine."""

from __future__ import annotations


class PuzzleError(Exception):
    """Base class for engine errors."""


class IllegalMoveError(PuzzleError):
    """A move targeted a cell that is not adjacent to the blank."""


class UnsupportedGridSizeError(PuzzleError):
    """Hint or auto-solve requested for a grid the solver is not enabled for."""

    def __init__(self, size: int, supported: tuple[int, ...]) -> None:
        self.size = size
        self.supported = supported
        sizes = ", ".join(f"{s}×{s}" for s in supported)
        super().__init__(
            f"The solver is only available for {sizes} puzzles "
            f"(this one is {size}×{size})."
        )


class SolverExhaustedError(PuzzleError):
    """The search ran out of states without reaching the goal."""


class ConcurrentSolveRejected(PuzzleError):
    """A solve job is already running for this engine."""


class HintNotPermittedError(PuzzleError):
    """The hint-permission policy refused the request."""
