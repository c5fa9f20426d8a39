"""Tracks the mutable state of a game in progress."""

from __future__ import annotations

from collections import deque
from enum import StrEnum

from tilepuzzle.models.board import Board, Hint


class Phase(StrEnum):
    IDLE = "idle"          # shuffled, timer not armed
    ACTIVE = "active"      # timer running, accepting moves
    SOLVING = "solving"    # replaying an auto-solve path
    SOLVED = "solved"      # terminal for the session


class GameState:
    """Holds the current board, move counter, elapsed ticks, and undo history."""

    def __init__(self, board: Board, undo_limit: int = 1000) -> None:
        self.board = board
        self.moves: int = 0
        self.elapsed: int = 0
        self.phase: Phase = Phase.IDLE
        self.started: bool = False
        self.hint: Hint | None = None
        self._history: deque[Board] = deque(maxlen=undo_limit)

    # -- time tracking --------------------------------------------------------

    def start(self) -> None:
        """Arm the timer (first move or auto-solve)."""
        if not self.started:
            self.started = True
            if self.phase is Phase.IDLE:
                self.phase = Phase.ACTIVE

    def tick(self) -> bool:
        """Advance the clock one unit. Returns True if it advanced."""
        if self.started and self.phase is not Phase.SOLVED:
            self.elapsed += 1
            return True
        return False

    # -- moves ----------------------------------------------------------------

    def push(self, next_board: Board) -> None:
        """Record the current board for undo and replace it with *next_board*."""
        self._history.append(self.board)
        self.board = next_board
        self.moves += 1

    def pop(self) -> bool:
        if not self._history:
            return False
        self.board = self._history.pop()
        self.moves -= 1
        return True

    def advance(self, next_board: Board) -> None:
        """Replace the board without recording undo history (auto-solve replay)."""
        self.board = next_board
        self.moves += 1

    @property
    def history_depth(self) -> int:
        return len(self._history)

    @property
    def is_solved(self) -> bool:
        return self.board.is_solved()
