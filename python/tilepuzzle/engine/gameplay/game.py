"""Core gameplay logic — processes moves, undo, hints, auto-solve, and the win condition.

All methods are meant to be called from a single thread (the UI loop).
Solver work is handed to a ``SolveBridge`` and its results are only
applied inside ``pump()`` / ``process_events()``, so the session is never
mutated from the worker thread.
"""

from __future__ import annotations

import logging
import queue
import random
import time
from collections import deque
from collections.abc import Callable
from concurrent.futures import Future
from dataclasses import dataclass
from typing import NamedTuple

from tilepuzzle.config import DEFAULT_CONFIG, EngineConfig
from tilepuzzle.engine.gamegenerator import GameGenerator
from tilepuzzle.engine.gamesolver import derive_hint
from tilepuzzle.engine.gamestate import GameState, Phase
from tilepuzzle.engine.worker import SolveBridge, SolveRequest, SolveResponse
from tilepuzzle.errors import (
    ConcurrentSolveRejected,
    HintNotPermittedError,
    PuzzleError,
    SolverExhaustedError,
    UnsupportedGridSizeError,
)
from tilepuzzle.models.board import Board, Direction, Hint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WinEvent:
    grid_size: int
    moves: int
    elapsed: int
    auto_solved: bool


class _Completion(NamedTuple):
    session: int
    kind: str  # "hint" or "solve"
    board: Board
    future: Future[SolveResponse]


class GamePlay:
    """Orchestrates a single game session."""

    def __init__(
        self,
        size: int,
        *,
        config: EngineConfig = DEFAULT_CONFIG,
        bridge: SolveBridge | None = None,
        hint_permitted: Callable[[], bool] | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
        board: Board | None = None,
    ) -> None:
        self.config = config
        self._bridge = bridge or SolveBridge(use_processes=config.use_processes)
        self._hint_permitted = hint_permitted
        self._rng = rng
        self._clock = clock
        self._inbox: queue.Queue[_Completion] = queue.Queue()
        self._session = 0
        self.win_listeners: list[Callable[[WinEvent], None]] = []
        self.hint_listeners: list[Callable[[Hint], None]] = []
        self.size = size
        self.new_session(size, board=board)

    @classmethod
    def from_board(cls, board: Board, **kwargs) -> GamePlay:
        """Create a game session from an existing board instead of a shuffle."""
        return cls(board.size, board=board, **kwargs)

    # -- session lifecycle ----------------------------------------------------

    def new_session(self, size: int | None = None, board: Board | None = None) -> GameState:
        """Discard the current session and start a freshly shuffled one."""
        if size is not None:
            self.size = size
        if board is None:
            board = GameGenerator.generate(self.size, self.config.shuffle_factor, self._rng)
        elif board.size != self.size:
            raise ValueError(f"Board is {board.size}×{board.size}, session is {self.size}×{self.size}.")

        self._session += 1
        self.state = GameState(board, undo_limit=self.config.undo_limit)
        self._calculating = False
        self._replay: deque[Board] = deque()
        self._win_fired = False
        self._tick_anchor: float | None = None
        self._replay_anchor: float | None = None
        self.fatal_error: PuzzleError | None = None
        self.last_rejection: PuzzleError | None = None

        logger.info("New %d×%d session #%d: %s", self.size, self.size, self._session, list(board.tiles))
        return self.state

    def restart(self) -> GameState:
        return self.new_session()

    def close(self) -> None:
        self._bridge.shutdown()

    def on_win(self, callback: Callable[[WinEvent], None]) -> Callable[[WinEvent], None]:
        self.win_listeners.append(callback)
        return callback

    def on_hint(self, callback: Callable[[Hint], None]) -> Callable[[Hint], None]:
        self.hint_listeners.append(callback)
        return callback

    # -- queries --------------------------------------------------------------

    @property
    def board(self) -> Board:
        return self.state.board

    @property
    def tiles(self) -> tuple[int, ...]:
        return self.state.board.tiles

    @property
    def moves(self) -> int:
        return self.state.moves

    @property
    def elapsed(self) -> int:
        return self.state.elapsed

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def hint(self) -> Hint | None:
        return self.state.hint

    @property
    def empty_index(self) -> int:
        return self.state.board.empty_index()

    @property
    def is_solved(self) -> bool:
        return self.state.phase is Phase.SOLVED

    is_won = is_solved

    @property
    def is_started(self) -> bool:
        return self.state.started

    @property
    def is_solving(self) -> bool:
        return self.state.phase is Phase.SOLVING

    @property
    def is_calculating(self) -> bool:
        return self._calculating

    @property
    def can_undo(self) -> bool:
        return self.state.history_depth > 0 and not self._locked()

    @property
    def can_solve(self) -> bool:
        return (
            not self._locked()
            and not self._calculating
            and self.config.supports_solver(self.size)
        )

    # -- movement -------------------------------------------------------------

    def handle_move(self, tile_value: int) -> bool:
        """Slide tile *tile_value* into the blank if they are adjacent.

        Returns True if the move was applied.
        """
        if self._locked():
            return False

        board = self.state.board
        if tile_value == 0 or tile_value not in board.tiles:
            return False
        index = board.index_of(tile_value)
        if not board.is_adjacent_to_blank(index):
            return False

        self.state.push(board.apply_move(index))
        self.state.hint = None
        self._arm_timer()
        self._check_win(auto_solved=False)
        return True

    def move(self, direction: Direction) -> bool:
        """Slide a tile in *direction* into the adjacent blank.

        E.g. ``Direction.UP`` moves the tile **below** the blank upward.
        Returns True if the move was valid.
        """
        size = self.size
        br, bc = divmod(self.state.board.empty_index(), size)

        # The offset points to the tile that will slide into the blank.
        offsets = {
            Direction.UP: (1, 0),
            Direction.DOWN: (-1, 0),
            Direction.LEFT: (0, 1),
            Direction.RIGHT: (0, -1),
        }
        dr, dc = offsets[direction]
        tr, tc = br + dr, bc + dc

        if not (0 <= tr < size and 0 <= tc < size):
            return False

        return self.handle_move(self.state.board[tr * size + tc])

    def undo(self) -> bool:
        """Restore the board from before the last move."""
        if self._locked():
            return False
        if not self.state.pop():
            return False
        self.state.hint = None
        return True

    # -- solver commands ------------------------------------------------------

    def request_hint(self) -> bool:
        """Ask the solver for the next move.  The hint appears after ``pump()``."""
        if not self._may_dispatch():
            return False
        if self._hint_permitted is not None and not self._hint_permitted():
            return self._reject(HintNotPermittedError("Hint not permitted right now."))
        return self._dispatch("hint")

    def auto_solve(self) -> bool:
        """Solve the board and replay the solution step by step in ``pump()``."""
        if not self._may_dispatch():
            return False
        return self._dispatch("solve")

    # -- event loop -----------------------------------------------------------

    def pump(self, now: float | None = None) -> None:
        """Apply finished solver jobs, advance the timer, and step the replay.

        Call this regularly from the UI loop.
        """
        if now is None:
            now = self._clock()

        self.process_events()

        if self._tick_anchor is not None:
            step = self.config.tick_seconds
            while (
                self.state.started
                and not self.is_solved
                and self.fatal_error is None
                and now - self._tick_anchor >= step
            ):
                self.tick()
                self._tick_anchor += step

        if self._replay_anchor is not None:
            delay = self.config.replay_delay
            while self.is_solving and now - self._replay_anchor >= delay:
                self.advance_replay()
                self._replay_anchor += delay

    def process_events(self) -> int:
        """Apply every solver result that has arrived.  Returns how many were handled."""
        handled = 0
        while True:
            try:
                completion = self._inbox.get_nowait()
            except queue.Empty:
                return handled
            self._complete(completion)
            handled += 1

    def tick(self) -> bool:
        """Advance the elapsed-time counter by one unit."""
        if self.fatal_error is not None:
            return False
        return self.state.tick()

    def advance_replay(self) -> bool:
        """Apply the next state of an auto-solve replay."""
        if not self.is_solving or not self._replay:
            return False
        self.state.advance(self._replay.popleft())
        if not self._replay and not self._check_win(auto_solved=True):
            # The path did not end solved; hand control back to the player.
            logger.error("Auto-solve replay ended on an unsolved board")
            self.state.phase = Phase.ACTIVE
        return True

    # -- helpers --------------------------------------------------------------

    def _locked(self) -> bool:
        return self.fatal_error is not None or self.state.phase in (Phase.SOLVING, Phase.SOLVED)

    def _reject(self, error: PuzzleError) -> bool:
        self.last_rejection = error
        logger.debug("Rejected: %s", error)
        return False

    def _may_dispatch(self) -> bool:
        self.last_rejection = None
        if self._locked():
            return False
        if not self.config.supports_solver(self.size):
            return self._reject(UnsupportedGridSizeError(self.size, self.config.solver_sizes))
        if self._calculating:
            return self._reject(ConcurrentSolveRejected("A solve job is already in progress."))
        return True

    def _dispatch(self, kind: str) -> bool:
        board = self.state.board
        try:
            future = self._bridge.submit(SolveRequest(tiles=list(board.tiles), grid_size=self.size))
        except ConcurrentSolveRejected as e:
            return self._reject(e)

        self._calculating = True
        completion_for = (self._session, kind, board)
        future.add_done_callback(lambda f: self._inbox.put(_Completion(*completion_for, f)))
        logger.debug("Dispatched %s job for session #%d", kind, self._session)
        return True

    def _complete(self, completion: _Completion) -> None:
        if completion.session != self._session:
            logger.debug("Discarding %s result from session #%d", completion.kind, completion.session)
            return

        self._calculating = False

        try:
            response = completion.future.result()
        except Exception as e:
            self._fail(SolverExhaustedError(f"Solve job failed: {e}"), e)
            return

        if completion.board != self.state.board or self._locked():
            logger.debug("Discarding stale %s result", completion.kind)
            return

        if response is None:
            self._fail(SolverExhaustedError(
                f"No solution found for {list(completion.board.tiles)}."
            ))
            return

        path = [Board(size=self.size, tiles=tuple(t)) for t in response]
        if completion.kind == "hint":
            hint = derive_hint(path)
            self.state.hint = hint
            if hint is not None:
                logger.info("Hint: move %d %s", hint.tile_value, hint.direction.value)
                for callback in self.hint_listeners:
                    callback(hint)
        else:
            self._begin_replay(path)

    def _fail(self, error: SolverExhaustedError, cause: BaseException | None = None) -> None:
        self.fatal_error = error
        self._replay.clear()
        if cause is not None:
            error.__cause__ = cause
        logger.error("Session #%d cannot continue: %s", self._session, error, exc_info=cause)

    def _begin_replay(self, path: list[Board]) -> None:
        self.state.hint = None
        self._arm_timer()
        self.state.phase = Phase.SOLVING
        self._replay = deque(path[1:])
        self._replay_anchor = self._clock()
        logger.info("Auto-solving in %d moves", len(self._replay))
        if not self._replay:
            self._check_win(auto_solved=True)

    def _arm_timer(self) -> None:
        self.state.start()
        if self._tick_anchor is None:
            self._tick_anchor = self._clock()

    def _check_win(self, auto_solved: bool) -> bool:
        if not self.state.is_solved:
            return False
        self.state.phase = Phase.SOLVED
        if not self._win_fired:
            self._win_fired = True
            event = WinEvent(
                grid_size=self.size,
                moves=self.state.moves,
                elapsed=self.state.elapsed,
                auto_solved=auto_solved,
            )
            logger.info("Solved in %d moves, %d ticks", event.moves, event.elapsed)
            for callback in self.win_listeners:
                callback(event)
        return True
