"""Engine test suite — moves, undo, the win event, timer, hints, and auto-solve.

Solver jobs run through ``InlineExecutor`` (finished at submit time) or
``ManualExecutor`` (finished when the test says so); either way results
only reach the session when ``process_events()`` / ``pump()`` runs.
"""

from __future__ import annotations

import random

import pytest

from tilepuzzle.config import EngineConfig
from tilepuzzle.engine.gameplay import GamePlay, WinEvent
from tilepuzzle.engine.gamestate import Phase
from tilepuzzle.errors import (
    ConcurrentSolveRejected,
    HintNotPermittedError,
    SolverExhaustedError,
    UnsupportedGridSizeError,
)
from tilepuzzle.models.board import Board, Direction, Hint

# Blank bottom-left; 7 and 8 still to the right of it.
TWO_AWAY = Board.from_flat(3, [1, 2, 3, 4, 5, 6, 0, 7, 8])
ONE_AWAY = Board.from_flat(3, [1, 2, 3, 4, 5, 6, 7, 0, 8])


def _game(board: Board, bridge, **kwargs) -> GamePlay:
    return GamePlay.from_board(board, bridge=bridge, **kwargs)


def _collect_wins(game: GamePlay) -> list[WinEvent]:
    wins: list[WinEvent] = []
    game.on_win(wins.append)
    return wins


# -- sessions -----------------------------------------------------------------


def test_new_session_is_idle_and_shuffled(inline_bridge) -> None:
    game = GamePlay(3, bridge=inline_bridge, rng=random.Random(1))
    assert game.phase is Phase.IDLE
    assert not game.is_started
    assert not game.board.is_solved()
    assert game.moves == 0
    assert game.elapsed == 0
    assert game.hint is None
    assert not game.can_undo
    assert game.can_solve
    assert game.empty_index == game.tiles.index(0)


def test_restart_resets_everything(inline_bridge) -> None:
    game = _game(TWO_AWAY, inline_bridge, rng=random.Random(2))
    game.handle_move(7)
    game.tick()
    game.restart()
    assert game.phase is Phase.IDLE
    assert game.moves == 0
    assert game.elapsed == 0
    assert not game.can_undo
    assert not game.board.is_solved()


def test_board_size_must_match(inline_bridge) -> None:
    with pytest.raises(ValueError):
        GamePlay(2, bridge=inline_bridge, board=Board.solved(3))


# -- movement -----------------------------------------------------------------


def test_handle_move_adjacent(inline_bridge) -> None:
    game = _game(TWO_AWAY, inline_bridge)
    assert game.handle_move(7)
    assert game.tiles == (1, 2, 3, 4, 5, 6, 7, 0, 8)
    assert game.moves == 1
    assert game.phase is Phase.ACTIVE
    assert game.is_started
    assert game.can_undo


@pytest.mark.parametrize("tile", [1, 5, 8, 0, 42])
def test_handle_move_rejects_non_adjacent(inline_bridge, tile: int) -> None:
    game = _game(TWO_AWAY, inline_bridge)
    assert not game.handle_move(tile)
    assert game.board == TWO_AWAY
    assert game.moves == 0
    assert game.phase is Phase.IDLE


def test_move_by_direction(inline_bridge) -> None:
    game = _game(TWO_AWAY, inline_bridge)
    # Blank is bottom-left: nothing can slide right or up into it.
    assert not game.move(Direction.RIGHT)
    assert not game.move(Direction.UP)
    assert game.move(Direction.LEFT)
    assert game.tiles == ONE_AWAY.tiles


def test_undo_restores_exact_state(inline_bridge) -> None:
    game = _game(TWO_AWAY, inline_bridge)
    game.handle_move(4)
    game.handle_move(1)
    assert game.moves == 2
    assert game.undo()
    assert game.moves == 1
    assert game.undo()
    assert game.board == TWO_AWAY
    assert game.moves == 0
    assert not game.undo()
    assert game.moves == 0


def test_undo_history_is_bounded(inline_bridge) -> None:
    game = _game(TWO_AWAY, inline_bridge, config=EngineConfig(undo_limit=2))
    for tile in (4, 4, 4, 4):
        game.handle_move(tile)
    assert game.undo()
    assert game.undo()
    assert not game.undo()


# -- win ----------------------------------------------------------------------


def test_win_fires_once(inline_bridge) -> None:
    game = _game(ONE_AWAY, inline_bridge)
    wins = _collect_wins(game)

    assert game.handle_move(8)
    assert game.is_solved
    assert game.phase is Phase.SOLVED
    assert wins == [WinEvent(grid_size=3, moves=1, elapsed=0, auto_solved=False)]

    assert not game.handle_move(8)
    assert not game.handle_move(6)
    assert not game.undo()
    assert game.moves == 1
    assert len(wins) == 1


def test_win_event_carries_elapsed(inline_bridge) -> None:
    game = _game(TWO_AWAY, inline_bridge)
    wins = _collect_wins(game)
    game.handle_move(7)
    game.tick()
    game.tick()
    game.handle_move(8)
    assert wins[0].moves == 2
    assert wins[0].elapsed == 2


# -- timer --------------------------------------------------------------------


def test_timer_only_runs_while_active(inline_bridge) -> None:
    game = _game(TWO_AWAY, inline_bridge)
    assert not game.tick()
    assert game.elapsed == 0

    game.handle_move(7)
    assert game.tick()
    assert game.elapsed == 1

    game.handle_move(8)
    assert not game.tick()
    assert game.elapsed == 1


def test_pump_converts_clock_to_ticks(inline_bridge, clock) -> None:
    game = _game(TWO_AWAY, inline_bridge, clock=clock)
    clock.now = 10.0
    game.pump()
    assert game.elapsed == 0  # not started yet

    game.handle_move(7)
    clock.now = 12.5
    game.pump()
    assert game.elapsed == 2
    clock.now = 13.0
    game.pump()
    assert game.elapsed == 3

    game.handle_move(8)
    clock.now = 100.0
    game.pump()
    assert game.elapsed == 3


# -- hints --------------------------------------------------------------------


def test_hint_arrives_after_processing(inline_bridge) -> None:
    game = _game(Board.from_flat(2, [1, 0, 3, 2]), inline_bridge)
    received: list[Hint] = []
    game.on_hint(received.append)

    assert game.request_hint()
    assert game.is_calculating
    assert game.hint is None

    assert game.process_events() == 1
    assert not game.is_calculating
    assert game.hint == Hint(tile_value=2, direction=Direction.UP)
    assert received == [game.hint]
    # Hints do not count as moves or start the clock.
    assert game.moves == 0
    assert game.phase is Phase.IDLE


def test_hint_cleared_by_move(inline_bridge) -> None:
    game = _game(TWO_AWAY, inline_bridge)
    game.request_hint()
    game.process_events()
    assert game.hint is not None
    game.handle_move(4)
    assert game.hint is None


def test_hint_rejected_for_large_grid(inline_bridge) -> None:
    game = GamePlay(4, bridge=inline_bridge, rng=random.Random(4))
    assert not game.can_solve
    assert not game.request_hint()
    assert isinstance(game.last_rejection, UnsupportedGridSizeError)
    assert not game.auto_solve()
    assert not game.is_calculating


def test_hint_permission_predicate(manual_bridge, manual_executor) -> None:
    allowed = False
    game = _game(TWO_AWAY, manual_bridge, hint_permitted=lambda: allowed)

    assert not game.request_hint()
    assert isinstance(game.last_rejection, HintNotPermittedError)
    assert manual_executor.jobs == []

    allowed = True
    assert game.request_hint()
    assert game.last_rejection is None


def test_second_request_rejected_while_pending(manual_bridge, manual_executor) -> None:
    game = _game(TWO_AWAY, manual_bridge)
    assert game.request_hint()
    assert not game.request_hint()
    assert isinstance(game.last_rejection, ConcurrentSolveRejected)
    assert not game.auto_solve()
    assert len(manual_executor.jobs) == 1

    manual_executor.run_all()
    game.process_events()
    assert game.hint == Hint(tile_value=7, direction=Direction.LEFT)
    assert game.request_hint()


def test_stale_hint_is_discarded(manual_bridge, manual_executor) -> None:
    game = _game(TWO_AWAY, manual_bridge)
    game.request_hint()
    game.handle_move(4)  # board changes while the job is out

    manual_executor.run_all()
    game.process_events()
    assert game.hint is None
    assert not game.is_calculating


def test_result_for_old_session_is_discarded(manual_bridge, manual_executor) -> None:
    game = _game(TWO_AWAY, manual_bridge, rng=random.Random(6))
    game.auto_solve()
    game.restart()
    assert not game.is_calculating

    manual_executor.run_all()
    game.process_events()
    assert game.phase is Phase.IDLE
    assert game.moves == 0


def test_commands_ignored_when_solved(inline_bridge) -> None:
    game = _game(ONE_AWAY, inline_bridge)
    game.handle_move(8)
    assert not game.request_hint()
    assert not game.auto_solve()
    assert game.last_rejection is None
    assert not game.can_solve


# -- auto-solve ---------------------------------------------------------------


def test_auto_solve_replays_path(inline_bridge) -> None:
    game = _game(TWO_AWAY, inline_bridge)
    wins = _collect_wins(game)

    assert game.auto_solve()
    game.process_events()
    assert game.phase is Phase.SOLVING
    assert game.is_solving
    assert game.is_started

    # Input is locked during the replay.
    assert not game.handle_move(4)
    assert not game.undo()
    assert not game.request_hint()

    assert game.advance_replay()
    assert game.tiles == ONE_AWAY.tiles
    assert game.moves == 1
    assert game.advance_replay()
    assert game.board.is_solved()
    assert game.moves == 2
    assert game.phase is Phase.SOLVED
    assert not game.advance_replay()

    assert len(wins) == 1
    assert wins[0].auto_solved
    assert wins[0].moves == 2


def test_auto_solve_counts_on_top_of_player_moves(inline_bridge) -> None:
    game = _game(TWO_AWAY, inline_bridge)
    game.handle_move(4)  # now three moves from the goal
    game.auto_solve()
    game.process_events()
    while game.advance_replay():
        pass
    assert game.is_solved
    assert game.moves == 4


def test_pump_paces_the_replay(inline_bridge, clock) -> None:
    config = EngineConfig(replay_delay=0.5)
    game = _game(TWO_AWAY, inline_bridge, clock=clock, config=config)
    game.auto_solve()

    clock.now = 1.0
    game.pump()  # applies the result; replay starts from here
    assert game.is_solving
    assert game.moves == 0

    clock.now = 1.5
    game.pump()
    assert game.moves == 1
    assert game.is_solving

    clock.now = 5.0
    game.pump()
    assert game.is_solved
    assert game.moves == 2


# -- solver failure -----------------------------------------------------------


def test_unsolvable_board_is_fatal(inline_bridge) -> None:
    game = _game(Board.from_flat(2, [2, 1, 3, 0]), inline_bridge, rng=random.Random(8))
    assert game.auto_solve()
    game.process_events()

    assert isinstance(game.fatal_error, SolverExhaustedError)
    assert not game.is_calculating
    assert not game.is_solving
    assert not game.handle_move(3)
    assert not game.request_hint()
    assert not game.can_undo
    assert not game.can_solve

    game.restart()
    assert game.fatal_error is None
    assert game.can_solve


def test_clock_stops_after_solver_failure(inline_bridge, clock) -> None:
    game = _game(Board.from_flat(2, [2, 1, 3, 0]), inline_bridge, clock=clock)
    assert game.handle_move(3)
    clock.now = 2.0
    game.pump()
    assert game.elapsed == 2

    game.auto_solve()
    clock.now = 10.0
    game.pump()
    assert isinstance(game.fatal_error, SolverExhaustedError)
    assert game.elapsed == 2
    assert not game.tick()
    assert game.elapsed == 2
