"""Sliding puzzle solver — A* search with the Manhattan-distance heuristic.

The heuristic is admissible and consistent, so the first time the goal is
popped from the open set its path is a shortest one.  Search cost grows
exponentially with the grid, so callers are expected to restrict use to
small boards (the engine enforces this; the solver itself does not).
"""

from __future__ import annotations

import heapq
import logging
import time
from bisect import bisect_left, insort
from itertools import count

from tilepuzzle.engine.gamesolver.hints import derive_hint
from tilepuzzle.errors import SolverExhaustedError
from tilepuzzle.models.board import Board, Hint

logger = logging.getLogger(__name__)

_State = tuple[int, ...]


def _neighbours(size: int) -> list[tuple[int, ...]]:
    """Precomputed adjacency: cell index -> indices it can swap with."""
    adj: list[tuple[int, ...]] = []
    for i in range(size * size):
        r, c = divmod(i, size)
        nb: list[int] = []
        if r > 0:
            nb.append(i - size)
        if r < size - 1:
            nb.append(i + size)
        if c > 0:
            nb.append(i - 1)
        if c < size - 1:
            nb.append(i + 1)
        adj.append(tuple(nb))
    return adj


def _manhattan(tiles: _State, size: int) -> int:
    dist = 0
    for i, v in enumerate(tiles):
        if v == 0:
            continue
        r, c = divmod(i, size)
        gr, gc = divmod(v - 1, size)
        dist += abs(r - gr) + abs(c - gc)
    return dist


def _reconstruct(parents: dict[_State, _State | None], end: _State) -> list[_State]:
    path = [end]
    prev = parents[end]
    while prev is not None:
        path.append(prev)
        prev = parents[prev]
    path.reverse()
    return path


def _search(start: _State, size: int) -> list[_State]:
    """Run A* from *start*. Raises ``SolverExhaustedError`` if the goal is unreachable."""
    n = size * size
    goal = tuple((i + 1) % n for i in range(n))
    adj = _neighbours(size)

    # Ties on f are broken by insertion order; any order is optimal here.
    tie = count()
    best_g: dict[_State, int] = {start: 0}
    parents: dict[_State, _State | None] = {start: None}
    closed: set[_State] = set()
    heap: list[tuple[int, int, int, _State]] = []
    heapq.heappush(heap, (_manhattan(start, size), 0, next(tie), start))

    expanded = 0
    t0 = time.perf_counter()

    while heap:
        _, g, _, state = heapq.heappop(heap)
        if state in closed or g > best_g[state]:
            continue  # superseded heap entry

        if state == goal:
            logger.debug(
                "A* solved %d×%d in %d moves (%d expanded, %.3fs)",
                size, size, g, expanded, time.perf_counter() - t0,
            )
            return _reconstruct(parents, state)

        closed.add(state)
        expanded += 1

        blank = state.index(0)
        for j in adj[blank]:
            nxt = list(state)
            nxt[blank], nxt[j] = nxt[j], nxt[blank]
            child = tuple(nxt)
            if child in closed:
                continue
            new_g = g + 1
            if child not in best_g or new_g < best_g[child]:
                best_g[child] = new_g
                parents[child] = state
                f = new_g + _manhattan(child, size)
                heapq.heappush(heap, (f, new_g, next(tie), child))

    raise SolverExhaustedError(
        f"Open set exhausted after {expanded} states without reaching the goal "
        f"from {list(start)}."
    )


class Solver:
    """Stateless solver — all methods are static."""

    @staticmethod
    def solve(board: Board) -> list[Board]:
        """Return a shortest path of boards from *board* to the goal.

        ``path[0]`` is *board* itself and ``path[-1]`` is solved, so an
        already-solved board yields a one-element path.  Raises
        ``SolverExhaustedError`` if the goal cannot be reached.
        """
        if board.is_solved():
            return [board]

        if not Solver.is_solvable(board):
            raise SolverExhaustedError(
                f"Board {list(board.tiles)} has the wrong parity and cannot "
                f"reach the goal."
            )

        states = _search(board.tiles, board.size)
        return [Board(size=board.size, tiles=s) for s in states]

    @staticmethod
    def hint(board: Board) -> Hint | None:
        """Return the single best next move, or ``None`` if already solved."""
        return derive_hint(Solver.solve(board))

    @staticmethod
    def manhattan(board: Board) -> int:
        """Sum of Manhattan distances of every tile from its goal cell."""
        return _manhattan(board.tiles, board.size)

    @staticmethod
    def is_solvable(board: Board) -> bool:
        """Return True if *board* can reach the goal state."""
        n = board.size
        inv = 0
        seen: list[int] = []
        for v in board.tiles:
            if v == 0:
                continue
            inv += len(seen) - bisect_left(seen, v)
            insort(seen, v)
        if n % 2 == 1:
            return inv % 2 == 0
        blank_from_bottom = n - 1 - board.empty_index() // n
        return (inv + blank_from_bottom) % 2 == 0


def solve_tiles(tiles: list[int], size: int) -> list[list[int]] | None:
    """Plain-data entry point: ``None`` when there is no solution.

    Takes and returns only lists so it can run in another process.
    """
    try:
        path = Solver.solve(Board.from_flat(size, tiles))
    except SolverExhaustedError:
        logger.exception("No solution for %d×%d board %s", size, size, tiles)
        return None
    return [list(b.tiles) for b in path]
