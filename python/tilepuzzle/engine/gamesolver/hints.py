"""Turns the first step of a solution path into a hint."""

from __future__ import annotations

from collections.abc import Sequence

from tilepuzzle.models.board import Board, Direction, Hint


def derive_hint(path: Sequence[Board]) -> Hint | None:
    """Return the hint for ``path[0] -> path[1]``, or ``None`` if the path has no moves.

    The tile that lands in ``path[0]``'s blank cell is the one that moved.
    It travels opposite to the blank: blank one cell right means the tile
    slid left, blank one row down means the tile slid up, and so on.
    """
    if len(path) < 2:
        return None

    current, nxt = path[0], path[1]
    size = current.size
    e0 = current.empty_index()
    e1 = nxt.empty_index()

    # Blank displacement -> tile direction.
    directions = {
        1: Direction.LEFT,
        -1: Direction.RIGHT,
        size: Direction.UP,
        -size: Direction.DOWN,
    }
    diff = e1 - e0
    if diff not in directions:
        raise ValueError(
            f"Consecutive path states are not one slide apart "
            f"(blank moved {e0} -> {e1})."
        )
    return Hint(tile_value=nxt[e0], direction=directions[diff])
