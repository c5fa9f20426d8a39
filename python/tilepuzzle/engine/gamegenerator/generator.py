"""Generates solvable sliding puzzle boards."""

from __future__ import annotations

import logging
import random

from tilepuzzle.config import DEFAULT_CONFIG
from tilepuzzle.models.board import Board

logger = logging.getLogger(__name__)


class GameGenerator:
    """Creates solvable puzzles by random-walking from the solved state.

    Every step is a legal slide, so the result is always reachable from the
    goal (and the goal from it) regardless of grid parity.
    """

    @staticmethod
    def solved(size: int) -> Board:
        """Return the goal-state board (all tiles in order, blank bottom-right)."""
        return Board.solved(size)

    @staticmethod
    def scramble(
        board: Board,
        steps: int,
        rng: random.Random | None = None,
    ) -> Board:
        """Return *board* after *steps* random slides.

        The slide that would undo the previous one is never picked, so the
        walk does not waste depth oscillating between two states.
        """
        rng = rng or random
        prev_blank: int | None = None

        for _ in range(steps):
            neighbors = board.legal_moves()
            if prev_blank in neighbors and len(neighbors) > 1:
                neighbors.remove(prev_blank)
            target = rng.choice(neighbors)
            prev_blank = board.empty_index()
            board = board.apply_move(target)

        return board

    @staticmethod
    def generate(
        size: int,
        shuffle_factor: int = DEFAULT_CONFIG.shuffle_factor,
        rng: random.Random | None = None,
    ) -> Board:
        """Return a random *solvable*, unsolved board of the given size."""
        rng = rng or random
        board = GameGenerator.scramble(
            GameGenerator.solved(size), size * size * shuffle_factor, rng
        )

        # A single extra slide keeps the board reachable, unlike swapping
        # two tiles, which would flip its parity.
        if board.is_solved():
            logger.debug("Shuffle landed on the goal state, sliding once more")
            board = board.apply_move(rng.choice(board.legal_moves()))

        return board
