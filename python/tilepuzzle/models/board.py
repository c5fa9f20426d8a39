"""Board model for the sliding puzzle game."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from tilepuzzle.errors import IllegalMoveError


class Direction(StrEnum):
    """Direction a *tile* slides (the empty cell moves the opposite way)."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class Hint:
    tile_value: int
    direction: Direction


@dataclass(frozen=True)
class Board:
    """Represents the sliding puzzle board.

    Tiles are stored as a flat row-major tuple of ints. 0 represents the
    blank space. A tile with value ``v`` belongs at index ``v - 1``; the
    blank belongs in the last cell.
    """

    size: int
    tiles: tuple[int, ...]

    # -- construction helpers -------------------------------------------------

    @classmethod
    def solved(cls, size: int) -> Board:
        """Return the goal-state board (all tiles in order, blank bottom-right)."""
        if size < 2:
            raise ValueError(f"Grid size must be at least 2, got {size}.")
        n = size * size
        return cls(size=size, tiles=tuple((i + 1) % n for i in range(n)))

    @classmethod
    def from_flat(cls, size: int, flat: list[int] | tuple[int, ...]) -> Board:
        """Create a board from a flat row-major tile list.

        Example::

            Board.from_flat(3, [1, 2, 3, 4, 5, 6, 7, 0, 8])
        """
        if size < 2:
            raise ValueError(f"Grid size must be at least 2, got {size}.")
        if len(flat) != size * size:
            raise ValueError(
                f"Expected {size * size} tiles for a {size}×{size} board, "
                f"got {len(flat)}."
            )
        if sorted(flat) != list(range(size * size)):
            raise ValueError(
                f"Tiles must be a permutation of 0..{size * size - 1}, "
                f"got {list(flat)}."
            )
        return cls(size=size, tiles=tuple(flat))

    # -- queries --------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.tiles)

    def __getitem__(self, index: int) -> int:
        return self.tiles[index]

    def is_solved(self) -> bool:
        """Check if all tiles are in their goal positions."""
        n = len(self.tiles)
        return all(v == (i + 1) % n for i, v in enumerate(self.tiles))

    def is_tile_correct(self, index: int) -> bool:
        """Check if the tile at *index* is in its goal position."""
        return self.tiles[index] == (index + 1) % len(self.tiles)

    def empty_index(self) -> int:
        return self.tiles.index(0)

    def index_of(self, value: int) -> int:
        return self.tiles.index(value)

    def legal_moves(self) -> list[int]:
        """Indices of the tiles that can slide into the blank."""
        size = self.size
        blank = self.empty_index()
        row, col = divmod(blank, size)
        moves: list[int] = []
        if row > 0:
            moves.append(blank - size)
        if row < size - 1:
            moves.append(blank + size)
        if col > 0:
            moves.append(blank - 1)
        if col < size - 1:
            moves.append(blank + 1)
        return moves

    def is_adjacent_to_blank(self, index: int) -> bool:
        br, bc = divmod(self.empty_index(), self.size)
        tr, tc = divmod(index, self.size)
        return abs(tr - br) + abs(tc - bc) == 1

    def direction_of(self, index: int) -> Direction | None:
        """Direction the tile at *index* moves when slid into the blank.

        Returns ``None`` if the tile is not next to the blank.
        """
        if not self.is_adjacent_to_blank(index):
            return None
        offset = self.empty_index() - index
        if offset == -self.size:
            return Direction.UP
        if offset == self.size:
            return Direction.DOWN
        if offset == -1:
            return Direction.LEFT
        return Direction.RIGHT

    def rows(self) -> list[tuple[int, ...]]:
        s = self.size
        return [self.tiles[r * s : (r + 1) * s] for r in range(s)]

    # -- transitions ----------------------------------------------------------

    def apply_move(self, target: int) -> Board:
        """Return a new board with the tile at *target* slid into the blank.

        Raises ``IllegalMoveError`` if *target* is not adjacent to the blank.
        """
        if target not in self.legal_moves():
            raise IllegalMoveError(
                f"Index {target} is not adjacent to the blank at "
                f"{self.empty_index()} on a {self.size}×{self.size} board."
            )
        blank = self.empty_index()
        tiles = list(self.tiles)
        tiles[blank], tiles[target] = tiles[target], tiles[blank]
        return Board(size=self.size, tiles=tuple(tiles))
