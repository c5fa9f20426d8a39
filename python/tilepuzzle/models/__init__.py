from tilepuzzle.models.board import Board, Direction, Hint

__all__ = ["Board", "Direction", "Hint"]
