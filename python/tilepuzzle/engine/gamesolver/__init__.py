from tilepuzzle.engine.gamesolver.hints import derive_hint
from tilepuzzle.engine.gamesolver.solver import Solver, solve_tiles

__all__ = ["Solver", "derive_hint", "solve_tiles"]
