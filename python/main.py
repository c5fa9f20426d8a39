#!/usr/bin/env python3
"""Sliding Puzzle Game.

Usage::

    python main.py play                  # interactive Rich terminal game
    python main.py play -s 2 --hints 3   # 2×2, three hints per game
    python main.py solve -s 2 1 0 3 2    # print the optimal solution of a board
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

ROOT = Path(__file__).resolve().parent  # python/

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tilepuzzle.config import load_config  # noqa: E402
from tilepuzzle.engine.gamesolver import Solver, derive_hint  # noqa: E402
from tilepuzzle.errors import SolverExhaustedError  # noqa: E402
from tilepuzzle.models.board import Board  # noqa: E402

logger = logging.getLogger(__name__)


# -- helpers ------------------------------------------------------------------


def _configure_logging(level: str, log_file: Optional[Path]) -> None:
    """Send logs to *log_file*, or to stderr through Rich."""
    handler: logging.Handler
    if log_file is not None:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False)
    logging.basicConfig(level=level.upper(), handlers=[handler], force=True)


# -- CLI entry points ---------------------------------------------------------

app = typer.Typer(add_completion=False, help="Sliding Puzzle Game.")


@app.callback()
def main(
    log_level: str = typer.Option(
        "WARNING", "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    ),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file",
        help="Write logs to this file instead of stderr.",
    ),
) -> None:
    """Sliding Puzzle Game."""
    _configure_logging(log_level, log_file)


@app.command()
def play(
    size: int = typer.Option(
        3, "-s", "--size",
        min=2, max=5,
        help="Initial grid size (2-5).",
    ),
    hints: int = typer.Option(
        0, "--hints",
        min=0,
        help="Hints allowed per game (0 = unlimited).",
    ),
    config: Optional[Path] = typer.Option(
        None, "-c", "--config",
        help="JSON file overriding engine settings.",
    ),
) -> None:
    """Play in the Rich terminal frontend."""
    from frontend.cli.rich.app import run

    run(size=size, config=load_config(config), hint_limit=hints)


@app.command()
def solve(
    tiles: List[int] = typer.Argument(
        ..., help="Row-major tile values, 0 for the blank.",
    ),
    size: int = typer.Option(
        3, "-s", "--size",
        min=2,
        help="Grid size.",
    ),
) -> None:
    """Print the shortest solution of a board."""
    from frontend.cli.rich.app import render_board

    console = Console()
    try:
        board = Board.from_flat(size, tiles)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="TILES") from e

    try:
        path = Solver.solve(board)
    except SolverExhaustedError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1) from e

    hint = derive_hint(path)
    summary = Table(show_header=False, box=None)
    summary.add_row("Moves", str(len(path) - 1))
    summary.add_row("Heuristic", str(Solver.manhattan(board)))
    if hint is not None:
        summary.add_row("Next", f"move {hint.tile_value} {hint.direction.value}")
    console.print(render_board(board, hint))
    console.print(summary)

    for i, step in enumerate(path[1:], 1):
        console.print(f"[dim]step {i}[/dim]")
        console.print(render_board(step))


if __name__ == "__main__":
    app()
