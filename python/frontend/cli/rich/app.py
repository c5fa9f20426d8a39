"""Rich terminal frontend — board, stats, and controls drawn with ``rich``.

The loop polls the keyboard with a short timeout and calls
``GamePlay.pump()`` in between, so the clock, hint results, and the
auto-solve replay all advance on this thread.
"""

from __future__ import annotations

import rich.box
from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from frontend.cli.input_handler import get_key, get_key_timeout
from tilepuzzle.config import EngineConfig
from tilepuzzle.engine.gameplay import GamePlay, WinEvent
from tilepuzzle.models.board import Board, Direction, Hint

console = Console()

MIN_SIZE = 2
MAX_SIZE = 5
POLL_SECONDS = 0.1

_ARROWS = {
    Direction.UP: "↑",
    Direction.DOWN: "↓",
    Direction.LEFT: "←",
    Direction.RIGHT: "→",
}

_DIRECTION_KEYS = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}


# -- helpers ------------------------------------------------------------------


def format_time(seconds: float) -> str:
    m, s = divmod(int(seconds), 60)
    return f"{m:02d}:{s:02d}"


def _snapshot(game: GamePlay) -> tuple:
    """Everything the game screen shows; a change means redraw."""
    return (
        game.tiles,
        game.moves,
        game.elapsed,
        game.phase,
        game.is_calculating,
        game.hint,
        game.fatal_error,
    )


# -- board rendering ----------------------------------------------------------


def render_board(board: Board, hint: Hint | None = None) -> Table:
    """Return a Rich Table representing the puzzle grid."""
    width = len(str(len(board) - 1))
    table = Table(
        show_header=False,
        show_edge=True,
        pad_edge=True,
        box=rich.box.HEAVY,
        border_style="bright_blue",
        padding=(0, 1),
    )
    for _ in range(board.size):
        table.add_column(width=width + 2, justify="center")

    for r, row in enumerate(board.rows()):
        cells: list[str] = []
        for c, val in enumerate(row):
            index = r * board.size + c
            if val == 0:
                cells.append("[dim]·[/dim]")
            elif hint is not None and val == hint.tile_value:
                cells.append(f"[bold black on cyan]{val:>{width}}{_ARROWS[hint.direction]}[/]")
            elif board.is_tile_correct(index):
                cells.append(f"[bold green]{val:>{width}}[/bold green]")
            else:
                cells.append(f"[bold white]{val:>{width}}[/bold white]")
        table.add_row(*cells)

    return table


# -- menu screen --------------------------------------------------------------


def _draw_menu(sel_size: int) -> None:
    console.clear()

    sizes = Text()
    for s in range(MIN_SIZE, MAX_SIZE + 1):
        if s > MIN_SIZE:
            sizes.append("  ")
        style = "bold green on #313244" if s == sel_size else "dim"
        sizes.append(f" {s}×{s} ", style=style)

    nav = Text("  ← →  change size", style="dim")

    opts = Text()
    opts.append("  1", style="bold cyan")
    opts.append("  Play    ")
    opts.append("Q", style="dim bold")
    opts.append("  Quit", style="dim")

    body = Group(
        Text(""),
        Align.center(sizes),
        Align.center(nav),
        Text(""),
        Align.center(opts),
        Text(""),
    )

    panel = Panel(
        body,
        title="[bold]S L I D I N G   P U Z Z L E[/bold]",
        border_style="bright_blue",
        padding=(1, 4),
    )

    console.print()
    console.print(Align.center(panel))


# -- game screens -------------------------------------------------------------


def _status_for(game: GamePlay) -> str:
    """Status line derived from the engine flags."""
    if game.fatal_error is not None:
        return f"[bold red]Solver failed:[/bold red] {game.fatal_error}  [dim](R to restart)[/dim]"
    if game.is_calculating:
        return "[cyan]Thinking…[/cyan]"
    if game.is_solving:
        return "[cyan]Auto-solving…[/cyan]"
    if game.hint is not None:
        return (
            f"[cyan]Hint:[/cyan] move [bold]{game.hint.tile_value}[/bold] "
            f"{game.hint.direction.value}"
        )
    return ""


def _draw_game(game: GamePlay, message: str = "") -> None:
    console.clear()

    size = game.size
    board_table = render_board(game.board, game.hint)

    stats = Text()
    stats.append("  Moves: ", style="dim")
    stats.append(str(game.moves), style="bold yellow")
    stats.append("    Time: ", style="dim")
    stats.append(format_time(game.elapsed * game.config.tick_seconds), style="bold yellow")

    controls = Text()
    controls.append("  ↑↓←→", style="bold cyan")
    controls.append(" / ", style="dim")
    controls.append("WASD", style="bold cyan")
    controls.append("  move   ", style="dim")
    controls.append("U", style="bold cyan" if game.can_undo else "dim")
    controls.append("  undo   ", style="dim")
    solver_style = "bold cyan" if game.can_solve else "dim"
    controls.append("N", style=solver_style)
    controls.append("  hint   ", style="dim")
    controls.append("V", style=solver_style)
    controls.append("  solve   ", style="dim")
    controls.append("R", style="bold cyan")
    controls.append("  restart   ", style="dim")
    controls.append("Q", style="bold cyan")
    controls.append("  back", style="dim")

    panel = Panel(
        Align.center(board_table),
        title=f"[bold cyan]Sliding Puzzle  {size}×{size}[/bold cyan]",
        border_style="cyan" if game.is_solving else "bright_blue",
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))
    console.print(Align.center(stats))
    status = message or _status_for(game)
    if status:
        console.print(Align.center(Text.from_markup(f"  {status}")))
    console.print(Align.center(controls))


def _draw_win(game: GamePlay, event: WinEvent) -> None:
    console.clear()

    congrats = Text()
    congrats.append("\n  ★ ", style="bold yellow")
    if event.auto_solved:
        congrats.append("SOLVED!", style="bold green")
        congrats.append("  The solver finished it.  ", style="green")
    else:
        congrats.append("CONGRATULATIONS!", style="bold green")
        congrats.append("  You solved it!  ", style="green")
    congrats.append("★\n", style="bold yellow")

    stats = Text()
    stats.append("  Moves: ", style="dim")
    stats.append(str(event.moves), style="bold yellow")
    stats.append("    Time: ", style="dim")
    stats.append(format_time(event.elapsed * game.config.tick_seconds), style="bold yellow")

    group = Group(
        Align.center(render_board(game.board)),
        Align.center(congrats),
        Align.center(stats),
    )

    panel = Panel(
        group,
        title=f"[bold green]Sliding Puzzle  {event.grid_size}×{event.grid_size}[/bold green]",
        border_style="bold green",
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))
    console.print(
        Align.center(Text("\n  Press R to play again, Q to go back.\n", style="dim"))
    )


# -- game loop ----------------------------------------------------------------


def _wait_for_key(game: GamePlay) -> str | None:
    """Poll for a key, pumping the engine.  ``None`` means the screen changed."""
    before = _snapshot(game)
    while True:
        key = get_key_timeout(POLL_SECONDS)
        game.pump()
        if key is not None:
            return key
        if _snapshot(game) != before:
            return None


def _handle_key(game: GamePlay, key: str) -> str:
    """Apply *key* to *game*.  Returns a one-off status message."""
    if key in _DIRECTION_KEYS:
        game.move(_DIRECTION_KEYS[key])
    elif key == "undo":
        game.undo()
    elif key == "hint":
        if not game.request_hint() and game.last_rejection is not None:
            return f"[yellow]{game.last_rejection}[/yellow]"
    elif key == "solve":
        if not game.auto_solve() and game.last_rejection is not None:
            return f"[yellow]{game.last_rejection}[/yellow]"
    elif key == "restart":
        game.restart()
    return ""


def _play_game(size: int, config: EngineConfig, hint_limit: int) -> None:
    hints_used = 0

    def hint_permitted() -> bool:
        return hint_limit <= 0 or hints_used < hint_limit

    game = GamePlay(size, config=config, hint_permitted=hint_permitted)
    wins: list[WinEvent] = []
    game.on_win(wins.append)

    @game.on_hint
    def _count_hint(hint: Hint) -> None:
        nonlocal hints_used
        hints_used += 1

    try:
        while True:
            message = ""
            while not wins:
                _draw_game(game, message)
                key = _wait_for_key(game)
                if key is None:
                    message = ""
                    continue
                if key == "quit":
                    return
                if key == "restart":
                    hints_used = 0
                message = _handle_key(game, key)

            _draw_win(game, wins[-1])
            while True:
                key = get_key()
                if key == "restart":
                    wins.clear()
                    hints_used = 0
                    game.restart()
                    break
                if key == "quit":
                    return
    finally:
        game.close()


# -- menu loop ----------------------------------------------------------------


def _menu_loop(size: int, config: EngineConfig, hint_limit: int) -> None:
    sel_size = min(max(size, MIN_SIZE), MAX_SIZE)

    while True:
        _draw_menu(sel_size)
        key = get_key()

        if key == "quit":
            console.clear()
            console.print(Align.center(Text("\nGoodbye!\n", style="bold cyan")))
            return
        elif key == "left":
            sel_size = max(MIN_SIZE, sel_size - 1)
        elif key == "right":
            sel_size = min(MAX_SIZE, sel_size + 1)
        elif key in ("1", "enter"):
            _play_game(sel_size, config, hint_limit)


# -- public entry point -------------------------------------------------------


def run(size: int, config: EngineConfig, hint_limit: int = 0) -> None:
    """Launch the Rich CLI with interactive menu."""
    _menu_loop(size, config, hint_limit)
