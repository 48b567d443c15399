"""Rich terminal frontend — coloured tables and panels.

Uses the ``rich`` library for styled output while sharing the same
input handler and game loop as the vanilla CLI.
"""

from __future__ import annotations

import random

from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from backend.engine.gameplay.game import GamePlay, Severity
from backend.models.configuration import NUM_TOWERS, TOWER_CAPACITY, Configuration
from backend.models.palette import color_for, label_for
from backend.settings import GameSettings
from frontend.cli import session
from frontend.cli.input_handler import get_key

console = Console()

_SEVERITY_STYLE = {
    Severity.INFO: "cyan",
    Severity.ERROR: "bold red",
    Severity.SUCCESS: "bold green",
}


# -- tower rendering ----------------------------------------------------------


def _render_towers(
    config: Configuration,
    *,
    selected: int | None = None,
    cursor: int | None = None,
    highlight: tuple[int, ...] = (),
) -> Table:
    """Return a Rich Table with one column per tower, top slot first."""
    table = Table(
        show_header=False,
        show_edge=False,
        box=None,
        padding=(0, 2),
    )
    for _ in range(NUM_TOWERS):
        table.add_column(width=7, justify="center")

    for slot in range(TOWER_CAPACITY - 1, -1, -1):
        cells: list[Text] = []
        for i, tower in enumerate(config.towers):
            if slot < len(tower):
                block = tower[slot]
                style = f"bold black on {color_for(block).hex}"
                if selected == i and slot == len(tower) - 1:
                    style += " reverse"
                cells.append(Text(f" {label_for(block):^3} ", style=style))
            else:
                cells.append(Text("·", style="dim"))
        table.add_row(*cells)

    bases: list[Text] = []
    labels: list[Text] = []
    for i in range(NUM_TOWERS):
        bases.append(
            Text("━" * 7, style="bold yellow" if i in highlight else "bright_blue")
        )
        label = f"▲ {i + 1} ▲" if cursor == i else str(i + 1)
        labels.append(Text(label, style="bold cyan" if cursor == i else "dim"))
    table.add_row(*bases)
    table.add_row(*labels)
    return table


# -- screens ------------------------------------------------------------------


def _draw_menu(settings: GameSettings) -> None:
    console.clear()

    info = Text()
    info.append("  Blocks ", style="dim")
    info.append(f"{settings.min_blocks}-{settings.max_blocks}", style="bold yellow")
    info.append("    Solver ", style="dim")
    info.append(settings.solver_strategy, style="bold yellow")

    opts = Text()
    opts.append("  1", style="bold cyan")
    opts.append("  Play    ")
    opts.append("Q", style="dim bold")
    opts.append("  Quit", style="dim")

    body = Group(
        Text(""),
        Align.center(info),
        Text(""),
        Align.center(opts),
        Text(""),
    )
    panel = Panel(
        body,
        title="[bold]B L O C K   T O W E R S[/bold]",
        border_style="bright_blue",
        padding=(1, 4),
    )
    console.print()
    console.print(Align.center(panel))


def _target_panel(game: GamePlay) -> Panel:
    return Panel(
        Align.center(_render_towers(game.state.target)),
        title="[bold]Target[/bold]",
        border_style="dim",
        padding=(0, 2),
    )


def _draw_calculating(game: GamePlay) -> None:
    console.clear()
    console.print()
    console.print(Align.center(_target_panel(game)))
    console.print(
        Align.center(Text("Calculating optimal solution…", style="bold yellow"))
    )


def _draw_game(game: GamePlay, cursor: int) -> None:
    state = game.state
    console.clear()

    highlight: tuple[int, ...] = ()
    if game.replay is not None and game.replay.last_move is not None:
        highlight = (game.replay.last_move.src, game.replay.last_move.dst)

    board = _render_towers(
        state.current,
        selected=state.selected_tower,
        cursor=None if game.is_replaying else cursor,
        highlight=highlight,
    )

    stats = Text()
    stats.append("Moves: ", style="dim")
    stats.append(str(state.moves), style="bold yellow")
    stats.append("    Optimal: ", style="dim")
    stats.append(
        str(state.optimal_moves) if state.optimal_moves > 0 else "-",
        style="bold yellow",
    )
    if game.is_replaying and game.replay is not None:
        stats.append(
            f"    Replaying {game.replay.applied}/{len(game.replay.path)}",
            style="bold cyan",
        )

    controls = Text()
    if game.is_replaying:
        controls.append("X", style="bold cyan")
        controls.append("  stop replay", style="dim")
    else:
        controls.append("1-3", style="bold cyan")
        controls.append(" / ", style="dim")
        controls.append("←→ Space", style="bold cyan")
        controls.append("  pick tower   ", style="dim")
        controls.append("N", style="bold cyan")
        controls.append("  new   ", style="dim")
        controls.append("R", style="bold cyan")
        controls.append("  reset   ", style="dim")
        controls.append("V", style="bold cyan")
        controls.append("  solution   ", style="dim")
        controls.append("Q", style="bold cyan")
        controls.append("  back", style="dim")

    border = "bold green" if state.is_complete else "bright_blue"
    panel = Panel(
        Align.center(board),
        title="[bold cyan]Your Towers[/bold cyan]",
        border_style=border,
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(_target_panel(game)))
    console.print(Align.center(panel))
    console.print(Align.center(stats))
    if game.message is not None:
        console.print(
            Align.center(
                Text(game.message.text, style=_SEVERITY_STYLE[game.message.severity])
            )
        )
    console.print(Align.center(controls))


# -- menu loop ----------------------------------------------------------------


def _menu_loop(settings: GameSettings, rng: random.Random) -> None:
    while True:
        _draw_menu(settings)
        key = get_key()

        if key == "quit":
            console.clear()
            console.print(Align.center(Text("\nGoodbye!\n", style="bold cyan")))
            return
        elif key in ("tower:0", "select"):
            session.play(settings, rng, _draw_game, _draw_calculating)


# -- public entry point -------------------------------------------------------


def run(settings: GameSettings, rng: random.Random) -> None:
    """Launch the Rich CLI with interactive menu."""
    _menu_loop(settings, rng)
