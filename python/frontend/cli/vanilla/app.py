"""Vanilla terminal frontend — no third-party dependencies.

Uses only stdlib (print, ANSI codes, tty/termios) for rendering and input.
Includes a small menu, the puzzle screen and solution replay.
"""

from __future__ import annotations

import random
import sys

from backend.engine.gameplay.game import GamePlay, Severity
from backend.models.configuration import NUM_TOWERS, TOWER_CAPACITY, Configuration
from backend.models.palette import color_for, label_for
from backend.settings import GameSettings
from frontend.cli import session
from frontend.cli.input_handler import get_key


# -- ANSI helpers -------------------------------------------------------------

_G = "\033[32;1m"    # bold green
_Y = "\033[33;1m"    # bold yellow
_C = "\033[36;1m"    # bold cyan
_RED = "\033[31;1m"  # bold red
_DIM = "\033[2m"     # dim
_BOLD = "\033[1m"    # bold
_R = "\033[0m"       # reset

_SEVERITY_COLOUR = {
    Severity.INFO: _C,
    Severity.ERROR: _RED,
    Severity.SUCCESS: _G,
}

_CELL_W = 6


def _clear() -> None:
    sys.stdout.write("\033[2J\033[H")
    sys.stdout.flush()


def _block_cell(block: int) -> str:
    r, g, b = color_for(block).rgb
    return f"\033[48;2;{r};{g};{b}m\033[30;1m{label_for(block):^{_CELL_W}}{_R}"


# -- tower rendering ----------------------------------------------------------


def _render_towers(
    config: Configuration,
    *,
    selected: int | None = None,
    cursor: int | None = None,
    highlight: tuple[int, ...] = (),
) -> str:
    """Return the three towers side by side, top slot first."""
    gap = "   "
    lines: list[str] = []
    for slot in range(TOWER_CAPACITY - 1, -1, -1):
        cells: list[str] = []
        for i, tower in enumerate(config.towers):
            if slot < len(tower):
                cell = _block_cell(tower[slot])
                if selected == i and slot == len(tower) - 1:
                    cell = f"{_BOLD}>{_R}{cell}{_BOLD}<{_R}"
                else:
                    cell = f" {cell} "
            else:
                cell = f" {_DIM}{'·':^{_CELL_W}}{_R} "
            cells.append(cell)
        lines.append("  " + gap.join(cells))

    bases: list[str] = []
    labels: list[str] = []
    for i in range(NUM_TOWERS):
        colour = _Y if i in highlight else _DIM
        bases.append(f"{colour}{'=' * (_CELL_W + 2)}{_R}")
        mark = "^" if cursor == i else " "
        labels.append(f"{mark}{i + 1:^{_CELL_W}}{mark}")
    lines.append("  " + gap.join(bases))
    lines.append("  " + gap.join(labels))
    return "\n".join(lines)


# -- screens ------------------------------------------------------------------


def _show_menu(settings: GameSettings) -> None:
    _clear()
    print()
    print(f"  {_BOLD}======================================{_R}")
    print(f"  {_BOLD}        B L O C K   T O W E R S      {_R}")
    print(f"  {_BOLD}======================================{_R}")
    print()
    print(
        f"    Blocks: {_Y}{settings.min_blocks}-{settings.max_blocks}{_R}"
        f"    Solver: {_Y}{settings.solver_strategy}{_R}"
    )
    print()
    print(f"    {_C}1{_R}  Play")
    print(f"    {_DIM}Q{_R}  Quit")
    print()


def _show_calculating(game: GamePlay) -> None:
    _clear()
    print(f"  {_C}=== Block Towers ==={_R}")
    print()
    print(f"  {_DIM}Target{_R}")
    print(_render_towers(game.state.target))
    print()
    print(f"  {_Y}Calculating optimal solution…{_R}")
    sys.stdout.flush()


def _show_game(game: GamePlay, cursor: int) -> None:
    state = game.state
    _clear()
    print(f"  {_C}=== Block Towers ==={_R}")
    print()
    print(f"  {_DIM}Target{_R}")
    print(_render_towers(state.target))
    print()
    print(f"  {_BOLD}Your towers{_R}")

    highlight: tuple[int, ...] = ()
    if game.replay is not None and game.replay.last_move is not None:
        highlight = (game.replay.last_move.src, game.replay.last_move.dst)
    print(
        _render_towers(
            state.current,
            selected=state.selected_tower,
            cursor=None if game.is_replaying else cursor,
            highlight=highlight,
        )
    )
    print()

    optimal = str(state.optimal_moves) if state.optimal_moves > 0 else "-"
    print(f"  Moves: {_Y}{state.moves}{_R}  |  Optimal: {_Y}{optimal}{_R}")
    if game.is_replaying:
        replay = game.replay
        assert replay is not None
        print(f"  {_C}Replaying move {replay.applied}/{len(replay.path)}{_R}")

    if game.message is not None:
        colour = _SEVERITY_COLOUR[game.message.severity]
        print(f"  {colour}{game.message.text}{_R}")
    print()

    if game.is_replaying:
        print(f"  {_C}X{_R}: stop replay")
    else:
        print(
            f"  {_C}1-3{_R}/{_C}←→ Space{_R}: pick tower  |  "
            f"{_C}N{_R}: new  |  {_C}R{_R}: reset  |  "
            f"{_C}V{_R}: show solution  |  {_C}Q{_R}: back"
        )
    sys.stdout.flush()


# -- menu loop ----------------------------------------------------------------


def _menu_loop(settings: GameSettings, rng: random.Random) -> None:
    while True:
        _show_menu(settings)
        key = get_key()

        if key == "quit":
            _clear()
            print("  Goodbye!\n")
            return
        elif key in ("tower:0", "select"):
            session.play(settings, rng, _show_game, _show_calculating)


# -- public entry point -------------------------------------------------------


def run(settings: GameSettings, rng: random.Random) -> None:
    """Launch the vanilla CLI with interactive menu."""
    _menu_loop(settings, rng)
