#!/usr/bin/env python3
"""Block Towers puzzle.

Usage::

    python main.py                       # interactive menu
    python main.py -f rich               # Rich terminal
    python main.py -f pygame --seed 7    # Pygame GUI, reproducible puzzles
    python main.py --solve               # print one puzzle and its solution
"""

import importlib
import logging
import random
import sys
from enum import StrEnum
from pathlib import Path
from typing import Optional

import typer

ROOT = Path(__file__).resolve().parent  # python/

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

logger = logging.getLogger(__name__)


# -- frontend registry -------------------------------------------------------


class Frontend(StrEnum):
    vanilla = "vanilla"
    rich = "rich"
    pygame = "pygame"
    pyqt = "pyqt"


class Strategy(StrEnum):
    bfs = "bfs"
    bidirectional = "bidirectional"


class LogLevel(StrEnum):
    debug = "DEBUG"
    info = "INFO"
    warning = "WARNING"
    error = "ERROR"


_RUNNERS = {
    Frontend.vanilla: "frontend.cli.vanilla.app",
    Frontend.rich: "frontend.cli.rich.app",
    Frontend.pygame: "frontend.gui.pygame.app",
    Frontend.pyqt: "frontend.gui.pyqt.app",
}


# -- helpers ------------------------------------------------------------------


def _configure_logging(level: LogLevel, log_file: Optional[Path]) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))
    logging.basicConfig(
        level=level.value,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=handlers,
    )


def _print_solution(settings, rng: random.Random) -> None:
    from backend.engine.gameplay.game import GamePlay

    game = GamePlay(settings, rng)
    state = game.state

    print("\n  === BLOCK TOWERS ===")
    print(f"\n  Start:   {state.initial}")
    print(f"  Target:  {state.target}")
    if not state.has_solution:
        print("\n  No solution found within the solver limits.\n")
        return
    print(f"\n  Optimal: {state.optimal_moves} moves\n")
    for i, move in enumerate(state.solution_path, 1):
        game.click_tower(move.src)
        game.click_tower(move.dst)
        print(f"  {i:>3}. tower {move}   {state.current}")
    print()


def _menu_loop(settings, rng: random.Random) -> None:
    while True:
        print()
        print("  ====================================")
        print("        B L O C K   T O W E R S      ")
        print("  ====================================")
        print()
        print("  1.  Play  (Vanilla Terminal)")
        print("  2.  Play  (Rich Terminal)")
        print("  3.  Play  (Pygame GUI)")
        print("  4.  Play  (PyQt GUI)")
        print("  5.  Print a puzzle and its solution")
        print("  0.  Quit")
        print()

        choice = input("  Select: ").strip()

        if choice == "0":
            print("\n  Goodbye!\n")
            return

        frontends = {
            "1": Frontend.vanilla,
            "2": Frontend.rich,
            "3": Frontend.pygame,
            "4": Frontend.pyqt,
        }
        if choice in frontends:
            mod = importlib.import_module(_RUNNERS[frontends[choice]])
            mod.run(settings=settings, rng=rng)
        elif choice == "5":
            _print_solution(settings, rng)
        else:
            print("  Unknown option.")


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False)


@app.command()
def main(
    frontend: Optional[Frontend] = typer.Option(
        None, "-f", "--frontend",
        help="Frontend to launch. Omit for interactive menu.",
    ),
    min_blocks: int = typer.Option(
        5, "--min-blocks", min=1, max=12,
        help="Fewest blocks in a generated puzzle.",
    ),
    max_blocks: int = typer.Option(
        12, "--max-blocks", min=1, max=12,
        help="Most blocks in a generated puzzle.",
    ),
    solver: Strategy = typer.Option(
        Strategy.bidirectional, "--solver",
        help="Search strategy used to find the optimal solution.",
    ),
    max_depth: int = typer.Option(
        200, "--max-depth", min=1,
        help="Longest solution the solver will look for.",
    ),
    max_iterations: int = typer.Option(
        2_000_000, "--max-iterations", min=1,
        help="Most configurations the solver may expand.",
    ),
    replay_interval: float = typer.Option(
        0.6, "--replay-interval", min=0.0,
        help="Seconds between moves when showing the solution.",
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed",
        help="Seed for reproducible puzzles.",
    ),
    log_level: LogLevel = typer.Option(
        LogLevel.warning, "--log-level", case_sensitive=False,
        help="Logging verbosity.",
    ),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file",
        help="Also write log records to this file.",
    ),
    solve: bool = typer.Option(
        False, "--solve",
        help="Print one puzzle with its optimal solution and exit.",
    ),
) -> None:
    """Block Towers puzzle."""
    from backend.engine.gamesolver.solver import SolverLimits
    from backend.settings import GameSettings

    _configure_logging(log_level, log_file)

    if min_blocks > max_blocks:
        raise typer.BadParameter(
            f"--min-blocks ({min_blocks}) exceeds --max-blocks ({max_blocks})."
        )

    settings = GameSettings(
        min_blocks=min_blocks,
        max_blocks=max_blocks,
        solver_strategy=solver.value,
        limits=SolverLimits(max_depth=max_depth, max_iterations=max_iterations),
        replay_interval=replay_interval,
    )
    rng = random.Random(seed)
    logger.debug("Settings: %s (seed %s)", settings, seed)

    if solve:
        _print_solution(settings, rng)
        return

    if frontend is None:
        _menu_loop(settings, rng)
        return

    mod = importlib.import_module(_RUNNERS[frontend])
    mod.run(settings=settings, rng=rng)


if __name__ == "__main__":
    app()
