"""Tunable game settings.

A single frozen value built once by the entry point from its command-line
options and handed to every frontend.  Nothing here is read from or written
to disk.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from backend.engine.gamegenerator.generator import DEFAULT_BLOCK_RANGE, GameGenerator
from backend.engine.gamesolver.solver import STRATEGIES, SolverLimits
from backend.models.palette import PALETTE


@dataclass(frozen=True)
class GameSettings:
    palette_size: int = len(PALETTE)
    min_blocks: int = DEFAULT_BLOCK_RANGE[0]
    max_blocks: int = DEFAULT_BLOCK_RANGE[1]
    solver_strategy: str = "bidirectional"
    limits: SolverLimits = field(default_factory=SolverLimits)
    replay_interval: float = 0.6  # seconds between replayed moves
    info_message_seconds: float = 3.0
    success_message_seconds: float = 5.0

    def __post_init__(self) -> None:
        GameGenerator.check_block_range(self.block_range)
        if not 1 <= self.palette_size <= len(PALETTE):
            raise ValueError(
                f"Palette size must be between 1 and {len(PALETTE)}, "
                f"got {self.palette_size}."
            )
        if self.solver_strategy not in STRATEGIES:
            raise ValueError(
                f"Unknown solver strategy {self.solver_strategy!r}; "
                f"expected one of {', '.join(STRATEGIES)}."
            )
        if self.replay_interval < 0:
            raise ValueError("Replay interval cannot be negative.")

    @property
    def block_range(self) -> tuple[int, int]:
        return (self.min_blocks, self.max_blocks)
