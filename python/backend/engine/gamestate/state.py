"""Tracks the mutable state of a puzzle in progress."""

from __future__ import annotations

from enum import StrEnum

from backend.engine.gamesolver.solver import Solution
from backend.models.configuration import Configuration, Move


class SolverStatus(StrEnum):
    PENDING = "pending"
    SOLVED = "solved"
    UNAVAILABLE = "unavailable"


class GameState:
    """Holds the target, the start snapshot, the live towers and counters.

    ``target`` never changes for the lifetime of the instance.  ``initial``
    is only replaced when the solver gives up on it or proves it cannot
    reach the target; ``current`` is mutated in place by moves and replays.
    """

    def __init__(self, initial: Configuration, target: Configuration) -> None:
        self.target = target
        self.initial = initial
        self.current = initial.copy()
        self.moves: int = 0
        self.optimal_moves: int = 0
        self.solution_path: list[Move] = []
        self.solver_status = SolverStatus.PENDING
        self.selected_tower: int | None = None
        self.is_complete: bool = False

    # -- moves ----------------------------------------------------------------

    def increment_moves(self) -> None:
        self.moves += 1

    def restore(self) -> None:
        """Put the towers back to the start snapshot and clear progress."""
        self.current = self.initial.copy()
        self.moves = 0
        self.selected_tower = None
        self.is_complete = False

    # -- solution -------------------------------------------------------------

    def record_solution(self, solution: Solution) -> None:
        self.optimal_moves = solution.optimal_moves
        self.solution_path = list(solution.path)
        self.solver_status = SolverStatus.SOLVED

    def mark_unsolved(self) -> None:
        self.optimal_moves = 0
        self.solution_path = []
        self.solver_status = SolverStatus.UNAVAILABLE

    @property
    def has_solution(self) -> bool:
        return self.solver_status is SolverStatus.SOLVED and bool(self.solution_path)
