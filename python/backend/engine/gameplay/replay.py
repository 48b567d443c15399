"""Solution replay — a cursor over a move path, stepped by an outside clock."""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum

from backend.models.configuration import Move


class ReplayStatus(StrEnum):
    RUNNING = "running"
    FINISHED = "finished"
    CANCELLED = "cancelled"


class Replay:
    """Hands out the moves of a solution path one tick at a time.

    The replay never touches the towers itself; ``GamePlay`` applies each
    move it returns.  ``cancel`` may be called any number of times.
    """

    def __init__(self, path: Sequence[Move]) -> None:
        self.path: tuple[Move, ...] = tuple(path)
        self.applied: int = 0
        self.last_move: Move | None = None
        self.status = ReplayStatus.RUNNING if self.path else ReplayStatus.FINISHED

    @property
    def running(self) -> bool:
        return self.status is ReplayStatus.RUNNING

    @property
    def remaining(self) -> int:
        return len(self.path) - self.applied

    def next_move(self) -> Move | None:
        if not self.running:
            return None
        return self.path[self.applied]

    def advance(self) -> None:
        """Mark the move returned by ``next_move`` as applied."""
        self.last_move = self.path[self.applied]
        self.applied += 1
        if self.applied == len(self.path):
            self.status = ReplayStatus.FINISHED

    def cancel(self) -> None:
        if self.running:
            self.status = ReplayStatus.CANCELLED
