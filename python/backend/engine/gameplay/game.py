"""Core gameplay logic — tower selection, solution replay and game lifecycle."""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from enum import StrEnum

from backend.engine.gamegenerator.generator import GameGenerator
from backend.engine.gameplay.replay import Replay
from backend.engine.gamemoves.moves import MoveEngine
from backend.engine.gamesolver.solver import (
    SearchExhaustedError,
    Solution,
    Solver,
    UnreachableTargetError,
)
from backend.engine.gamestate.state import GameState, SolverStatus
from backend.models.configuration import NUM_TOWERS, Configuration, Move
from backend.settings import GameSettings

logger = logging.getLogger(__name__)


class Severity(StrEnum):
    INFO = "info"
    ERROR = "error"
    SUCCESS = "success"


@dataclass(frozen=True)
class StatusMessage:
    text: str
    severity: Severity
    created_at: float = field(default_factory=time.monotonic)


class ControllerMode(StrEnum):
    IDLE = "idle"
    SOURCE_SELECTED = "source_selected"
    REPLAYING = "replaying"


def efficiency_label(moves: int, optimal: int) -> str | None:
    """Rate *moves* against the optimum; ``None`` when the optimum is unknown."""
    if optimal <= 0:
        return None
    if moves <= optimal:
        return "Perfect!"
    if moves <= optimal * 1.5:
        return "Great!"
    return "Good!"


class GamePlay:
    """Orchestrates a single puzzle session.

    Frontends feed it tower clicks and button actions, step a running
    replay from their own clock, and read ``state``, ``message`` and
    ``buttons_enabled`` back for rendering.
    """

    def __init__(
        self,
        settings: GameSettings | None = None,
        rng: random.Random | None = None,
        *,
        solve: bool = True,
    ) -> None:
        self._setup(settings, rng)
        self.new_game(solve=solve)

    @classmethod
    def from_configurations(
        cls,
        start: Configuration,
        target: Configuration,
        settings: GameSettings | None = None,
        rng: random.Random | None = None,
        *,
        solve: bool = True,
    ) -> GamePlay:
        """Create a session from fixed configurations instead of generating one."""
        obj = object.__new__(cls)
        obj._setup(settings, rng)
        obj.state = GameState(start.copy(), target.copy())
        if solve:
            obj.compute_solution()
        return obj

    def _setup(self, settings: GameSettings | None, rng: random.Random | None) -> None:
        self.settings = settings or GameSettings()
        self._rng = rng or random.Random()
        self.replay: Replay | None = None
        self.message: StatusMessage | None = None

    # -- lifecycle ------------------------------------------------------------

    def new_game(self, *, solve: bool = True) -> None:
        """Discard the current puzzle and generate a fresh one.

        With ``solve=False`` the solver is left for ``compute_solution`` so
        a frontend can draw a "calculating" indicator first.
        """
        self._drop_replay()
        start, target = GameGenerator.generate(
            self.settings.palette_size, self._rng, self.settings.block_range
        )
        self.state = GameState(start, target)
        self.message = None
        logger.info("New game: start %s, target %s", start, target)
        if solve:
            self.compute_solution()

    def reset(self) -> None:
        """Restore the starting towers; the target and solution are kept."""
        self._drop_replay()
        self.state.restore()
        self.message = None

    def compute_solution(self) -> bool:
        """Run the solver for the current puzzle and record its result.

        A start proven unable to reach the target is replaced by one
        scrambled out of the target, which the solver can always connect.
        On limit exhaustion the block multisets are checked, the start is
        regenerated and the search retried once.  If that fails too the
        puzzle is left without a solution.
        """
        state = self.state
        retried = scrambled = False
        while True:
            try:
                solution = self._solve(state.initial, state.target)
            except UnreachableTargetError as exc:
                self._check_blocks()
                if scrambled:
                    logger.error(
                        "Scrambled start %s cannot reach the target: %s",
                        state.initial, exc,
                    )
                    state.mark_unsolved()
                    return False
                logger.info(
                    "Start %s cannot reach the target (%s); scrambling a new one",
                    state.initial, exc,
                )
                self._replace_start(GameGenerator.scramble(state.target, self._rng))
                scrambled = True
            except SearchExhaustedError as exc:
                if retried:
                    logger.error("No solution after regenerating the start: %s", exc)
                    state.mark_unsolved()
                    return False
                logger.warning("Solver gave up on %s: %s", state.initial, exc)
                self._check_blocks()
                regenerate = (
                    GameGenerator.scramble if scrambled
                    else GameGenerator.generate_start
                )
                self._replace_start(regenerate(state.target, self._rng))
                logger.warning("Retrying with regenerated start %s", state.initial)
                retried = True
            else:
                state.record_solution(solution)
                return True

    def _check_blocks(self) -> None:
        state = self.state
        if not state.initial.same_blocks(state.target):
            logger.error(
                "Start %s and target %s hold different blocks; "
                "the generator broke its invariant",
                state.initial, state.target,
            )

    def _replace_start(self, start: Configuration) -> None:
        self.state.initial = start
        self.state.restore()

    def _solve(self, start: Configuration, target: Configuration) -> Solution:
        return Solver.solve(
            start,
            target,
            limits=self.settings.limits,
            strategy=self.settings.solver_strategy,
        )

    # -- tower selection ------------------------------------------------------

    def click_tower(self, index: int) -> bool:
        """Handle a click on tower *index*.

        The first click picks a source tower, a second click on another
        tower moves its top block there.  Clicking the source again
        deselects it.  Returns True if a block was moved.
        """
        state = self.state
        if self.is_replaying or state.is_complete or not 0 <= index < NUM_TOWERS:
            return False

        selected = state.selected_tower
        if selected is None:
            if state.current.is_empty(index):
                self._post("This tower is empty!", Severity.ERROR)
            else:
                state.selected_tower = index
                self._post("Select destination tower", Severity.INFO)
            return False

        if selected == index:
            state.selected_tower = None
            self.message = None
            return False

        if not MoveEngine.apply_move(state.current, selected, index):
            self._post(
                "Invalid move! You can only move the top block "
                "to a tower with free space.",
                Severity.ERROR,
            )
            return False

        state.selected_tower = None
        state.increment_moves()
        self.message = None
        if MoveEngine.check_win(state.current, state.target):
            self._win()
        return True

    def _win(self) -> None:
        state = self.state
        state.is_complete = True
        text = f"Congratulations! You completed the puzzle in {state.moves} moves!"
        label = efficiency_label(state.moves, state.optimal_moves)
        if label:
            text += f" {label}"
        self._post(text, Severity.SUCCESS)
        logger.info("Puzzle completed in %d moves (optimal %d)",
                    state.moves, state.optimal_moves)

    # -- solution replay ------------------------------------------------------

    def start_replay(self) -> bool:
        """Reset the towers and begin replaying the optimal solution."""
        if not self.state.has_solution:
            self._post("No solution available for this puzzle.", Severity.ERROR)
            return False
        self._drop_replay()
        self.state.restore()
        self.replay = Replay(self.state.solution_path)
        self._post(
            f"Showing solution ({self.state.optimal_moves} moves)", Severity.INFO
        )
        logger.info("Replaying %d-move solution", len(self.replay.path))
        return True

    def advance_replay(self) -> Move | None:
        """Apply the next solution move; returns it, or None if idle."""
        replay = self.replay
        if replay is None or not replay.running:
            return None

        move = replay.next_move()
        assert move is not None
        if not MoveEngine.apply_move(self.state.current, move.src, move.dst):
            logger.error("Replay move %s rejected at %s", move, self.state.current)
            replay.cancel()
            self._post("Solution replay failed.", Severity.ERROR)
            return None

        replay.advance()
        self.state.increment_moves()
        if not replay.running:
            if MoveEngine.check_win(self.state.current, self.state.target):
                self.state.is_complete = True
                self._post(
                    f"Solution complete in {self.state.moves} moves.",
                    Severity.SUCCESS,
                )
            logger.info("Replay finished after %d moves", replay.applied)
        return move

    def cancel_replay(self) -> bool:
        """Stop a running replay where it is.  Safe to call at any time."""
        replay = self.replay
        if replay is None or not replay.running:
            return False
        replay.cancel()
        self._post("Solution replay stopped.", Severity.INFO)
        logger.info("Replay cancelled after %d of %d moves",
                    replay.applied, len(replay.path))
        return True

    def _drop_replay(self) -> None:
        if self.replay is not None:
            self.replay.cancel()
        self.replay = None

    # -- status messages ------------------------------------------------------

    def _post(self, text: str, severity: Severity) -> None:
        self.message = StatusMessage(text, severity)

    def expire_message(self, now: float | None = None) -> bool:
        """Clear an info or success message once it has outlived its interval.

        Error messages stay until replaced.  Returns True if cleared.
        """
        message = self.message
        if message is None:
            return False
        lifetime = {
            Severity.INFO: self.settings.info_message_seconds,
            Severity.SUCCESS: self.settings.success_message_seconds,
        }.get(message.severity)
        if lifetime is None:
            return False
        now = time.monotonic() if now is None else now
        if now - message.created_at < lifetime:
            return False
        self.message = None
        return True

    # -- queries --------------------------------------------------------------

    @property
    def is_replaying(self) -> bool:
        return self.replay is not None and self.replay.running

    @property
    def mode(self) -> ControllerMode:
        if self.is_replaying:
            return ControllerMode.REPLAYING
        if self.state.selected_tower is not None:
            return ControllerMode.SOURCE_SELECTED
        return ControllerMode.IDLE

    @property
    def buttons_enabled(self) -> bool:
        return (
            not self.is_replaying
            and self.state.solver_status is not SolverStatus.PENDING
        )

    @property
    def is_won(self) -> bool:
        return self.state.is_complete

    @property
    def efficiency(self) -> str | None:
        return efficiency_label(self.state.moves, self.state.optimal_moves)
