"""GamePlay controller tests — selection, wins, resets, messages, and the
recovery taken when a start is unreachable or the solver gives up."""

from __future__ import annotations

import logging
import random

import pytest

from backend.engine.gameplay.game import (
    ControllerMode,
    GamePlay,
    Severity,
    efficiency_label,
)
from backend.engine.gamemoves.moves import MoveEngine
from backend.engine.gamesolver.solver import (
    SearchExhaustedError,
    Solver,
    UnreachableTargetError,
)
from backend.engine.gamestate.state import SolverStatus
from backend.models.configuration import Configuration
from backend.settings import GameSettings


def _config(*towers: list[int]) -> Configuration:
    return Configuration(towers=[list(t) for t in towers])


def _game(start, target, **kwargs) -> GamePlay:
    return GamePlay.from_configurations(
        _config(*start), _config(*target), rng=random.Random(0), **kwargs
    )


def _exhaust(*args, **kwargs):
    raise SearchExhaustedError(iterations=1, depth=1)


# -- generation ---------------------------------------------------------------


@pytest.mark.parametrize("seed", range(5))
def test_new_game_is_solved(seed: int) -> None:
    settings = GameSettings(min_blocks=4, max_blocks=7)
    game = GamePlay(settings, random.Random(seed))
    state = game.state
    assert state.solver_status is SolverStatus.SOLVED
    assert state.optimal_moves == len(state.solution_path) > 0
    assert state.current == state.initial != state.target
    assert game.mode is ControllerMode.IDLE
    assert game.buttons_enabled


def test_deferred_solve_disables_buttons() -> None:
    game = GamePlay(GameSettings(min_blocks=3, max_blocks=4),
                    random.Random(3), solve=False)
    assert game.state.solver_status is SolverStatus.PENDING
    assert not game.buttons_enabled
    assert game.compute_solution()
    assert game.buttons_enabled


def test_seeded_games_repeat() -> None:
    a = GamePlay(GameSettings(min_blocks=3, max_blocks=5), random.Random(9))
    b = GamePlay(GameSettings(min_blocks=3, max_blocks=5), random.Random(9))
    assert a.state.initial == b.state.initial
    assert a.state.target == b.state.target


@pytest.mark.parametrize("seed", range(6))
def test_full_size_games_are_solvable(seed: int) -> None:
    settings = GameSettings(min_blocks=11, max_blocks=12)
    game = GamePlay(settings, random.Random(seed))
    state = game.state
    assert state.solver_status is SolverStatus.SOLVED
    assert state.initial != state.target
    assert state.initial.same_blocks(state.target)

    config = state.initial.copy()
    for move in state.solution_path:
        assert MoveEngine.apply_move(config, move.src, move.dst)
    assert config == state.target
    assert len(state.solution_path) == state.optimal_moves


# -- selection state machine --------------------------------------------------


def test_click_empty_tower_is_rejected() -> None:
    game = _game(([0], [], []), ([], [0], []))
    assert not game.click_tower(1)
    assert game.mode is ControllerMode.IDLE
    assert game.message.text == "This tower is empty!"
    assert game.message.severity is Severity.ERROR


def test_select_then_deselect() -> None:
    game = _game(([0], [], []), ([], [0], []))
    game.click_tower(0)
    assert game.mode is ControllerMode.SOURCE_SELECTED
    assert game.state.selected_tower == 0
    assert game.message.severity is Severity.INFO

    game.click_tower(0)
    assert game.mode is ControllerMode.IDLE
    assert game.state.selected_tower is None
    assert game.state.moves == 0


def test_invalid_move_keeps_selection() -> None:
    game = _game(([0], [1, 1, 1, 1, 1], []), ([], [1, 1, 1, 1, 1], [0]))
    game.click_tower(0)
    assert not game.click_tower(1)
    assert game.mode is ControllerMode.SOURCE_SELECTED
    assert game.state.moves == 0
    assert game.state.current == _config([0], [1, 1, 1, 1, 1], [])
    assert game.message.severity is Severity.ERROR
    assert game.message.text.startswith("Invalid move!")


def test_out_of_range_click_is_ignored() -> None:
    game = _game(([0], [], []), ([], [0], []))
    assert not game.click_tower(3)
    assert game.message is None


def test_move_and_win() -> None:
    game = _game(([0, 1], [], []), ([], [], [0, 1]))
    assert game.state.optimal_moves == 3
    for src, dst in [(0, 1), (0, 2), (1, 2)]:
        game.click_tower(src)
        assert game.click_tower(dst)
    assert game.is_won
    assert game.state.moves == 3
    assert game.efficiency == "Perfect!"
    assert game.message.severity is Severity.SUCCESS
    assert game.message.text == (
        "Congratulations! You completed the puzzle in 3 moves! Perfect!"
    )
    # No further moves once complete.
    assert not game.click_tower(2)
    assert game.mode is ControllerMode.IDLE


def test_win_only_when_equal_to_target() -> None:
    game = _game(([0, 1], [], []), ([], [], [0, 1]))
    game.click_tower(0)
    game.click_tower(2)
    assert not game.is_won
    assert game.state.current != game.state.target


# -- reset --------------------------------------------------------------------


def test_reset_is_idempotent() -> None:
    game = _game(([0, 1], [], []), ([], [], [0, 1]))
    game.click_tower(0)
    game.click_tower(1)
    game.click_tower(0)

    game.reset()
    once = (game.state.current.copy(), game.state.moves, game.mode)
    game.reset()
    assert (game.state.current, game.state.moves, game.mode) == once
    assert game.state.current == game.state.initial
    assert game.state.moves == 0
    assert game.state.optimal_moves == 3


# -- efficiency ---------------------------------------------------------------


@pytest.mark.parametrize(
    "moves,optimal,expected",
    [
        (5, 0, None),
        (4, 4, "Perfect!"),
        (6, 4, "Great!"),
        (7, 4, "Good!"),
        (3, 4, "Perfect!"),
    ],
)
def test_efficiency_label(moves: int, optimal: int, expected) -> None:
    assert efficiency_label(moves, optimal) == expected


# -- messages -----------------------------------------------------------------


def test_info_message_expires() -> None:
    game = _game(([0], [], []), ([], [0], []))
    game.click_tower(0)
    created = game.message.created_at
    assert not game.expire_message(now=created + 2.9)
    assert game.expire_message(now=created + 3.0)
    assert game.message is None


def test_error_message_persists() -> None:
    game = _game(([0], [], []), ([], [0], []))
    game.click_tower(2)
    created = game.message.created_at
    assert not game.expire_message(now=created + 60)
    assert game.message is not None


def test_success_message_expires_later() -> None:
    game = _game(([0], [], []), ([], [0], []))
    game.click_tower(0)
    game.click_tower(1)
    created = game.message.created_at
    assert not game.expire_message(now=created + 4.0)
    assert game.expire_message(now=created + 5.0)


# -- solver exhaustion ----------------------------------------------------------


def test_exhaustion_degrades(monkeypatch, caplog) -> None:
    monkeypatch.setattr(Solver, "solve", staticmethod(_exhaust))
    with caplog.at_level(logging.WARNING):
        game = _game(([0, 1], [], []), ([], [], [0, 1]))

    state = game.state
    assert state.solver_status is SolverStatus.UNAVAILABLE
    assert state.optimal_moves == 0
    assert state.solution_path == []
    assert state.initial.same_blocks(state.target)
    assert state.initial != state.target
    assert "Retrying" in caplog.text

    assert not game.start_replay()
    assert game.message.text == "No solution available for this puzzle."
    assert game.message.severity is Severity.ERROR
    assert game.buttons_enabled


def test_exhaustion_retry_succeeds(monkeypatch) -> None:
    real_solve = Solver.solve
    calls = []

    def flaky(*args, **kwargs):
        calls.append(args)
        if len(calls) == 1:
            raise SearchExhaustedError(iterations=1, depth=1)
        return real_solve(*args, **kwargs)

    monkeypatch.setattr(Solver, "solve", staticmethod(flaky))
    game = _game(([0, 1], [], []), ([], [], [0, 1]))
    assert len(calls) == 2
    assert game.state.solver_status is SolverStatus.SOLVED
    assert game.state.optimal_moves > 0


def test_mismatched_blocks_are_logged(monkeypatch, caplog) -> None:
    monkeypatch.setattr(Solver, "solve", staticmethod(_exhaust))
    with caplog.at_level(logging.ERROR):
        _game(([0, 1], [], []), ([], [], [0, 2]))
    assert "different blocks" in caplog.text


# -- unreachable starts -------------------------------------------------------

# The bottoms of the two full towers are swapped; three free slots cannot
# lift the four blocks above either of them.
_SEALED_START = ([0, 1, 2, 3, 4], [5, 6, 7, 0, 1], [2, 3])
_SEALED_TARGET = ([5, 1, 2, 3, 4], [0, 6, 7, 0, 1], [2, 3])


def test_unreachable_start_is_scrambled(caplog) -> None:
    with caplog.at_level(logging.INFO):
        game = _game(_SEALED_START, _SEALED_TARGET)

    state = game.state
    assert state.solver_status is SolverStatus.SOLVED
    assert state.initial != _config(*_SEALED_START)
    assert state.initial != state.target
    assert state.initial.same_blocks(state.target)
    assert state.current == state.initial
    assert "cannot reach the target" in caplog.text

    assert game.start_replay()
    while game.is_replaying:
        game.advance_replay()
    assert game.is_won


def test_unreachable_after_scramble_degrades(monkeypatch, caplog) -> None:
    calls = []

    def unreachable(*args, **kwargs):
        calls.append(args)
        raise UnreachableTargetError(iterations=1, explored=1)

    monkeypatch.setattr(Solver, "solve", staticmethod(unreachable))
    with caplog.at_level(logging.ERROR):
        game = _game(([0, 1], [], []), ([], [], [0, 1]))

    assert len(calls) == 2
    assert game.state.solver_status is SolverStatus.UNAVAILABLE
    assert game.state.optimal_moves == 0
    assert "Scrambled start" in caplog.text


def test_exhaustion_after_scramble_retries_once(monkeypatch) -> None:
    outcomes = [
        UnreachableTargetError(iterations=1, explored=1),
        SearchExhaustedError(iterations=1, depth=1),
        SearchExhaustedError(iterations=1, depth=1),
    ]

    def failing(*args, **kwargs):
        raise outcomes.pop(0)

    monkeypatch.setattr(Solver, "solve", staticmethod(failing))
    game = _game(([0, 1], [], []), ([], [], [0, 1]))
    assert outcomes == []
    assert game.state.solver_status is SolverStatus.UNAVAILABLE


# -- settings -----------------------------------------------------------------


@pytest.mark.parametrize(
    "kwargs",
    [
        {"min_blocks": 0},
        {"min_blocks": 8, "max_blocks": 6},
        {"max_blocks": 13},
        {"palette_size": 9},
        {"solver_strategy": "astar"},
        {"replay_interval": -1.0},
    ],
    ids=str,
)
def test_invalid_settings(kwargs) -> None:
    with pytest.raises(ValueError):
        GameSettings(**kwargs)
