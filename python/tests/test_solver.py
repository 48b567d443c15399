"""Solver test suite.

Hand-checked puzzles for both strategies, plus seeded random puzzles on
which the two strategies must agree.  Every returned path is replayed
through the real move engine to verify it reaches the target.  Tests are
hard-killed by ``pytest-timeout`` (configured in ``pyproject.toml``).
"""

from __future__ import annotations

import random

import pytest

from backend.engine.gamegenerator.generator import GameGenerator
from backend.engine.gamemoves.moves import MoveEngine
from backend.engine.gamesolver.solver import (
    STRATEGIES,
    SearchExhaustedError,
    Solver,
    SolverLimits,
    UnreachableTargetError,
)
from backend.models.configuration import Configuration, Move


def _config(*towers: list[int]) -> Configuration:
    return Configuration(towers=[list(t) for t in towers])


def _assert_path(start: Configuration, target: Configuration, path) -> None:
    config = start.copy()
    for i, move in enumerate(path):
        assert MoveEngine.apply_move(config, move.src, move.dst), (
            f"Move {i} ({move}) was invalid at {config}"
        )
    assert config == target


# -- hand-checked puzzles -----------------------------------------------------

HAND_CASES = [
    pytest.param(([0], [], []), ([], [0], []), 1, id="single-block"),
    pytest.param(([0, 1], [], []), ([], [], [0, 1]), 3, id="move-pair"),
    pytest.param(([0, 1], [], []), ([1, 0], [], []), 4, id="swap-in-place"),
    pytest.param(([0, 0], [], []), ([], [0, 0], []), 2, id="identical-blocks"),
    pytest.param(([0, 1, 2], [], []), ([0, 1, 2], [], []), 0, id="already-solved"),
]


@pytest.mark.parametrize("strategy", STRATEGIES)
@pytest.mark.parametrize("start,target,expected", HAND_CASES)
def test_hand_cases(strategy: str, start, target, expected: int) -> None:
    start, target = _config(*start), _config(*target)
    solution = Solver.solve(start, target, strategy=strategy)
    assert solution.optimal_moves == expected
    assert len(solution.path) == expected
    _assert_path(start, target, solution.path)


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_single_block_path(strategy: str) -> None:
    solution = Solver.solve(_config([0], [], []), _config([], [0], []),
                            strategy=strategy)
    assert solution.path == (Move(0, 1),)


def test_solver_does_not_mutate_inputs() -> None:
    start, target = _config([0, 1], [], []), _config([], [], [0, 1])
    Solver.solve(start, target)
    assert start == _config([0, 1], [], [])
    assert target == _config([], [], [0, 1])


# -- random puzzles -----------------------------------------------------------


@pytest.mark.parametrize("seed", range(20))
def test_strategies_agree(seed: int) -> None:
    rng = random.Random(seed)
    start, target = GameGenerator.generate(8, rng, (3, 6))

    bfs = Solver.solve(start, target, strategy="bfs")
    bidirectional = Solver.solve(start, target, strategy="bidirectional")

    assert bfs.optimal_moves == bidirectional.optimal_moves > 0
    _assert_path(start, target, bfs.path)
    _assert_path(start, target, bidirectional.path)


@pytest.mark.parametrize("seed", range(5))
def test_larger_puzzle(seed: int) -> None:
    rng = random.Random(1000 + seed)
    start, target = GameGenerator.generate(8, rng, (9, 10))
    solution = Solver.solve(start, target)
    assert solution.optimal_moves == len(solution.path) > 0
    _assert_path(start, target, solution.path)


# -- limits and errors ------------------------------------------------------


@pytest.mark.parametrize("strategy", STRATEGIES)
@pytest.mark.parametrize(
    "limits",
    [SolverLimits(max_depth=1), SolverLimits(max_iterations=1)],
    ids=["depth", "iterations"],
)
def test_tiny_limits_exhaust(strategy: str, limits: SolverLimits) -> None:
    with pytest.raises(SearchExhaustedError):
        Solver.solve(_config([0, 1], [], []), _config([], [], [0, 1]),
                     limits=limits, strategy=strategy)


def test_depth_limit_allows_exact_length() -> None:
    solution = Solver.solve(_config([0, 1], [], []), _config([], [], [0, 1]),
                            limits=SolverLimits(max_depth=3), strategy="bfs")
    assert solution.optimal_moves == 3


def test_unknown_strategy() -> None:
    with pytest.raises(ValueError):
        Solver.solve(_config([0], [], []), _config([], [0], []), strategy="dfs")


def test_limits_must_be_positive() -> None:
    with pytest.raises(ValueError):
        SolverLimits(max_depth=0)


# -- unreachable targets ------------------------------------------------------

# Twelve blocks leave three free slots, too few to lift the four blocks
# resting on a bottom block, so no move sequence swaps the bottoms of the
# two full towers.
_SEALED_START = ([0, 1, 2, 3, 4], [5, 6, 7, 0, 1], [2, 3])
_SEALED_TARGET = ([5, 1, 2, 3, 4], [0, 6, 7, 0, 1], [2, 3])


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_sealed_bottom_is_unreachable(strategy: str) -> None:
    start, target = _config(*_SEALED_START), _config(*_SEALED_TARGET)
    assert start.same_blocks(target)
    with pytest.raises(UnreachableTargetError) as info:
        Solver.solve(start, target, strategy=strategy)
    assert info.value.explored > 1


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_unreachable_is_not_exhaustion(strategy: str) -> None:
    with pytest.raises(UnreachableTargetError):
        Solver.solve(_config(*_SEALED_START), _config(*_SEALED_TARGET),
                     strategy=strategy)
    with pytest.raises(SearchExhaustedError):
        Solver.solve(_config(*_SEALED_START), _config(*_SEALED_TARGET),
                     limits=SolverLimits(max_iterations=10), strategy=strategy)


@pytest.mark.parametrize("seed", range(5))
def test_scrambled_full_puzzle(seed: int) -> None:
    rng = random.Random(2000 + seed)
    target = GameGenerator.generate_target(8, rng, (11, 12))
    start = GameGenerator.scramble(target, rng)
    solution = Solver.solve(start, target)
    assert solution.optimal_moves == len(solution.path) > 0
    _assert_path(start, target, solution.path)
