"""Puzzle generator tests — seeded, so every run sees the same puzzles."""

from __future__ import annotations

import random

import pytest

from backend.engine.gamegenerator.generator import GameGenerator
from backend.engine.gamesolver.solver import Solver
from backend.models.configuration import TOWER_CAPACITY, Configuration

SEEDS = list(range(25))


@pytest.mark.parametrize("seed", SEEDS)
def test_generated_puzzle_is_well_formed(seed: int) -> None:
    rng = random.Random(seed)
    start, target = GameGenerator.generate(8, rng, (5, 12))

    assert 5 <= target.total_blocks() <= 12
    assert start.total_blocks() == target.total_blocks()
    assert start.same_blocks(target)
    assert start != target
    for config in (start, target):
        assert all(len(t) <= TOWER_CAPACITY for t in config.towers)


def test_block_ids_cycle_through_palette() -> None:
    target = GameGenerator.generate_target(3, random.Random(1), (9, 9))
    assert sorted(target.blocks()) == [0, 0, 0, 1, 1, 1, 2, 2, 2]


@pytest.mark.parametrize(
    "towers",
    [
        [[0], [], []],
        [[0, 0, 0], [], []],
        [[], [2, 2], [2]],
        [[0, 1, 0], [], []],
        [[0, 0, 0, 0, 0], [0, 0, 0, 0, 0], [0, 0]],
    ],
    ids=str,
)
@pytest.mark.parametrize("seed", range(5))
def test_start_differs_from_degenerate_target(towers, seed: int) -> None:
    target = Configuration(towers=[t[:] for t in towers])
    start = GameGenerator.generate_start(target, random.Random(seed))
    assert start != target
    assert start.same_blocks(target)
    assert all(len(t) <= TOWER_CAPACITY for t in start.towers)


def test_forced_start_when_shuffles_keep_matching(monkeypatch) -> None:
    target = Configuration(towers=[[0], [], []])
    # Every shuffle lands the block back on tower 0.
    monkeypatch.setattr(
        GameGenerator, "_distribute",
        staticmethod(lambda blocks, rng: Configuration(towers=[blocks[:], [], []])),
    )
    start = GameGenerator.generate_start(target, random.Random(0))
    assert start != target
    assert start.same_blocks(target)


@pytest.mark.parametrize("block_range", [(0, 5), (6, 5), (5, 13)])
def test_bad_block_range(block_range) -> None:
    with pytest.raises(ValueError):
        GameGenerator.generate_target(8, random.Random(0), block_range)


def test_bad_palette_size() -> None:
    with pytest.raises(ValueError):
        GameGenerator.generate_target(0, random.Random(0))


# -- scrambled starts ---------------------------------------------------------


@pytest.mark.parametrize("seed", range(10))
def test_scrambled_start_is_reachable(seed: int) -> None:
    rng = random.Random(seed)
    target = GameGenerator.generate_target(8, rng, (11, 12))
    start = GameGenerator.scramble(target, rng)

    assert start != target
    assert start.same_blocks(target)
    assert all(len(t) <= TOWER_CAPACITY for t in start.towers)
    assert Solver.solve(start, target).optimal_moves > 0


@pytest.mark.parametrize(
    "towers",
    [[[0], [], []], [[0, 0], [0], []], [[1, 1, 1, 1, 1], [1, 1, 1, 1, 1], [1, 1]]],
    ids=str,
)
@pytest.mark.parametrize("moves", [0, 1, 2])
def test_scramble_never_returns_target(towers, moves: int) -> None:
    target = Configuration(towers=[t[:] for t in towers])
    for seed in range(10):
        start = GameGenerator.scramble(target, random.Random(seed), moves=moves)
        assert start != target
        assert start.same_blocks(target)


def test_scramble_of_empty_target() -> None:
    target = Configuration.empty()
    assert GameGenerator.scramble(target, random.Random(0)) == target
