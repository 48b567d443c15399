"""Move engine tests."""

from __future__ import annotations

import random

from backend.engine.gamemoves.moves import MoveEngine
from backend.models.configuration import TOWER_CAPACITY, Configuration, Move


def test_apply_move_moves_top_block() -> None:
    config = Configuration(towers=[[0, 1], [], [2]])
    assert MoveEngine.apply_move(config, 0, 2)
    assert config.towers == [[0], [], [2, 1]]


def test_empty_source_is_rejected_untouched() -> None:
    config = Configuration(towers=[[], [1], []])
    assert not MoveEngine.apply_move(config, 0, 1)
    assert config.towers == [[], [1], []]


def test_full_destination_is_rejected_untouched() -> None:
    config = Configuration(towers=[[0], [1, 1, 1, 1, 1], []])
    assert not MoveEngine.apply_move(config, 0, 1)
    assert config.towers == [[0], [1, 1, 1, 1, 1], []]


def test_legal_moves() -> None:
    config = Configuration(towers=[[0], [1, 1, 1, 1, 1], []])
    assert set(MoveEngine.legal_moves(config)) == {
        Move(0, 2), Move(1, 0), Move(1, 2),
    }


def test_successors_match_apply_move() -> None:
    config = Configuration(towers=[[0, 1], [2, 2, 2, 2, 2], [3]])
    for move, key in MoveEngine.successors(config.key()):
        moved = config.copy()
        assert MoveEngine.apply_move(moved, move.src, move.dst)
        assert moved.key() == key
    assert len(list(MoveEngine.successors(config.key()))) == len(
        MoveEngine.legal_moves(config)
    )


def test_random_walk_preserves_blocks() -> None:
    rng = random.Random(42)
    config = Configuration(towers=[[0, 1, 2, 3], [4, 5, 6], [7, 0, 1, 2, 3]])
    counts = config.block_counts()
    for _ in range(500):
        src, dst = rng.sample(range(3), 2)
        MoveEngine.apply_move(config, src, dst)
        assert config.total_blocks() == 12
        assert all(0 <= len(t) <= TOWER_CAPACITY for t in config.towers)
    assert config.block_counts() == counts


def test_check_win() -> None:
    config = Configuration(towers=[[0], [], []])
    target = Configuration(towers=[[], [0], []])
    assert not MoveEngine.check_win(config, target)
    MoveEngine.apply_move(config, 0, 1)
    assert MoveEngine.check_win(config, target)
