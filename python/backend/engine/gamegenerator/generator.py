"""Generates block towers puzzles: a target layout and a distinct start."""

from __future__ import annotations

import logging
import random

from backend.engine.gamemoves.moves import MoveEngine
from backend.models.configuration import (
    NUM_TOWERS,
    TOWER_CAPACITY,
    Configuration,
    Move,
)

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_RANGE = (5, 12)
MAX_BLOCKS = 12
START_ATTEMPTS = 10
# Random-walk length per block when scrambling a start out of the target.
SCRAMBLE_MOVES_PER_BLOCK = 4


class GameGenerator:
    """Creates puzzles by redistributing the target's blocks.

    A redistributed start can land outside the target's component of the
    move graph; ``scramble`` builds one that is reachable by construction.
    """

    @staticmethod
    def generate_target(
        palette_size: int,
        rng: random.Random | None = None,
        block_range: tuple[int, int] = DEFAULT_BLOCK_RANGE,
    ) -> Configuration:
        """Return a random target configuration.

        Block ids are ``i % palette_size`` for ``i`` below the block count,
        so colours repeat once there are more blocks than colours.
        """
        rng = rng or random.Random()
        low, high = GameGenerator.check_block_range(block_range)
        if palette_size < 1:
            raise ValueError(f"Palette size must be positive, got {palette_size}.")

        num_blocks = rng.randint(low, high)
        blocks = [i % palette_size for i in range(num_blocks)]
        rng.shuffle(blocks)
        target = GameGenerator._distribute(blocks, rng)
        logger.debug("Generated target %s (%d blocks)", target, num_blocks)
        return target

    @staticmethod
    def generate_start(
        target: Configuration, rng: random.Random | None = None
    ) -> Configuration:
        """Return a start with the same blocks as *target* but not equal to it."""
        rng = rng or random.Random()
        blocks = target.blocks()

        start = target.copy()
        for attempt in range(1, START_ATTEMPTS + 1):
            shuffled = blocks[:]
            rng.shuffle(shuffled)
            start = GameGenerator._distribute(shuffled, rng)
            if start != target:
                logger.debug("Start found after %d attempt(s): %s", attempt, start)
                return start

        if blocks:
            GameGenerator._force_different(start, target)
            logger.debug("Start forced different from target: %s", start)
        return start

    @staticmethod
    def scramble(
        target: Configuration,
        rng: random.Random | None = None,
        moves: int | None = None,
    ) -> Configuration:
        """Return a start reached from *target* by a random walk of legal moves.

        Moves are reversible, so the target is always reachable from the
        result.  The walk never undoes its previous step when another move
        exists and keeps going until it ends away from the target.
        """
        rng = rng or random.Random()
        if target.total_blocks() == 0:
            return target.copy()
        if moves is None:
            moves = SCRAMBLE_MOVES_PER_BLOCK * target.total_blocks()

        target_key = target.key()
        key = target_key
        last: Move | None = None
        taken = 0
        while taken < moves or key == target_key:
            options = [
                (move, next_key)
                for move, next_key in MoveEngine.successors(key)
                if last is None or move != last.reversed()
            ] or list(MoveEngine.successors(key))
            last, key = rng.choice(options)
            taken += 1

        start = Configuration.from_key(key)
        logger.debug("Scrambled start after %d moves: %s", taken, start)
        return start

    @staticmethod
    def generate(
        palette_size: int,
        rng: random.Random | None = None,
        block_range: tuple[int, int] = DEFAULT_BLOCK_RANGE,
    ) -> tuple[Configuration, Configuration]:
        """Return a ``(start, target)`` pair."""
        rng = rng or random.Random()
        target = GameGenerator.generate_target(palette_size, rng, block_range)
        return GameGenerator.generate_start(target, rng), target

    @staticmethod
    def check_block_range(block_range: tuple[int, int]) -> tuple[int, int]:
        low, high = block_range
        if not 1 <= low <= high <= MAX_BLOCKS:
            raise ValueError(
                f"Block range must satisfy 1 <= low <= high <= {MAX_BLOCKS}, "
                f"got {low}..{high}."
            )
        return low, high

    # -- helpers --------------------------------------------------------------

    @staticmethod
    def _distribute(blocks: list[int], rng: random.Random) -> Configuration:
        """Push each block onto a random tower that still has room."""
        config = Configuration.empty()
        for block in blocks:
            available = [
                i for i in range(NUM_TOWERS)
                if len(config.towers[i]) < TOWER_CAPACITY
            ]
            if not available:
                logger.debug("All towers full, dropping block %d", block)
                continue
            config.towers[rng.choice(available)].append(block)
        return config

    @staticmethod
    def _force_different(start: Configuration, target: Configuration) -> None:
        """Make *start* differ from *target* without changing its blocks."""
        first = next(i for i in range(NUM_TOWERS) if start.towers[i])
        start.towers[first].reverse()
        if start != target:
            return

        # Palindromic tower: shift its top block so the tower lengths change.
        for offset in range(1, NUM_TOWERS):
            dst = (first + offset) % NUM_TOWERS
            if not start.is_full(dst):
                start.towers[dst].append(start.towers[first].pop())
                return
