"""Move rules — applying a single block move and checking the win condition."""

from __future__ import annotations

from collections.abc import Iterator

from backend.models.configuration import (
    NUM_TOWERS,
    TOWER_CAPACITY,
    ConfigKey,
    Configuration,
    Move,
)


class MoveEngine:
    """Stateless move rules — all methods are static."""

    @staticmethod
    def can_move(config: Configuration, src: int, dst: int) -> bool:
        return not config.is_empty(src) and not config.is_full(dst)

    @staticmethod
    def apply_move(config: Configuration, src: int, dst: int) -> bool:
        """Move the top block of tower *src* onto tower *dst* in place.

        Returns False, leaving *config* untouched, when the source is empty
        or the destination is full.  ``src == dst`` is not checked here.
        """
        if not MoveEngine.can_move(config, src, dst):
            return False
        block = config.towers[src].pop()
        config.towers[dst].append(block)
        return True

    @staticmethod
    def check_win(config: Configuration, target: Configuration) -> bool:
        return config == target

    @staticmethod
    def legal_moves(config: Configuration) -> list[Move]:
        return [
            Move(src, dst)
            for src in range(NUM_TOWERS)
            for dst in range(NUM_TOWERS)
            if src != dst and MoveEngine.can_move(config, src, dst)
        ]

    @staticmethod
    def successors(key: ConfigKey) -> Iterator[tuple[Move, ConfigKey]]:
        """Yield every ``(move, resulting key)`` reachable in one move.

        Same rules as :meth:`apply_move`, evaluated on canonical keys so
        the solver never builds intermediate ``Configuration`` objects.
        """
        for src in range(NUM_TOWERS):
            source = key[src]
            if not source:
                continue
            block = source[-1]
            for dst in range(NUM_TOWERS):
                if dst == src or len(key[dst]) >= TOWER_CAPACITY:
                    continue
                towers = list(key)
                towers[src] = source[:-1]
                towers[dst] = key[dst] + (block,)
                yield Move(src, dst), tuple(towers)
