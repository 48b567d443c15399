"""Tower configuration model for the block towers puzzle."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

NUM_TOWERS = 3
TOWER_CAPACITY = 5

# Canonical key: one tuple per tower, bottom block first.
ConfigKey = tuple[tuple[int, ...], ...]


@dataclass(frozen=True)
class Move:
    """Move the top block of tower ``src`` onto tower ``dst``."""

    src: int
    dst: int

    def __post_init__(self) -> None:
        for index in (self.src, self.dst):
            if not 0 <= index < NUM_TOWERS:
                raise ValueError(f"Tower index out of range: {index}")
        if self.src == self.dst:
            raise ValueError(f"Move source and destination are both {self.src}.")

    def reversed(self) -> Move:
        """Return the move that undoes this one."""
        return Move(self.dst, self.src)

    def __str__(self) -> str:
        return f"{self.src + 1}→{self.dst + 1}"


@dataclass
class Configuration:
    """The full state of the three towers.

    Towers are stored as lists of block ids, index 0 being the bottom.
    Equality is positional: two configurations are equal only if every
    tower holds the same blocks in the same order.
    """

    towers: list[list[int]]

    def __post_init__(self) -> None:
        if len(self.towers) != NUM_TOWERS:
            raise ValueError(
                f"Expected {NUM_TOWERS} towers, got {len(self.towers)}."
            )
        for i, tower in enumerate(self.towers):
            if len(tower) > TOWER_CAPACITY:
                raise ValueError(
                    f"Tower {i} holds {len(tower)} blocks, "
                    f"capacity is {TOWER_CAPACITY}."
                )

    # -- construction helpers -------------------------------------------------

    @classmethod
    def empty(cls) -> Configuration:
        return cls(towers=[[] for _ in range(NUM_TOWERS)])

    @classmethod
    def from_key(cls, key: ConfigKey) -> Configuration:
        """Rebuild a configuration from its canonical key.

        Example::

            Configuration.from_key(((0, 1), (), (2,)))
        """
        return cls(towers=[list(tower) for tower in key])

    # -- queries --------------------------------------------------------------

    def key(self) -> ConfigKey:
        """Canonical, hashable form; equal keys iff equal configurations."""
        return tuple(tuple(tower) for tower in self.towers)

    def total_blocks(self) -> int:
        return sum(len(tower) for tower in self.towers)

    def blocks(self) -> list[int]:
        """All blocks, tower by tower, bottom to top."""
        return [block for tower in self.towers for block in tower]

    def block_counts(self) -> Counter[int]:
        return Counter(self.blocks())

    def same_blocks(self, other: Configuration) -> bool:
        """True if both configurations hold the same multiset of blocks."""
        return self.block_counts() == other.block_counts()

    def is_empty(self, index: int) -> bool:
        return not self.towers[index]

    def is_full(self, index: int) -> bool:
        return len(self.towers[index]) >= TOWER_CAPACITY

    def copy(self) -> Configuration:
        return Configuration(towers=[tower[:] for tower in self.towers])

    def __str__(self) -> str:
        parts = [
            " ".join(str(block + 1) for block in tower) if tower else "-"
            for tower in self.towers
        ]
        return "[" + " | ".join(parts) + "]"
