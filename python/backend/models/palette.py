"""Block colours shared by every frontend."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BlockColor:
    name: str
    hex: str

    @property
    def rgb(self) -> tuple[int, int, int]:
        value = self.hex.lstrip("#")
        return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))


PALETTE: tuple[BlockColor, ...] = (
    BlockColor("block-1", "#FF6B6B"),
    BlockColor("block-2", "#4ECDC4"),
    BlockColor("block-3", "#45B7D1"),
    BlockColor("block-4", "#FFA07A"),
    BlockColor("block-5", "#98D8C8"),
    BlockColor("block-6", "#F7DC6F"),
    BlockColor("block-7", "#BB8FCE"),
    BlockColor("block-8", "#85C1E2"),
)


def color_for(block: int) -> BlockColor:
    """Return the display colour of *block* (id modulo palette size)."""
    return PALETTE[block % len(PALETTE)]


def label_for(block: int) -> str:
    return str(block + 1)


def darken(color: BlockColor, amount: int = 40) -> tuple[int, int, int]:
    """Border shade: each channel reduced by *amount*, floored at 0."""
    r, g, b = color.rgb
    return (max(0, r - amount), max(0, g - amount), max(0, b - amount))
