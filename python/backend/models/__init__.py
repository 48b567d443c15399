from backend.models.configuration import (
    NUM_TOWERS,
    TOWER_CAPACITY,
    ConfigKey,
    Configuration,
    Move,
)
from backend.models.palette import PALETTE, BlockColor, color_for, darken, label_for

__all__ = [
    "NUM_TOWERS",
    "TOWER_CAPACITY",
    "ConfigKey",
    "Configuration",
    "Move",
    "PALETTE",
    "BlockColor",
    "color_for",
    "darken",
    "label_for",
]
