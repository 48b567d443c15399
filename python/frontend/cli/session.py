"""Terminal game loop shared by the vanilla and Rich frontends.

The loop owns the tower cursor and the replay clock; each frontend only
supplies its two drawing functions.
"""

from __future__ import annotations

import random
from collections.abc import Callable

from backend.engine.gameplay.game import GamePlay
from backend.models.configuration import NUM_TOWERS
from backend.settings import GameSettings
from frontend.cli.input_handler import get_key_timeout, tower_index

# How often the idle loop wakes up to expire status messages.
_IDLE_POLL = 0.5

DrawGame = Callable[[GamePlay, int], None]
DrawCalculating = Callable[[GamePlay], None]


def _solve(game: GamePlay, draw_calculating: DrawCalculating) -> None:
    draw_calculating(game)
    game.compute_solution()


def play(
    settings: GameSettings,
    rng: random.Random,
    draw_game: DrawGame,
    draw_calculating: DrawCalculating,
) -> None:
    """Run one terminal session until the player quits."""
    game = GamePlay(settings, rng, solve=False)
    _solve(game, draw_calculating)
    cursor = 0
    dirty = True

    while True:
        if game.expire_message():
            dirty = True
        if dirty:
            draw_game(game, cursor)
            dirty = False

        timeout = settings.replay_interval if game.is_replaying else _IDLE_POLL
        key = get_key_timeout(timeout)

        if key is None:
            if game.is_replaying:
                game.advance_replay()
                dirty = True
            continue

        dirty = True
        if game.is_replaying:
            # Only stopping is allowed while the solution plays.
            if key in ("stop", "quit"):
                game.cancel_replay()
            continue

        index = tower_index(key)
        if index is not None:
            cursor = index
            game.click_tower(index)
        elif key == "left":
            cursor = (cursor - 1) % NUM_TOWERS
        elif key == "right":
            cursor = (cursor + 1) % NUM_TOWERS
        elif key == "select":
            game.click_tower(cursor)
        elif key == "new":
            game.new_game(solve=False)
            _solve(game, draw_calculating)
        elif key == "reset":
            game.reset()
        elif key == "solution":
            game.start_replay()
        elif key == "quit":
            return
        else:
            dirty = False
