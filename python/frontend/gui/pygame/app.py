"""Pygame GUI frontend — fully self-contained.

Includes a main menu, the puzzle screen with target preview, clickable
towers, and a paced solution replay.  No terminal interaction required.
"""

from __future__ import annotations

import enum
import random
import time

import pygame

from backend.engine.gameplay.game import GamePlay, Severity
from backend.models.configuration import NUM_TOWERS, TOWER_CAPACITY, Configuration
from backend.models.palette import color_for, darken, label_for
from backend.settings import GameSettings

# ---------------------------------------------------------------------------
# Catppuccin Mocha palette
# ---------------------------------------------------------------------------
COL_BASE = (30, 30, 46)
COL_MANTLE = (24, 24, 37)
COL_SURFACE0 = (49, 50, 68)
COL_SURFACE1 = (69, 71, 90)
COL_OVERLAY0 = (108, 112, 134)
COL_TEXT = (205, 214, 244)
COL_SUBTEXT = (166, 173, 200)
COL_BLUE = (137, 180, 250)
COL_LAVENDER = (180, 190, 254)
COL_GREEN = (166, 227, 161)
COL_PINK = (245, 194, 231)
COL_YELLOW = (249, 226, 175)
COL_RED = (243, 139, 168)

_SEVERITY_COL = {
    Severity.INFO: COL_BLUE,
    Severity.ERROR: COL_RED,
    Severity.SUCCESS: COL_GREEN,
}

# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------
WIN_W, WIN_H = 640, 700
MARGIN = 20
TOWER_W = (WIN_W - 2 * MARGIN) // NUM_TOWERS

_KEY_TOWERS = {pygame.K_1: 0, pygame.K_2: 1, pygame.K_3: 2}


# ---------------------------------------------------------------------------
# Screen enum
# ---------------------------------------------------------------------------
class _Screen(enum.Enum):
    MENU = "menu"
    PLAYING = "playing"


# ---------------------------------------------------------------------------
# Simple clickable button
# ---------------------------------------------------------------------------
class _Btn:
    __slots__ = ("rect", "text", "font", "bg", "hover", "fg", "radius", "enabled", "_hot")

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        font: pygame.font.Font,
        *,
        bg: tuple = COL_SURFACE0,
        hover: tuple = COL_SURFACE1,
        fg: tuple = COL_TEXT,
        radius: int = 8,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self.text = text
        self.font = font
        self.bg = bg
        self.hover = hover
        self.fg = fg
        self.radius = radius
        self.enabled = True
        self._hot = False

    def draw(self, surf: pygame.Surface) -> None:
        if not self.enabled:
            c, fg = COL_SURFACE0, COL_OVERLAY0
        else:
            c, fg = (self.hover if self._hot else self.bg), self.fg
        pygame.draw.rect(surf, c, self.rect, border_radius=self.radius)
        lbl = self.font.render(self.text, True, fg)
        surf.blit(
            lbl,
            (
                self.rect.centerx - lbl.get_width() // 2,
                self.rect.centery - lbl.get_height() // 2,
            ),
        )

    def motion(self, pos: tuple[int, int]) -> None:
        self._hot = self.rect.collidepoint(pos)

    def hit(self, pos: tuple[int, int]) -> bool:
        return self.enabled and self.rect.collidepoint(pos)


# ---------------------------------------------------------------------------
# Centring helpers
# ---------------------------------------------------------------------------
def _cx(w: int) -> int:
    return (WIN_W - w) // 2


def _blit_center(surf: pygame.Surface, rendered: pygame.Surface, y: int) -> None:
    surf.blit(rendered, (_cx(rendered.get_width()), y))


# ---------------------------------------------------------------------------
# Main application
# ---------------------------------------------------------------------------
class PygameApp:
    # Big (playable) towers and the small target preview.
    _PLAY_TOP, _PLAY_SLOT = 230, 56
    _TARGET_TOP, _TARGET_SLOT = 70, 24

    def __init__(self, settings: GameSettings, rng: random.Random) -> None:
        self._settings = settings
        self._rng = rng

        pygame.init()
        self._surf = pygame.display.set_mode((WIN_W, WIN_H))
        pygame.display.set_caption("Block Towers")
        self._clock = pygame.time.Clock()

        # Fonts
        self._f_big = pygame.font.SysFont("Helvetica", 38, bold=True)
        self._f_title = pygame.font.SysFont("Helvetica", 22, bold=True)
        self._f_body = pygame.font.SysFont("Helvetica", 16)
        self._f_btn = pygame.font.SysFont("Helvetica", 17, bold=True)
        self._f_btn_sm = pygame.font.SysFont("Helvetica", 14, bold=True)
        self._f_small = pygame.font.SysFont("Helvetica", 13)
        self._f_block = pygame.font.SysFont("Helvetica", 20, bold=True)

        self._screen = _Screen.MENU
        self._game: GamePlay | None = None
        self._solve_pending = False
        self._last_tick = 0.0

        self._build_menu_btns()
        self._build_game_btns()

    # ── buttons ─────────────────────────────────────────────────────────────

    def _build_menu_btns(self) -> None:
        bw_lg = 220
        self._play_btn = _Btn(
            (_cx(bw_lg), 330, bw_lg, 50),
            "P L A Y",
            self._f_btn,
            bg=COL_BLUE,
            hover=COL_LAVENDER,
            fg=COL_BASE,
        )
        self._quit_btn = _Btn(
            (_cx(bw_lg), 396, bw_lg, 42),
            "Q U I T",
            self._f_btn_sm,
            bg=COL_RED,
            hover=(255, 170, 185),
            fg=COL_BASE,
        )
        self._menu_all = [self._play_btn, self._quit_btn]

    def _build_game_btns(self) -> None:
        bw, gap, y = 140, 12, WIN_H - 120
        sx = _cx(3 * bw + 2 * gap)
        self._new_btn = _Btn(
            (sx, y, bw, 40), "NEW GAME (N)", self._f_btn_sm,
            bg=COL_BLUE, hover=COL_LAVENDER, fg=COL_BASE,
        )
        self._reset_btn = _Btn(
            (sx + bw + gap, y, bw, 40), "RESET (R)", self._f_btn_sm,
            bg=COL_PINK, hover=(245, 210, 227), fg=COL_BASE,
        )
        self._solution_btn = _Btn(
            (sx + 2 * (bw + gap), y, bw, 40), "SOLUTION (V)", self._f_btn_sm,
            bg=COL_GREEN, hover=(190, 240, 190), fg=COL_BASE,
        )
        self._game_btns = [self._new_btn, self._reset_btn, self._solution_btn]

    def _sync_buttons(self) -> None:
        game = self._game
        assert game is not None
        enabled = game.buttons_enabled
        self._new_btn.enabled = enabled
        self._reset_btn.enabled = enabled
        # During a replay the solution button turns into a stop button.
        if game.is_replaying:
            self._solution_btn.text = "STOP (X)"
            self._solution_btn.enabled = True
        else:
            self._solution_btn.text = "SOLUTION (V)"
            self._solution_btn.enabled = enabled and game.state.has_solution

    # ── tower geometry ──────────────────────────────────────────────────────

    def _tower_rect(self, i: int) -> pygame.Rect:
        height = TOWER_CAPACITY * self._PLAY_SLOT + 16
        return pygame.Rect(MARGIN + i * TOWER_W, self._PLAY_TOP, TOWER_W, height)

    def _draw_towers(
        self,
        config: Configuration,
        top: int,
        slot_h: int,
        *,
        selected: int | None = None,
        highlight: tuple[int, ...] = (),
        font: pygame.font.Font | None = None,
    ) -> None:
        block_w = TOWER_W - 60 if font else TOWER_W // 2
        for i, tower in enumerate(config.towers):
            cx = MARGIN + i * TOWER_W + TOWER_W // 2
            base_y = top + TOWER_CAPACITY * slot_h
            pole = pygame.Rect(cx - 3, top, 6, TOWER_CAPACITY * slot_h)
            pygame.draw.rect(self._surf, COL_SURFACE1, pole, border_radius=3)

            base_col = COL_YELLOW if i in highlight else COL_SURFACE1
            if selected == i:
                base_col = COL_BLUE
            pygame.draw.rect(
                self._surf,
                base_col,
                pygame.Rect(cx - block_w // 2 - 10, base_y, block_w + 20, 8),
                border_radius=4,
            )

            for slot in range(TOWER_CAPACITY):
                rect = pygame.Rect(
                    cx - block_w // 2,
                    base_y - (slot + 1) * slot_h + 2,
                    block_w,
                    slot_h - 4,
                )
                if slot >= len(tower):
                    if font:
                        pygame.draw.rect(
                            self._surf, COL_MANTLE, rect, width=1, border_radius=6
                        )
                    continue
                block = tower[slot]
                colour = color_for(block)
                pygame.draw.rect(self._surf, colour.rgb, rect, border_radius=6)
                pygame.draw.rect(
                    self._surf, darken(colour), rect, width=2, border_radius=6
                )
                if selected == i and slot == len(tower) - 1:
                    pygame.draw.rect(
                        self._surf, COL_TEXT, rect.inflate(6, 6), width=3,
                        border_radius=8,
                    )
                if font:
                    lbl = font.render(label_for(block), True, COL_BASE)
                    self._surf.blit(
                        lbl,
                        (
                            rect.centerx - lbl.get_width() // 2,
                            rect.centery - lbl.get_height() // 2,
                        ),
                    )

    # ── drawing ─────────────────────────────────────────────────────────────

    def _draw_menu(self) -> None:
        self._surf.fill(COL_BASE)
        _blit_center(
            self._surf,
            self._f_big.render("BLOCK  TOWERS", True, COL_TEXT),
            100,
        )
        s = self._settings
        _blit_center(
            self._surf,
            self._f_body.render(
                f"{s.min_blocks}-{s.max_blocks} blocks   solver: {s.solver_strategy}",
                True,
                COL_SUBTEXT,
            ),
            230,
        )
        for btn in self._menu_all:
            btn.draw(self._surf)

    def _draw_game(self) -> None:
        self._surf.fill(COL_BASE)
        game = self._game
        assert game is not None
        state = game.state

        _blit_center(
            self._surf, self._f_title.render("Target", True, COL_SUBTEXT), 20
        )
        self._draw_towers(state.target, self._TARGET_TOP, self._TARGET_SLOT)

        highlight: tuple[int, ...] = ()
        if game.replay is not None and game.replay.last_move is not None:
            highlight = (game.replay.last_move.src, game.replay.last_move.dst)
        self._draw_towers(
            state.current,
            self._PLAY_TOP,
            self._PLAY_SLOT,
            selected=state.selected_tower,
            highlight=highlight,
            font=self._f_block,
        )

        optimal = str(state.optimal_moves) if state.optimal_moves > 0 else "-"
        stats = f"Moves: {state.moves}    Optimal: {optimal}"
        if game.is_replaying and game.replay is not None:
            stats += f"    Replaying {game.replay.applied}/{len(game.replay.path)}"
        _blit_center(
            self._surf,
            self._f_body.render(stats, True, COL_PINK),
            WIN_H - 170,
        )

        self._sync_buttons()
        for btn in self._game_btns:
            btn.draw(self._surf)

        if self._solve_pending:
            _blit_center(
                self._surf,
                self._f_small.render("Calculating optimal solution…", True, COL_YELLOW),
                WIN_H - 66,
            )
        elif game.message is not None:
            _blit_center(
                self._surf,
                self._f_small.render(
                    game.message.text, True, _SEVERITY_COL[game.message.severity]
                ),
                WIN_H - 66,
            )

        _blit_center(
            self._surf,
            self._f_small.render(
                "1-3 / click  pick tower     M  menu     Esc  stop / menu",
                True,
                COL_OVERLAY0,
            ),
            WIN_H - 36,
        )

    # ── event handling ──────────────────────────────────────────────────────

    def _ev_menu(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            for b in self._menu_all:
                b.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._play_btn.hit(ev.pos):
                self._start_game()
            elif self._quit_btn.hit(ev.pos):
                return False
        elif ev.type == pygame.KEYDOWN:
            if ev.key == pygame.K_RETURN:
                self._start_game()
            elif ev.key in (pygame.K_q, pygame.K_ESCAPE):
                return False
        return True

    def _ev_game(self, ev: pygame.event.Event) -> bool:
        game = self._game
        assert game is not None
        if self._solve_pending:
            return True

        if ev.type == pygame.MOUSEMOTION:
            for btn in self._game_btns:
                btn.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._solution_btn.hit(ev.pos):
                self._toggle_solution()
            elif self._new_btn.hit(ev.pos):
                self._new_game()
            elif self._reset_btn.hit(ev.pos):
                game.reset()
            else:
                for i in range(NUM_TOWERS):
                    if self._tower_rect(i).collidepoint(ev.pos):
                        game.click_tower(i)
                        break
        elif ev.type == pygame.KEYDOWN:
            if game.is_replaying:
                if ev.key in (pygame.K_x, pygame.K_ESCAPE, pygame.K_v):
                    game.cancel_replay()
            elif ev.key in _KEY_TOWERS:
                game.click_tower(_KEY_TOWERS[ev.key])
            elif ev.key == pygame.K_n:
                self._new_game()
            elif ev.key == pygame.K_r:
                game.reset()
            elif ev.key == pygame.K_v:
                self._toggle_solution()
            elif ev.key in (pygame.K_m, pygame.K_ESCAPE):
                self._screen = _Screen.MENU
        return True

    # ── game actions ────────────────────────────────────────────────────────

    def _start_game(self) -> None:
        self._game = GamePlay(self._settings, self._rng, solve=False)
        self._solve_pending = True
        self._screen = _Screen.PLAYING

    def _new_game(self) -> None:
        game = self._game
        assert game is not None
        game.new_game(solve=False)
        self._solve_pending = True

    def _toggle_solution(self) -> None:
        game = self._game
        assert game is not None
        if game.is_replaying:
            game.cancel_replay()
        elif game.start_replay():
            self._last_tick = time.monotonic()

    def _step(self) -> None:
        """Per-frame bookkeeping: pending solve, replay clock, message expiry."""
        game = self._game
        if game is None or self._screen != _Screen.PLAYING:
            return
        if self._solve_pending:
            # The "calculating" frame has been shown; solve now.
            game.compute_solution()
            self._solve_pending = False
            return
        now = time.monotonic()
        if game.is_replaying and now - self._last_tick >= self._settings.replay_interval:
            game.advance_replay()
            self._last_tick = now
        game.expire_message(now)

    # ── main loop ───────────────────────────────────────────────────────────

    def run_loop(self) -> None:
        _dispatch = {
            _Screen.MENU: self._ev_menu,
            _Screen.PLAYING: self._ev_game,
        }
        _draw = {
            _Screen.MENU: self._draw_menu,
            _Screen.PLAYING: self._draw_game,
        }

        running = True
        while running:
            for ev in pygame.event.get():
                if ev.type == pygame.QUIT:
                    running = False
                    break
                handler = _dispatch.get(self._screen)
                if handler and not handler(ev):
                    running = False
                    break

            drawer = _draw.get(self._screen)
            if drawer:
                drawer()
            pygame.display.flip()
            self._step()
            self._clock.tick(30)

        pygame.quit()


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def run(settings: GameSettings, rng: random.Random) -> None:
    """Launch the Pygame GUI (opens directly to the menu)."""
    app = PygameApp(settings, rng)
    app.run_loop()
