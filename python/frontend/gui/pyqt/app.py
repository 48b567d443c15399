"""PyQt6 GUI frontend — fully self-contained.

Includes a main menu and the puzzle page: target preview, clickable towers,
new game / reset / show solution buttons and a timer-driven replay.
"""

from __future__ import annotations

import random
import sys

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QFont, QKeyEvent, QMouseEvent
from PyQt6.QtWidgets import (
    QApplication,
    QFrame,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QSpacerItem,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from backend.engine.gameplay.game import GamePlay, Severity
from backend.models.configuration import NUM_TOWERS, TOWER_CAPACITY
from backend.models.palette import color_for, darken, label_for
from backend.settings import GameSettings

# ---------------------------------------------------------------------------
# Catppuccin Mocha CSS colours
# ---------------------------------------------------------------------------
_BASE = "#1e1e2e"
_MANTLE = "#181825"
_SURFACE0 = "#313244"
_SURFACE1 = "#45475a"
_OVERLAY0 = "#6c7086"
_TEXT = "#cdd6f4"
_SUBTEXT = "#a6adc8"
_BLUE = "#89b4fa"
_GREEN = "#a6e3a1"
_GREEN_H = "#b8ecb4"
_PINK = "#f5c2e7"
_YELLOW = "#f9e2af"
_RED = "#f38ba8"
_RED_H = "#f5a0b8"
_LAVENDER = "#b4befe"

_SEVERITY_CSS = {
    Severity.INFO: _BLUE,
    Severity.ERROR: _RED,
    Severity.SUCCESS: _GREEN,
}

_GLOBAL_CSS = f"""
    QMainWindow, QWidget#page {{ background: {_BASE}; }}
    QLabel {{ color: {_TEXT}; }}
"""

_EXPIRE_POLL_MS = 200


def _styled_btn(
    text: str,
    *,
    bg: str = _SURFACE0,
    hover: str = _SURFACE1,
    fg: str = _TEXT,
    font_size: int = 14,
    min_w: int = 0,
    min_h: int = 44,
) -> QPushButton:
    btn = QPushButton(text)
    btn.setFont(QFont("Helvetica", font_size, QFont.Weight.Bold))
    btn.setMinimumHeight(min_h)
    if min_w:
        btn.setMinimumWidth(min_w)
    btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
    btn.setCursor(Qt.CursorShape.PointingHandCursor)
    btn.setStyleSheet(
        f"QPushButton {{ background:{bg}; color:{fg};"
        f" border:none; border-radius:8px; padding:6px 18px; }}"
        f" QPushButton:hover {{ background:{hover}; }}"
        f" QPushButton:disabled {{ background:{_SURFACE0}; color:{_OVERLAY0}; }}"
    )
    return btn


# ═══════════════════════════════════════════════════════════════════════════
# Tower widget
# ═══════════════════════════════════════════════════════════════════════════


class _TowerView(QFrame):
    """One tower: a column of slot labels, bottom slot last."""

    def __init__(self, index: int, slot_px: int, on_click=None) -> None:
        super().__init__()
        self._index = index
        self._on_click = on_click
        self.setStyleSheet(f"background:{_MANTLE}; border-radius:10px;")

        col = QVBoxLayout(self)
        col.setSpacing(3)
        col.setContentsMargins(10, 10, 10, 10)
        self._slots: list[QLabel] = []
        for _ in range(TOWER_CAPACITY):
            lbl = QLabel()
            lbl.setFixedSize(slot_px * 2, slot_px)
            lbl.setAlignment(Qt.AlignmentFlag.AlignCenter)
            lbl.setFont(QFont("Helvetica", max(9, slot_px // 3), QFont.Weight.Bold))
            col.addWidget(lbl, alignment=Qt.AlignmentFlag.AlignCenter)
            self._slots.append(lbl)
        self._slots.reverse()  # index 0 = bottom

        self._base = QLabel()
        self._base.setFixedHeight(6)
        col.addWidget(self._base)
        if on_click is not None:
            self.setCursor(Qt.CursorShape.PointingHandCursor)

    def show_tower(
        self, tower: list[int], *, selected: bool = False, highlighted: bool = False
    ) -> None:
        for slot, lbl in enumerate(self._slots):
            if slot < len(tower):
                block = tower[slot]
                colour = color_for(block)
                r, g, b = darken(colour)
                border = _TEXT if selected and slot == len(tower) - 1 else f"rgb({r},{g},{b})"
                lbl.setText(label_for(block))
                lbl.setStyleSheet(
                    f"background:{colour.hex}; color:{_BASE};"
                    f" border:2px solid {border}; border-radius:6px;"
                )
            else:
                lbl.setText("")
                lbl.setStyleSheet(
                    f"background:transparent; border:1px dashed {_SURFACE1};"
                    f" border-radius:6px;"
                )
        base = _BLUE if selected else _YELLOW if highlighted else _SURFACE1
        self._base.setStyleSheet(f"background:{base}; border-radius:3px;")

    def mousePressEvent(self, event: QMouseEvent | None) -> None:  # noqa: N802
        if self._on_click is not None:
            self._on_click(self._index)
        super().mousePressEvent(event)


# ═══════════════════════════════════════════════════════════════════════════
# Pages
# ═══════════════════════════════════════════════════════════════════════════


class _MenuPage(QWidget):
    """Main menu with play and quit."""

    def __init__(self, settings: GameSettings) -> None:
        super().__init__()
        self.setObjectName("page")

        root = QVBoxLayout(self)
        root.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.setSpacing(12)
        root.setContentsMargins(30, 30, 30, 30)

        title = QLabel("BLOCK  TOWERS")
        title.setFont(QFont("Helvetica", 34, QFont.Weight.Bold))
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(title)

        sub = QLabel(
            f"{settings.min_blocks}-{settings.max_blocks} blocks"
            f"   solver: {settings.solver_strategy}"
        )
        sub.setFont(QFont("Helvetica", 15))
        sub.setStyleSheet(f"color:{_SUBTEXT};")
        sub.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(sub)

        root.addSpacerItem(QSpacerItem(0, 24))

        self.play_btn = _styled_btn(
            "P L A Y", bg=_BLUE, hover=_LAVENDER, fg=_BASE,
            font_size=16, min_w=240, min_h=52,
        )
        root.addWidget(self.play_btn, alignment=Qt.AlignmentFlag.AlignCenter)

        root.addSpacerItem(QSpacerItem(0, 6))

        self.quit_btn = _styled_btn(
            "Q U I T", bg=_RED, hover=_RED_H, fg=_BASE, min_w=240, font_size=13
        )
        root.addWidget(self.quit_btn, alignment=Qt.AlignmentFlag.AlignCenter)


class _GamePage(QWidget):
    """Target preview, playable towers, stats, status line and buttons."""

    def __init__(self, settings: GameSettings, rng: random.Random) -> None:
        super().__init__()
        self.setObjectName("page")
        self._settings = settings
        self.game = GamePlay(settings, rng, solve=False)

        root = QVBoxLayout(self)
        root.setSpacing(8)
        root.setContentsMargins(16, 10, 16, 10)

        t = QLabel("Target")
        t.setFont(QFont("Helvetica", 14, QFont.Weight.Bold))
        t.setStyleSheet(f"color:{_SUBTEXT};")
        t.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(t)

        self._targets = [_TowerView(i, 18) for i in range(NUM_TOWERS)]
        root.addLayout(self._row(self._targets))

        self._towers = [_TowerView(i, 44, self.click) for i in range(NUM_TOWERS)]
        root.addLayout(self._row(self._towers))

        self._stats = QLabel()
        self._stats.setFont(QFont("Helvetica", 13))
        self._stats.setStyleSheet(f"color:{_PINK};")
        self._stats.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(self._stats)

        self._status = QLabel()
        self._status.setFont(QFont("Helvetica", 12))
        self._status.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(self._status)

        buttons = QHBoxLayout()
        buttons.setAlignment(Qt.AlignmentFlag.AlignCenter)
        buttons.setSpacing(10)
        self.new_btn = _styled_btn("NEW GAME", bg=_BLUE, hover=_LAVENDER, fg=_BASE)
        self.reset_btn = _styled_btn("RESET", bg=_PINK, hover=_LAVENDER, fg=_BASE)
        self.solution_btn = _styled_btn(
            "SHOW SOLUTION", bg=_GREEN, hover=_GREEN_H, fg=_BASE
        )
        self.new_btn.clicked.connect(self.new_game)
        self.reset_btn.clicked.connect(self.reset)
        self.solution_btn.clicked.connect(self.toggle_solution)
        for btn in (self.new_btn, self.reset_btn, self.solution_btn):
            buttons.addWidget(btn)
        root.addLayout(buttons)

        hint = QLabel("1 2 3 / click  pick tower     N  new     R  reset"
                      "     V  solution     X  stop     M  menu")
        hint.setFont(QFont("Helvetica", 11))
        hint.setStyleSheet(f"color:{_OVERLAY0};")
        hint.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(hint)

        # replay clock
        self._replay_timer = QTimer(self)
        self._replay_timer.timeout.connect(self._replay_tick)

        # message expiry
        self._expire_timer = QTimer(self)
        self._expire_timer.timeout.connect(self._expire)
        self._expire_timer.start(_EXPIRE_POLL_MS)

        self._schedule_solve()

    @staticmethod
    def _row(views: list[_TowerView]) -> QHBoxLayout:
        row = QHBoxLayout()
        row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        row.setSpacing(16)
        for v in views:
            row.addWidget(v)
        return row

    # -- helpers --

    def _schedule_solve(self) -> None:
        """Show "calculating" and let Qt paint it before the solver runs."""
        self._sync()
        self._status.setText("Calculating optimal solution…")
        self._status.setStyleSheet(f"color:{_YELLOW};")
        QTimer.singleShot(0, self._solve)

    def _solve(self) -> None:
        self.game.compute_solution()
        self._sync()

    def _sync(self) -> None:
        game = self.game
        state = game.state
        highlight: tuple[int, ...] = ()
        if game.replay is not None and game.replay.last_move is not None:
            highlight = (game.replay.last_move.src, game.replay.last_move.dst)

        for i, view in enumerate(self._targets):
            view.show_tower(state.target.towers[i])
        for i, view in enumerate(self._towers):
            view.show_tower(
                state.current.towers[i],
                selected=state.selected_tower == i,
                highlighted=i in highlight,
            )

        optimal = str(state.optimal_moves) if state.optimal_moves > 0 else "-"
        text = f"Moves: {state.moves}    Optimal: {optimal}"
        if game.is_replaying and game.replay is not None:
            text += f"    Replaying {game.replay.applied}/{len(game.replay.path)}"
        self._stats.setText(text)

        if game.message is None:
            self._status.setText("")
        else:
            self._status.setText(game.message.text)
            self._status.setStyleSheet(
                f"color:{_SEVERITY_CSS[game.message.severity]};"
            )

        enabled = game.buttons_enabled
        self.new_btn.setEnabled(enabled)
        self.reset_btn.setEnabled(enabled)
        if game.is_replaying:
            self.solution_btn.setText("STOP")
            self.solution_btn.setEnabled(True)
        else:
            self.solution_btn.setText("SHOW SOLUTION")
            self.solution_btn.setEnabled(enabled and state.has_solution)

    def _replay_tick(self) -> None:
        self.game.advance_replay()
        if not self.game.is_replaying:
            self._replay_timer.stop()
        self._sync()

    def _expire(self) -> None:
        if self.game.expire_message():
            self._sync()

    # -- actions (buttons and keyboard) --

    def click(self, index: int) -> None:
        self.game.click_tower(index)
        self._sync()

    def new_game(self) -> None:
        self._replay_timer.stop()
        self.game.new_game(solve=False)
        self._schedule_solve()

    def reset(self) -> None:
        self._replay_timer.stop()
        self.game.reset()
        self._sync()

    def toggle_solution(self) -> None:
        if self.game.is_replaying:
            self.stop_replay()
            return
        if self.game.start_replay():
            self._replay_timer.start(int(self._settings.replay_interval * 1000))
        self._sync()

    def stop_replay(self) -> None:
        self._replay_timer.stop()
        self.game.cancel_replay()
        self._sync()

    def shutdown(self) -> None:
        self._replay_timer.stop()
        self._expire_timer.stop()
        self.game.cancel_replay()


# ═══════════════════════════════════════════════════════════════════════════
# Main window
# ═══════════════════════════════════════════════════════════════════════════

_IDX_MENU = 0
_IDX_GAME = 1


class _MainWindow(QMainWindow):
    def __init__(self, settings: GameSettings, rng: random.Random) -> None:
        super().__init__()
        self._settings = settings
        self._rng = rng

        self.setWindowTitle("Block Towers")
        self.setStyleSheet(_GLOBAL_CSS)
        self.setMinimumSize(560, 720)

        self._stack = QStackedWidget()
        self.setCentralWidget(self._stack)

        self._menu = _MenuPage(settings)
        self._menu.play_btn.clicked.connect(self._on_play)
        self._menu.quit_btn.clicked.connect(self.close)
        self._stack.addWidget(self._menu)  # 0

        # placeholder (replaced dynamically)
        self._game_page: _GamePage | None = None
        self._stack.addWidget(QWidget())  # 1

        self._stack.setCurrentIndex(_IDX_MENU)

    # -- navigation ---

    def _show_menu(self) -> None:
        if self._game_page is not None:
            self._game_page.stop_replay()
        self._stack.setCurrentIndex(_IDX_MENU)

    def _on_play(self) -> None:
        if self._game_page is not None:
            self._game_page.shutdown()
        page = _GamePage(self._settings, self._rng)
        self._game_page = page

        old = self._stack.widget(_IDX_GAME)
        self._stack.removeWidget(old)
        old.deleteLater()
        self._stack.insertWidget(_IDX_GAME, page)
        self._stack.setCurrentIndex(_IDX_GAME)

    # -- keyboard ---

    def keyPressEvent(self, event: QKeyEvent | None) -> None:  # noqa: N802
        if event is None:
            return
        key = event.key()
        idx = self._stack.currentIndex()

        if idx == _IDX_MENU:
            if key == Qt.Key.Key_Return:
                self._on_play()
            elif key in (Qt.Key.Key_Q, Qt.Key.Key_Escape):
                self.close()

        elif idx == _IDX_GAME and self._game_page is not None:
            gp = self._game_page
            _towers = {Qt.Key.Key_1: 0, Qt.Key.Key_2: 1, Qt.Key.Key_3: 2}
            if gp.game.is_replaying:
                if key in (Qt.Key.Key_X, Qt.Key.Key_Escape, Qt.Key.Key_V):
                    gp.stop_replay()
            elif key in _towers:
                gp.click(_towers[key])
            elif key == Qt.Key.Key_N:
                gp.new_game()
            elif key == Qt.Key.Key_R:
                gp.reset()
            elif key == Qt.Key.Key_V:
                gp.toggle_solution()
            elif key in (Qt.Key.Key_M, Qt.Key.Key_Escape):
                self._show_menu()

        else:
            super().keyPressEvent(event)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def run(settings: GameSettings, rng: random.Random) -> None:
    """Launch the PyQt6 GUI (opens directly to the menu)."""
    qapp = QApplication.instance() or QApplication(sys.argv)
    window = _MainWindow(settings, rng)
    window.show()
    qapp.exec()
