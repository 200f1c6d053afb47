"""
Floating always-on-top prompt shown while waiting on an AI tool and when a
workout is triggered.
"""

from __future__ import annotations

import logging
import time

from PySide6.QtCore import QTimer, Qt, Signal
from PySide6.QtWidgets import QHBoxLayout, QLabel, QVBoxLayout, QWidget

from gitfit.core.workouts.workout_session import WorkoutSession

from .components import Card, CategoryChip, PrimaryButton, SecondaryButton
from .theme import Theme

log = logging.getLogger(__name__)


class PromptWindow(QWidget):
    # Emitted when the user finishes, skips or dismisses; the tray resets waiting.
    dismissed = Signal()

    def __init__(self, theme: Theme, parent=None) -> None:
        super().__init__(parent)
        self.setObjectName("PromptWindow")
        self.setWindowTitle("GitFit")
        self.setWindowFlags(Qt.Tool | Qt.FramelessWindowHint | Qt.WindowStaysOnTopHint)
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setFixedWidth(340)

        self.session = WorkoutSession()
        self.session.on_complete(lambda _ex: QTimer.singleShot(1500, self._finish))
        self._manually_opened = False

        self._build_ui()
        self.setStyleSheet(theme.get_stylesheet())

        self._tick_timer = QTimer(self)
        self._tick_timer.timeout.connect(self._tick)
        self._tick_timer.start(250)

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(16, 16, 16, 16)
        root.setSpacing(12)

        self.title = QLabel("GitFit")
        self.title.setObjectName("TitleLabel")
        root.addWidget(self.title)

        self.status = QLabel("Scanning for vibe...")
        self.status.setObjectName("HintLabel")
        root.addWidget(self.status)

        card = Card(self)
        self.chip = CategoryChip(self.session.exercise.category)
        self.exercise_name = QLabel()
        self.exercise_name.setObjectName("BodyLabel")
        self.exercise_desc = QLabel()
        self.exercise_desc.setObjectName("HintLabel")
        self.exercise_desc.setWordWrap(True)
        self.timer_label = QLabel()
        self.timer_label.setObjectName("TimerLabel")
        self.timer_label.setAlignment(Qt.AlignCenter)
        for w in (self.chip, self.exercise_name, self.exercise_desc, self.timer_label):
            card.layout.addWidget(w)
        root.addWidget(card)

        buttons = QHBoxLayout()
        self.btn_start = PrimaryButton("Start")
        self.btn_start.clicked.connect(self._start_workout)
        self.btn_skip = SecondaryButton("Skip")
        self.btn_skip.clicked.connect(self._skip)
        self.btn_close = SecondaryButton("Not now")
        self.btn_close.clicked.connect(self._finish)
        for b in (self.btn_start, self.btn_skip, self.btn_close):
            buttons.addWidget(b)
        root.addLayout(buttons)

        self._render_exercise()

    def _render_exercise(self) -> None:
        ex = self.session.exercise
        self.chip.set_category(ex.category)
        self.exercise_name.setText(ex.name)
        self.exercise_desc.setText(ex.description)
        self.timer_label.setText(f"{self.session.remaining_s}s")
        self.btn_start.setEnabled(not self.session.is_active)

    def set_status(self, text: str) -> None:
        self.status.setText(text)

    def enter_workout_mode(self) -> bool:
        """Switch to the workout prompt. Returns False if an exercise is already running."""
        if self.session.is_active:
            return False
        self.title.setText("Time to move!")
        self.session.reset()
        self._render_exercise()
        return True

    def show_automatic(self) -> None:
        self._place_top_right()
        self.show()
        self.raise_()

    def hide_automatic(self) -> None:
        if self.session.is_active or self._manually_opened:
            return
        # Clicks on the panel are global input too; they must not close it.
        if self.isVisible() and self.underMouse():
            return
        self.title.setText("GitFit")
        self.hide()

    def show_manual(self) -> None:
        self._manually_opened = True
        self.show_automatic()

    def _place_top_right(self) -> None:
        screen = self.screen().availableGeometry() if self.screen() else None
        if screen is not None:
            self.move(screen.right() - self.width() - 16, screen.top() + 16)

    def _start_workout(self) -> None:
        self.session.start(time.monotonic())
        self._render_exercise()

    def _skip(self) -> None:
        self.session.skip()
        self._render_exercise()

    def _tick(self) -> None:
        if self.session.is_active:
            self.session.tick(time.monotonic())
            self._render_exercise()

    def _finish(self) -> None:
        self._manually_opened = False
        self.title.setText("GitFit")
        self.session.reset()
        self._render_exercise()
        self.hide()
        self.dismissed.emit()
