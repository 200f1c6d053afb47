"""
Menu-bar (system tray) controller. Owns the monitor and routes its events to
the prompt window on the GUI thread.
"""

from __future__ import annotations

import logging
from functools import partial

from PySide6.QtCore import QObject, QTimer, Signal
from PySide6.QtGui import QAction, QActionGroup
from PySide6.QtWidgets import QApplication, QMenu, QStyle, QSystemTrayIcon

from gitfit.core.monitor.cpu_sampler import ProcessCpuSampler
from gitfit.core.monitor.foreground import MacForegroundAppSource
from gitfit.core.monitor.input_events import PynputInputEventSource
from gitfit.core.monitor.vibe_monitor import VibeMonitor
from gitfit.core.prompts.prompt_engine import build_status_text, build_workout_payload
from gitfit.core.workouts.snooze import SnoozeController
from gitfit.shared.config import AppConfig, SNOOZE_PRESETS_MINUTES, WORKOUT_DURATION_PRESETS
from gitfit.shared.store import ConfigStore

from .prompt_window import PromptWindow
from .theme import Theme

log = logging.getLogger(__name__)


class _MonitorBridge(QObject):
    """Carries monitor callbacks (worker threads) onto the GUI thread."""
    event = Signal(dict)
    error = Signal(str)


class TrayController(QObject):
    def __init__(self, app: QApplication) -> None:
        super().__init__()
        self.app = app
        self.store = ConfigStore()
        self.cfg: AppConfig = self.store.load()
        self.snooze = SnoozeController()

        self.monitor = VibeMonitor(
            config=self.cfg.to_monitor_config(),
            foreground=MacForegroundAppSource(),
            sampler=ProcessCpuSampler(),
            input_source=PynputInputEventSource(),
        )
        self._bridge = _MonitorBridge()
        self._bridge.event.connect(self._handle_event)
        self._bridge.error.connect(self._handle_error)
        self.monitor.on_event(self._bridge.event.emit)
        self.monitor.on_error(self._bridge.error.emit)

        self.prompt = PromptWindow(Theme())
        self.prompt.dismissed.connect(self.monitor.reset_waiting)

        self.tray = QSystemTrayIcon(self.app.style().standardIcon(QStyle.SP_ComputerIcon), self)
        self.tray.setToolTip("GitFit")
        self.menu = QMenu()
        self._build_menu()
        self.tray.setContextMenu(self.menu)

        self._status_timer = QTimer(self)
        self._status_timer.timeout.connect(self._refresh_status)
        self._status_timer.start(800)

    def start(self) -> None:
        self.tray.show()
        self.monitor.start(self.cfg.poll_interval_s, self.cfg.idle_check_interval_s)

    def shutdown(self) -> None:
        self.monitor.stop()
        self.tray.hide()

    # ------------------------------------------------------------------
    # menu

    def _build_menu(self) -> None:
        self.menu.clear()

        self.status_action = QAction("Status: Idle", self.menu)
        self.status_action.setEnabled(False)
        self.menu.addAction(self.status_action)
        self.menu.addSeparator()

        show_action = QAction("Show Panel", self.menu)
        show_action.triggered.connect(self.prompt.show_manual)
        self.menu.addAction(show_action)

        snooze_menu = self.menu.addMenu("Snooze")
        for minutes in SNOOZE_PRESETS_MINUTES:
            label = f"{minutes} minutes" if minutes < 60 else f"{minutes // 60} hour{'s' if minutes > 60 else ''}"
            act = snooze_menu.addAction(label)
            act.triggered.connect(partial(self._snooze, minutes))
        snooze_menu.addSeparator()
        tomorrow = snooze_menu.addAction("Until tomorrow")
        tomorrow.triggered.connect(self._snooze_until_tomorrow)

        if self.snooze.snoozed_until is not None:
            resume = QAction("Resume Now", self.menu)
            resume.triggered.connect(self._resume)
            self.menu.addAction(resume)

        self.menu.addSeparator()
        duration_menu = self.menu.addMenu(f"Auto-Respond After ({int(self.cfg.workout_trigger_s)}s)")
        group = QActionGroup(duration_menu)
        for seconds in WORKOUT_DURATION_PRESETS:
            act = duration_menu.addAction(f"{seconds} seconds")
            act.setCheckable(True)
            act.setChecked(int(self.cfg.workout_trigger_s) == seconds)
            act.triggered.connect(partial(self._set_workout_duration, seconds))
            group.addAction(act)

        self.menu.addSeparator()
        quit_action = QAction("Quit GitFit", self.menu)
        quit_action.triggered.connect(self.app.quit)
        self.menu.addAction(quit_action)

    def _refresh_status(self) -> None:
        snoozed_until = self.snooze.snoozed_until if self.snooze.is_snoozed() else None
        text = build_status_text(self.monitor.get_state(), snoozed_until)
        self.status_action.setText(text)
        self.prompt.set_status(text)

    def _snooze(self, minutes: int) -> None:
        self.snooze.snooze(minutes)
        self.prompt.hide_automatic()
        self._build_menu()

    def _snooze_until_tomorrow(self) -> None:
        self.snooze.snooze_until_tomorrow()
        self.prompt.hide_automatic()
        self._build_menu()

    def _resume(self) -> None:
        self.snooze.resume()
        self._build_menu()

    def _set_workout_duration(self, seconds: int) -> None:
        self.cfg.workout_trigger_s = float(seconds)
        self.store.save(self.cfg)
        self.monitor.update_config(self.cfg.to_monitor_config())
        log.info("Workout trigger set to %d seconds", seconds)
        self._build_menu()

    # ------------------------------------------------------------------
    # monitor events (GUI thread)

    def _handle_event(self, evt: dict) -> None:
        t = evt.get("type")
        app = evt.get("app")

        if t == "WAITING_STARTED":
            if self.snooze.is_snoozed():
                log.info("Snoozed - not showing panel")
                return
            self.prompt.set_status(f"Waiting: {app}...")
            self.prompt.show_automatic()
        elif t in ("WAITING_STOPPED", "APP_EXITED"):
            self.prompt.hide_automatic()
        elif t == "WORKOUT_TRIGGERED":
            if self.snooze.is_snoozed():
                return
            if not self.prompt.enter_workout_mode():
                log.info("Exercise in progress - ignoring workout trigger")
                return
            self.prompt.show_automatic()
            if self.cfg.notifications_enabled and QSystemTrayIcon.supportsMessages():
                payload = build_workout_payload(self.prompt.session.exercise, self.cfg.workout_trigger_s)
                self.tray.showMessage(payload["title"], payload["body"], QSystemTrayIcon.Information, 6000)

    def _handle_error(self, msg: str) -> None:
        log.error("Monitor error: %s", msg)
