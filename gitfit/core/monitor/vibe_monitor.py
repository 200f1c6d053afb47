"""
Detects when the user is waiting on an AI coding tool.

State machine: IDLE -> IN_TRACKED_APP -> WAITING -> WORKOUT_TRIGGERED

Signals:
  - frontmost app name (polled)
  - time since last keyboard/pointer input (pushed by the input source)
  - sustained companion-process CPU (sampled asynchronously, rate limited)
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import replace
from typing import Callable, List, Optional

from .app_sets import DEFAULT_DIRECT_APPS, DEFAULT_IDE_APPS, DEFAULT_TERMINAL_APPS, TrackedAppSets
from .cpu_sampler import CpuSampler
from .cpu_tracker import CpuSustainTracker
from .foreground import ForegroundAppSource
from .input_events import InputEventSource, InputKind
from .types import EventType, MonitorStatus, VibeMonitorConfig, VibeMonitorState, VibeState

log = logging.getLogger(__name__)


def _now_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%S", time.localtime())


class VibeMonitor:
    """
    Background monitor that emits WAITING_STARTED / WAITING_STOPPED /
    WORKOUT_TRIGGERED / APP_EXITED.

    Every mutation (both loops, input callbacks, CPU replies, reset_waiting)
    runs under one re-entrant lock, so subscribers may call back into the
    monitor from inside an event handler.
    """

    def __init__(
        self,
        config: dict,
        foreground: Optional[ForegroundAppSource] = None,
        sampler: Optional[CpuSampler] = None,
        input_source: Optional[InputEventSource] = None,
        clock: Callable[[], float] = time.monotonic,
        executor: Optional[Executor] = None,
    ) -> None:
        self._cfg = self._parse_config(config)
        self._foreground = foreground
        self._sampler = sampler
        self._input = input_source
        self._clock = clock
        self._lock = threading.RLock()

        self._status: MonitorStatus = "STOPPED"
        self._vibe = VibeState.idle()
        self._current_app: Optional[str] = None
        self._in_tracked = False
        self._last_activity = clock()
        self._last_typing_end = clock()
        self._waiting_start: Optional[float] = None

        self._tracker = CpuSustainTracker(self._cfg.cpu_threshold_pct, self._cfg.cpu_sustained_s)
        self._last_sample_request: Optional[float] = None
        self._sample_pending = False
        self._evaluating = False
        # Bumped on start/stop so CPU replies from a previous run are dropped.
        self._generation = 0

        self._event_cbs: List[Callable[[dict], None]] = []
        self._error_cb: Optional[Callable[[str], None]] = None

        self._own_executor = executor is None
        self._executor: Optional[Executor] = executor
        self._threads: List[threading.Thread] = []
        self._stop_evt = threading.Event()

    @staticmethod
    def _parse_config(config: dict) -> VibeMonitorConfig:
        """Parse config dict into VibeMonitorConfig."""
        return VibeMonitorConfig(
            apps=TrackedAppSets.from_names(
                direct=config.get("direct_apps", DEFAULT_DIRECT_APPS),
                ide=config.get("ide_apps", DEFAULT_IDE_APPS),
                terminal=config.get("terminal_apps", DEFAULT_TERMINAL_APPS),
            ),
            companion_pattern=config.get("companion_pattern", "claude|anthropic"),
            idle_threshold_s=config.get("idle_threshold_s", 3.0),
            grace_period_s=config.get("grace_period_s", 1.5),
            workout_trigger_s=config.get("workout_trigger_s", 30.0),
            cpu_threshold_pct=config.get("cpu_threshold_pct", 5.0),
            cpu_sustained_s=config.get("cpu_sustained_s", 2.0),
            cpu_sample_interval_s=config.get("cpu_sample_interval_s", 1.0),
            poll_interval_s=config.get("poll_interval_s", 0.5),
            idle_check_interval_s=config.get("idle_check_interval_s", 0.5),
        )

    def on_event(self, cb: Callable[[dict], None]) -> None:
        self._event_cbs.append(cb)

    def on_error(self, cb: Callable[[str], None]) -> None:
        self._error_cb = cb

    def update_config(self, config: dict) -> None:
        cfg = self._parse_config(config)
        with self._lock:
            self._cfg = cfg
            self._tracker.threshold_pct = cfg.cpu_threshold_pct
            self._tracker.sustained_s = cfg.cpu_sustained_s

    def get_config(self) -> VibeMonitorConfig:
        with self._lock:
            return self._cfg

    def get_state(self) -> VibeMonitorState:
        with self._lock:
            return VibeMonitorState(
                status=self._status,
                vibe=self._vibe,
                current_app=self._current_app,
                companion_cpu_pct=self._tracker.last_cpu_pct,
                companion_active=self._tracker.active,
            )

    # ------------------------------------------------------------------
    # lifecycle

    def start(self, poll_interval: Optional[float] = None, idle_check_interval: Optional[float] = None) -> None:
        with self._lock:
            restarting = self._status == "RUNNING"
        if restarting:
            self.stop()

        with self._lock:
            if poll_interval is not None:
                self._cfg = replace(self._cfg, poll_interval_s=poll_interval)
            if idle_check_interval is not None:
                self._cfg = replace(self._cfg, idle_check_interval_s=idle_check_interval)

            now = self._clock()
            self._status = "RUNNING"
            self._generation += 1
            self._vibe = VibeState.idle()
            self._current_app = None
            self._in_tracked = False
            self._last_activity = now
            self._last_typing_end = now
            self._waiting_start = None
            self._tracker.reset()
            self._last_sample_request = None
            self._sample_pending = False
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="gitfit-cpu")
            self._stop_evt = threading.Event()
            stop_evt = self._stop_evt
            cfg = self._cfg

        if self._input is not None:
            self._input.subscribe(self._on_input)

        log.info(
            "Monitoring started: idle %.1fs, grace %.1fs, workout after %.0fs, companion CPU >= %.1f%% for %.1fs",
            cfg.idle_threshold_s, cfg.grace_period_s, cfg.workout_trigger_s,
            cfg.cpu_threshold_pct, cfg.cpu_sustained_s,
        )

        self.tick_foreground()

        threads = [
            threading.Thread(
                target=self._run, args=(self.tick_foreground, "poll_interval_s", stop_evt),
                name="VibeMonitor-poll", daemon=True,
            ),
            threading.Thread(
                target=self._run, args=(self.tick_idle, "idle_check_interval_s", stop_evt),
                name="VibeMonitor-idle", daemon=True,
            ),
        ]
        with self._lock:
            self._threads = threads
        for t in threads:
            t.start()

    def stop(self) -> None:
        self._stop_evt.set()
        with self._lock:
            was_running = self._status == "RUNNING"
            self._status = "STOPPED"
            self._generation += 1
            self._vibe = VibeState.idle()
            self._current_app = None
            self._in_tracked = False
            self._waiting_start = None
            self._tracker.reset()
            self._sample_pending = False
            threads = self._threads
            self._threads = []
            executor = self._executor if self._own_executor else None
            if self._own_executor:
                self._executor = None

        if self._input is not None:
            self._input.unsubscribe()
        if executor is not None:
            executor.shutdown(wait=False, cancel_futures=True)

        current = threading.current_thread()
        for t in threads:
            if t is not current:
                t.join(timeout=2.0)

        if was_running:
            log.info("Monitoring stopped")

    def _run(self, tick: Callable[[], None], interval_attr: str, stop_evt: threading.Event) -> None:
        while True:
            with self._lock:
                interval = getattr(self._cfg, interval_attr)
            if stop_evt.wait(interval):
                return
            try:
                tick()
            except Exception as e:
                log.exception("Monitor loop error")
                self._emit_error(str(e))
                if stop_evt.wait(1.0):
                    return

    # ------------------------------------------------------------------
    # public actions

    def reset_waiting(self) -> None:
        """Drop any waiting progress, e.g. after the user skipped or finished a workout."""
        with self._lock:
            if self._status != "RUNNING":
                return
            self._clear_waiting()
            self._last_typing_end = self._clock()
            self._vibe = self._resting_state()

    def record_input_activity(self, typing: bool = True) -> None:
        """
        Register a keystroke (typing=True) or pointer action. Pointer activity
        refreshes idle time but leaves the grace period alone.
        """
        with self._lock:
            if self._status != "RUNNING":
                return
            now = self._clock()
            self._last_activity = now
            if typing:
                self._last_typing_end = now

            if self._vibe.kind == "WAITING":
                log.info("Input detected, stopping wait timer")
                self._clear_waiting()
                self._vibe = self._resting_state()
                self._emit("WAITING_STOPPED", self._current_app, "INPUT")
            elif self._vibe.kind == "WORKOUT_TRIGGERED":
                log.info("Input detected, cancelling workout prompt")
                self._clear_waiting()
                self._vibe = self._resting_state()
                self._emit("WAITING_STOPPED", self._current_app, "INPUT_DURING_WORKOUT")

    def _on_input(self, kind: InputKind) -> None:
        self.record_input_activity(typing=(kind == "key"))

    # ------------------------------------------------------------------
    # ticks

    def tick_foreground(self) -> None:
        """Re-evaluate the frontmost app and the companion flag."""
        with self._lock:
            if self._status != "RUNNING":
                return

        name: Optional[str] = None
        if self._foreground is not None:
            try:
                name = self._foreground.frontmost_app_name()
            except Exception as e:
                log.debug(f"Foreground source failed: {e}")
                name = None
        if not name:
            # Hold the previous state on transient failures.
            return

        with self._lock:
            if self._status != "RUNNING":
                return
            self._evaluate(name)

    def tick_idle(self) -> None:
        """Re-evaluate elapsed idle time while a tracked app is frontmost."""
        with self._lock:
            if self._status != "RUNNING" or not self._vibe.is_tracked:
                return

            cfg = self._cfg
            now = self._clock()
            idle_time = now - self._last_activity
            since_typing = now - self._last_typing_end

            # Right after typing the tool may not have started thinking yet.
            if since_typing < cfg.grace_period_s:
                return
            if idle_time < cfg.idle_threshold_s:
                return

            app = self._vibe.app or self._current_app or ""
            if self._vibe.kind != "WAITING":
                self._waiting_start = now
                self._vibe = VibeState.waiting(app, 0.0)
                log.info(
                    "Waiting detected in %s (idle %.1fs, grace %.1fs)",
                    app, cfg.idle_threshold_s, cfg.grace_period_s,
                )
                self._emit("WAITING_STARTED", app, f"idle {idle_time:.1f}s >= {cfg.idle_threshold_s}s")
                return

            if self._waiting_start is None:
                self._waiting_start = now
            elapsed = max(self._vibe.elapsed_s, now - self._waiting_start)
            self._vibe = VibeState.waiting(app, elapsed)

            if elapsed >= cfg.workout_trigger_s:
                self._vibe = VibeState.workout_triggered()
                self._waiting_start = None
                log.info("Workout triggered after %ds of waiting in %s", int(elapsed), app)
                self._emit("WORKOUT_TRIGGERED", app, f"waited {elapsed:.0f}s >= {cfg.workout_trigger_s:.0f}s")

    # ------------------------------------------------------------------
    # internals (call with the lock held)

    def _evaluate(self, name: str) -> None:
        cfg = self._cfg
        now = self._clock()
        prev_tracked = self._in_tracked
        prev_app = self._current_app
        self._current_app = name

        self._evaluating = True
        try:
            companion_active = self._refresh_companion(now)
        finally:
            self._evaluating = False

        tracked = cfg.apps.is_direct(name) or (cfg.apps.needs_companion(name) and companion_active)
        self._in_tracked = tracked

        if tracked and not prev_tracked:
            self._vibe = VibeState.in_tracked_app(name)
            self._last_activity = now
            self._last_typing_end = now
            reason = "direct" if cfg.apps.is_direct(name) else "companion active"
            log.info("ENTERED %s (%s)", name, reason)

        elif prev_tracked and not tracked:
            was_waiting = self._vibe.kind == "WAITING"
            self._clear_waiting()
            self._vibe = VibeState.idle()
            log.info("EXITED %s", prev_app)
            if was_waiting:
                self._emit("WAITING_STOPPED", prev_app, "APP_EXITED")
            self._emit("APP_EXITED", prev_app, f"now in {name}")

        elif tracked and name != prev_app:
            was_waiting = self._vibe.kind == "WAITING"
            self._clear_waiting()
            self._vibe = VibeState.in_tracked_app(name)
            self._last_activity = now
            self._last_typing_end = now
            log.info("SWITCHED %s -> %s", prev_app, name)
            if was_waiting:
                self._emit("WAITING_STOPPED", prev_app, "APP_SWITCHED")

    def _refresh_companion(self, now: float) -> bool:
        cfg = self._cfg
        if self._sampler is None or self._executor is None:
            return self._tracker.active

        due = (
            self._last_sample_request is None
            or now - self._last_sample_request >= cfg.cpu_sample_interval_s
        )
        if due and not self._sample_pending:
            self._last_sample_request = now
            self._sample_pending = True
            generation = self._generation
            sampler = self._sampler
            pattern = cfg.companion_pattern
            try:
                fut = self._executor.submit(sampler.sample, pattern)
            except RuntimeError as e:
                # Executor already shut down by a concurrent stop().
                log.debug(f"CPU sample not scheduled: {e}")
                self._sample_pending = False
            else:
                fut.add_done_callback(lambda f: self._on_cpu_sample(generation, f))

        return self._tracker.active

    def _on_cpu_sample(self, generation: int, fut: Future) -> None:
        try:
            cpu = float(fut.result())
        except Exception as e:
            log.debug(f"CPU sample failed, treating as 0%: {e}")
            cpu = 0.0

        with self._lock:
            if self._status != "RUNNING" or generation != self._generation:
                return
            self._sample_pending = False
            was_active = self._tracker.active
            # Applied at arrival time, not request time.
            now = self._clock()
            active = self._tracker.on_sample(cpu, now)
            log.debug(
                "Companion CPU %5.1f%% | threshold %.1f%% | sustained %.1fs/%.1fs | active %s",
                cpu, self._tracker.threshold_pct, self._tracker.sustained_for(now),
                self._tracker.sustained_s, active,
            )
            if active == was_active:
                return
            log.info("Companion %s (CPU %.1f%%)", "ACTIVELY WORKING" if active else "idle or stopped", cpu)
            if not self._evaluating and self._current_app is not None:
                self._evaluate(self._current_app)

    def _clear_waiting(self) -> None:
        self._waiting_start = None

    def _resting_state(self) -> VibeState:
        if self._in_tracked and self._current_app:
            return VibeState.in_tracked_app(self._current_app)
        return VibeState.idle()

    def _emit(self, event_type: EventType, app: Optional[str], reason: Optional[str]) -> None:
        evt = {"type": event_type, "app": app, "at": _now_iso(), "reason": reason}
        for cb in list(self._event_cbs):
            try:
                cb(evt)
            except Exception:
                log.exception("Event subscriber failed for %s", event_type)

    def _emit_error(self, msg: str) -> None:
        if self._error_cb:
            self._error_cb(msg)
