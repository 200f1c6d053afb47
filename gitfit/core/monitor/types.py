from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

from .app_sets import TrackedAppSets

MonitorStatus = Literal["STOPPED", "RUNNING"]
VibeKind = Literal["IDLE", "IN_TRACKED_APP", "WAITING", "WORKOUT_TRIGGERED"]
EventType = Literal["WAITING_STARTED", "WAITING_STOPPED", "WORKOUT_TRIGGERED", "APP_EXITED"]


@dataclass(frozen=True)
class VibeState:
    """
    One detector state. `app` is set for IN_TRACKED_APP and WAITING,
    `elapsed_s` only grows while WAITING.
    """
    kind: VibeKind = "IDLE"
    app: Optional[str] = None
    elapsed_s: float = 0.0

    @classmethod
    def idle(cls) -> "VibeState":
        return cls("IDLE")

    @classmethod
    def in_tracked_app(cls, app: str) -> "VibeState":
        return cls("IN_TRACKED_APP", app=app)

    @classmethod
    def waiting(cls, app: str, elapsed_s: float = 0.0) -> "VibeState":
        return cls("WAITING", app=app, elapsed_s=elapsed_s)

    @classmethod
    def workout_triggered(cls) -> "VibeState":
        return cls("WORKOUT_TRIGGERED")

    @property
    def is_tracked(self) -> bool:
        return self.kind in ("IN_TRACKED_APP", "WAITING")


@dataclass(frozen=True)
class VibeMonitorConfig:
    """Detector thresholds. All durations are seconds."""
    apps: TrackedAppSets = field(default_factory=TrackedAppSets)
    companion_pattern: str = "claude|anthropic"
    idle_threshold_s: float = 3.0
    grace_period_s: float = 1.5
    workout_trigger_s: float = 30.0
    cpu_threshold_pct: float = 5.0
    cpu_sustained_s: float = 2.0
    cpu_sample_interval_s: float = 1.0
    poll_interval_s: float = 0.5
    idle_check_interval_s: float = 0.5

    def __post_init__(self) -> None:
        for name in ("idle_threshold_s", "grace_period_s", "workout_trigger_s",
                     "cpu_threshold_pct", "cpu_sustained_s"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")
        for name in ("cpu_sample_interval_s", "poll_interval_s", "idle_check_interval_s"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be > 0")
        if not self.companion_pattern:
            raise ValueError("companion_pattern must not be empty")


@dataclass
class VibeMonitorState:
    """Read-only snapshot handed to the UI."""
    status: MonitorStatus = "STOPPED"
    vibe: VibeState = field(default_factory=VibeState.idle)
    current_app: Optional[str] = None
    companion_cpu_pct: float = 0.0
    companion_active: bool = False
