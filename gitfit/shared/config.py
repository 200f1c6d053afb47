from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from gitfit.core.monitor.app_sets import DEFAULT_DIRECT_APPS, DEFAULT_IDE_APPS, DEFAULT_TERMINAL_APPS

WORKOUT_DURATION_PRESETS = (15, 30, 45, 60, 90, 120)
SNOOZE_PRESETS_MINUTES = (15, 30, 60, 120)


class AppConfig(BaseModel):
    direct_apps: List[str] = Field(default_factory=lambda: list(DEFAULT_DIRECT_APPS))
    ide_apps: List[str] = Field(default_factory=lambda: list(DEFAULT_IDE_APPS))
    terminal_apps: List[str] = Field(default_factory=lambda: list(DEFAULT_TERMINAL_APPS))
    companion_pattern: str = Field(default="claude|anthropic", min_length=1)

    idle_threshold_s: float = Field(default=3.0, ge=0)
    grace_period_s: float = Field(default=1.5, ge=0)
    workout_trigger_s: float = Field(default=30.0, ge=0)
    cpu_threshold_pct: float = Field(default=5.0, ge=0)
    cpu_sustained_s: float = Field(default=2.0, ge=0)
    cpu_sample_interval_s: float = Field(default=1.0, gt=0)
    poll_interval_s: float = Field(default=0.5, gt=0)
    idle_check_interval_s: float = Field(default=0.5, gt=0)

    notifications_enabled: bool = True

    def to_monitor_config(self) -> dict:
        return {
            "direct_apps": self.direct_apps,
            "ide_apps": self.ide_apps,
            "terminal_apps": self.terminal_apps,
            "companion_pattern": self.companion_pattern,
            "idle_threshold_s": self.idle_threshold_s,
            "grace_period_s": self.grace_period_s,
            "workout_trigger_s": self.workout_trigger_s,
            "cpu_threshold_pct": self.cpu_threshold_pct,
            "cpu_sustained_s": self.cpu_sustained_s,
            "cpu_sample_interval_s": self.cpu_sample_interval_s,
            "poll_interval_s": self.poll_interval_s,
            "idle_check_interval_s": self.idle_check_interval_s,
        }
