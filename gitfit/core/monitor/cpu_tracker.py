"""
Debounces companion-process CPU samples into an "actively working" flag.

Slow up, instant down: the flag turns on only after CPU has stayed at or
above the threshold for `sustained_s`, and turns off on the first low sample.
"""

from __future__ import annotations

import logging
from typing import Optional

log = logging.getLogger(__name__)


class CpuSustainTracker:
    def __init__(self, threshold_pct: float, sustained_s: float) -> None:
        self.threshold_pct = threshold_pct
        self.sustained_s = sustained_s
        self.last_cpu_pct: float = 0.0
        self.high_since: Optional[float] = None
        self.active = False

    def reset(self) -> None:
        self.last_cpu_pct = 0.0
        self.high_since = None
        self.active = False

    def sustained_for(self, now: float) -> float:
        if self.high_since is None:
            return 0.0
        return now - self.high_since

    def on_sample(self, cpu_pct: float, now: float) -> bool:
        """Apply one sample taken at `now`. Returns the updated flag."""
        self.last_cpu_pct = cpu_pct

        if cpu_pct >= self.threshold_pct:
            if self.high_since is None:
                self.high_since = now
                log.debug("Companion CPU spike started (%.1f%%)", cpu_pct)
            if now - self.high_since >= self.sustained_s:
                self.active = True
        else:
            if self.high_since is not None:
                log.debug("Companion CPU dropped below threshold (%.1f%%)", cpu_pct)
            self.high_since = None
            self.active = False

        return self.active
