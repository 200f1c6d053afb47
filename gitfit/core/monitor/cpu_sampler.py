"""
Companion-process CPU sampler using psutil.

Sums cpu_percent across every process whose name or command line matches the
companion pattern (by default the Claude CLI and other Anthropic tooling).
Handles failures gracefully (returns 0.0) without crashing.
"""

from __future__ import annotations

import logging
import re
import time
from typing import Dict, Optional, Protocol

import psutil

log = logging.getLogger(__name__)


class CpuSampler(Protocol):
    def sample(self, pattern: str) -> float:
        """Return summed CPU percent of processes matching `pattern`. Blocking."""
        ...


class ProcessCpuSampler:
    """
    psutil-based sampler.

    psutil's per-process cpu_percent() is measured against the previous call on
    the same Process object, so matched processes are cached across samples.
    The first sample of a newly seen process primes it and contributes 0.
    """

    def __init__(self, settle_s: float = 0.1) -> None:
        self._settle_s = settle_s
        self._procs: Dict[int, psutil.Process] = {}
        self._compiled: Optional[re.Pattern[str]] = None
        self._compiled_src: Optional[str] = None

    def _regex(self, pattern: str) -> re.Pattern[str]:
        if self._compiled is None or self._compiled_src != pattern:
            self._compiled = re.compile(pattern, re.IGNORECASE)
            self._compiled_src = pattern
            self._procs.clear()
        return self._compiled

    def _matches(self, rx: re.Pattern[str], proc: psutil.Process) -> bool:
        name = proc.info.get("name") or ""
        cmdline = " ".join(proc.info.get("cmdline") or [])
        return bool(rx.search(name) or rx.search(cmdline))

    def sample(self, pattern: str) -> float:
        try:
            rx = self._regex(pattern)
        except re.error as e:
            log.warning(f"Invalid companion pattern {pattern!r}: {e}")
            return 0.0

        try:
            seen: Dict[int, psutil.Process] = {}
            for proc in psutil.process_iter(attrs=["name", "cmdline"]):
                try:
                    if not self._matches(rx, proc):
                        continue
                    cached = self._procs.get(proc.pid)
                    if cached is None:
                        proc.cpu_percent(None)
                        cached = proc
                    seen[proc.pid] = cached
                except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                    continue

            if not self._procs and seen and self._settle_s > 0:
                # Nothing primed yet; give the counters a short window.
                time.sleep(self._settle_s)

            total = 0.0
            for pid, proc in seen.items():
                try:
                    total += proc.cpu_percent(None)
                except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                    continue

            self._procs = seen
            log.debug(f"Companion CPU {total:.1f}% across {len(seen)} process(es)")
            return total
        except Exception as e:
            log.debug(f"Companion CPU sample failed: {e}")
            return 0.0
