from __future__ import annotations

import logging
import random
from typing import Callable, Optional

from .exercises import Exercise, ExerciseCategory, random_exercise

log = logging.getLogger(__name__)


class WorkoutSession:
    """
    Countdown for one exercise, driven by tick(now) from the UI timer.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()
        self.exercise: Exercise = random_exercise(rng=self._rng)
        self.remaining_s: int = self.exercise.duration_s
        self.is_active = False
        self.is_complete = False
        self._started_at: Optional[float] = None
        self._complete_cbs: list[Callable[[Exercise], None]] = []

    def on_complete(self, cb: Callable[[Exercise], None]) -> None:
        self._complete_cbs.append(cb)

    def start(self, now: float) -> None:
        self.is_active = True
        self.is_complete = False
        self.remaining_s = self.exercise.duration_s
        self._started_at = now
        log.info("Workout started: %s (%ds)", self.exercise.name, self.exercise.duration_s)

    def tick(self, now: float) -> int:
        if not self.is_active or self._started_at is None:
            return self.remaining_s
        elapsed = int(now - self._started_at)
        self.remaining_s = max(0, self.exercise.duration_s - elapsed)
        if self.remaining_s == 0:
            self.complete()
        return self.remaining_s

    def complete(self) -> None:
        if self.is_complete:
            return
        self.is_active = False
        self.is_complete = True
        self.remaining_s = 0
        self._started_at = None
        log.info("Workout completed: %s", self.exercise.name)
        for cb in list(self._complete_cbs):
            cb(self.exercise)

    def skip(self, category: Optional[ExerciseCategory] = None) -> Exercise:
        log.info("Workout skipped: %s", self.exercise.name)
        return self.next_exercise(category)

    def next_exercise(self, category: Optional[ExerciseCategory] = None) -> Exercise:
        self.exercise = random_exercise(category, rng=self._rng)
        self.remaining_s = self.exercise.duration_s
        self.is_active = False
        self.is_complete = False
        self._started_at = None
        return self.exercise

    def reset(self) -> None:
        self.next_exercise()
