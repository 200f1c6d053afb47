from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

log = logging.getLogger(__name__)


class SnoozeController:
    """Suppresses prompts until a wall-clock deadline. Expires on its own."""

    def __init__(self) -> None:
        self.snoozed_until: Optional[datetime] = None

    def snooze(self, minutes: int, now: Optional[datetime] = None) -> datetime:
        if minutes <= 0:
            raise ValueError("snooze minutes must be positive")
        now = now or datetime.now()
        self.snoozed_until = now + timedelta(minutes=minutes)
        log.info("Snoozed until %s", self.snoozed_until.strftime("%H:%M"))
        return self.snoozed_until

    def snooze_until_tomorrow(self, now: Optional[datetime] = None) -> datetime:
        now = now or datetime.now()
        tomorrow = (now + timedelta(days=1)).replace(hour=9, minute=0, second=0, microsecond=0)
        minutes = max(1, int((tomorrow - now).total_seconds() // 60))
        return self.snooze(minutes, now)

    def resume(self) -> None:
        if self.snoozed_until is not None:
            log.info("Resumed from snooze")
        self.snoozed_until = None

    def is_snoozed(self, now: Optional[datetime] = None) -> bool:
        if self.snoozed_until is None:
            return False
        now = now or datetime.now()
        if now >= self.snoozed_until:
            self.resume()
            return False
        return True
