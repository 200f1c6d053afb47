"""
Frontmost application lookup (macOS).
Uses the AppKit NSWorkspace API from pyobjc.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

log = logging.getLogger(__name__)


class ForegroundAppSource(Protocol):
    def frontmost_app_name(self) -> Optional[str]:
        """Localized name of the active app, or None when it can't be read."""
        ...


class MacForegroundAppSource:
    def __init__(self) -> None:
        self._available = True
        try:
            from AppKit import NSWorkspace
            self._NSWorkspace = NSWorkspace
        except ImportError:
            log.warning("AppKit not available, frontmost app detection disabled")
            self._available = False

    def frontmost_app_name(self) -> Optional[str]:
        if not self._available:
            return None

        try:
            app = self._NSWorkspace.sharedWorkspace().frontmostApplication()
            if app is None:
                return None
            name = app.localizedName()
            return str(name) if name else None
        except Exception as e:
            log.debug(f"Frontmost app query failed: {e}")
            return None
