"""
Global keyboard/pointer activity via pynput.

Listener callbacks run on pynput's own threads; the subscriber is expected to
take its own lock before touching shared state.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Literal, Optional, Protocol

log = logging.getLogger(__name__)

InputKind = Literal["key", "pointer"]
InputCallback = Callable[[InputKind], None]


class InputEventSource(Protocol):
    def subscribe(self, on_event: InputCallback) -> None:
        ...

    def unsubscribe(self) -> None:
        ...


class PynputInputEventSource:
    """Keyboard press/release count as typing; scroll and click as pointer activity."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._keyboard_listener = None
        self._mouse_listener = None
        self._on_event: Optional[InputCallback] = None

    def subscribe(self, on_event: InputCallback) -> None:
        try:
            from pynput import keyboard, mouse
        except ImportError:
            log.warning("pynput not available, input monitoring disabled")
            return

        with self._lock:
            self._stop_listeners()
            self._on_event = on_event
            try:
                self._keyboard_listener = keyboard.Listener(
                    on_press=self._on_key,
                    on_release=self._on_key,
                )
                self._mouse_listener = mouse.Listener(
                    on_click=self._on_click,
                    on_scroll=self._on_scroll,
                )
                self._keyboard_listener.start()
                self._mouse_listener.start()
                log.debug("Input listeners started")
            except Exception:
                log.exception("Failed to start input listeners (Accessibility permission missing?)")
                self._stop_listeners()

    def unsubscribe(self) -> None:
        with self._lock:
            self._stop_listeners()
            self._on_event = None

    def _stop_listeners(self) -> None:
        for listener in (self._keyboard_listener, self._mouse_listener):
            if listener is not None:
                try:
                    listener.stop()
                except Exception:
                    log.debug("Input listener stop failed", exc_info=True)
        self._keyboard_listener = None
        self._mouse_listener = None

    def _dispatch(self, kind: InputKind) -> None:
        cb = self._on_event
        if cb is not None:
            cb(kind)

    def _on_key(self, key) -> None:
        self._dispatch("key")

    def _on_click(self, x, y, button, pressed) -> None:
        if pressed:
            self._dispatch("pointer")

    def _on_scroll(self, x, y, dx, dy) -> None:
        self._dispatch("pointer")
