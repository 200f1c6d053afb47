from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable

# AI-native apps: being frontmost is enough.
DEFAULT_DIRECT_APPS = ("Claude", "ChatGPT")

# IDEs and terminals only count while the companion CLI is busy.
DEFAULT_IDE_APPS = (
    "Code",
    "Visual Studio Code",
    "VSCodium",
    "Cursor",
    "IntelliJ IDEA",
    "WebStorm",
    "PhpStorm",
    "PyCharm",
    "RubyMine",
    "GoLand",
    "Rider",
    "CLion",
    "DataGrip",
    "Android Studio",
    "Fleet",
    "Zed",
    "Nova",
    "Antigravity",
)

DEFAULT_TERMINAL_APPS = (
    "Terminal",
    "iTerm2",
    "Ghostty",
    "Warp",
    "Alacritty",
    "kitty",
    "Hyper",
    "WezTerm",
    "Rio",
    "Tabby",
)


def _normalize(names: Iterable[str]) -> FrozenSet[str]:
    return frozenset(n.strip().lower() for n in names if n and n.strip())


@dataclass(frozen=True)
class TrackedAppSets:
    """Lower-cased app name sets used for case-insensitive membership checks."""
    direct: FrozenSet[str] = field(default_factory=lambda: _normalize(DEFAULT_DIRECT_APPS))
    ide: FrozenSet[str] = field(default_factory=lambda: _normalize(DEFAULT_IDE_APPS))
    terminal: FrozenSet[str] = field(default_factory=lambda: _normalize(DEFAULT_TERMINAL_APPS))

    @classmethod
    def from_names(
        cls,
        direct: Iterable[str] = DEFAULT_DIRECT_APPS,
        ide: Iterable[str] = DEFAULT_IDE_APPS,
        terminal: Iterable[str] = DEFAULT_TERMINAL_APPS,
    ) -> "TrackedAppSets":
        return cls(direct=_normalize(direct), ide=_normalize(ide), terminal=_normalize(terminal))

    def is_direct(self, app_name: str) -> bool:
        return app_name.strip().lower() in self.direct

    def needs_companion(self, app_name: str) -> bool:
        key = app_name.strip().lower()
        return key in self.ide or key in self.terminal

    def is_supported(self, app_name: str) -> bool:
        return self.is_direct(app_name) or self.needs_companion(app_name)
