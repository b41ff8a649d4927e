"""Colour theme preference kept next to the session."""
from __future__ import annotations

from typing import Optional

from slowtravel.repositories.blob_store import StorageMedium

THEME_KEY = "react-theme-v1"
THEMES = ("light", "dark")


def normalize_theme(value: object) -> str:
    return "dark" if value == "dark" else "light"


class ThemeStore:
    def __init__(self, storage: Optional[StorageMedium]) -> None:
        self.storage = storage

    def read(self) -> Optional[str]:
        """Stored theme, or None when nothing valid was saved."""
        if self.storage is None:
            return None
        raw = self.storage.get_item(THEME_KEY)
        return raw if raw in THEMES else None

    def write(self, theme: object) -> str:
        value = normalize_theme(theme)
        if self.storage is not None:
            self.storage.set_item(THEME_KEY, value)
        return value

    def initial_theme(self, preferred: Optional[str] = None) -> str:
        """Stored theme first, then the environment's preference, then light."""
        return normalize_theme(self.read() or (preferred if preferred in THEMES else None) or "light")
