"""
JSON-file storage medium.

The whole file is one object mapping storage keys to serialized values, so a
single file can hold the route/order document, the users and the session.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional
import json
import logging
import threading

logger = logging.getLogger(__name__)


class JsonFileStorage:
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Unreadable storage file %s, starting empty: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Storage file %s is not an object, starting empty", self.path)
            return {}
        return {key: value for key, value in data.items() if isinstance(value, str)}

    def save(self, items: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text(json.dumps(items, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self.load().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            items = self.load()
            items[key] = value
            self.save(items)

    def remove_item(self, key: str) -> None:
        with self._lock:
            items = self.load()
            if key in items:
                del items[key]
                self.save(items)
