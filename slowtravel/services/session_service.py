"""Session singleton helpers (read, write, clear the active username)."""
from __future__ import annotations

import json
import logging
from typing import Optional

from slowtravel.domain.accounts import normalize_username
from slowtravel.repositories.blob_store import StorageMedium

logger = logging.getLogger(__name__)

SESSION_KEY = "react-auth-session-v1"


class SessionStore:
    """At most one active session, stored as ``{"username": ...}``."""

    def __init__(self, storage: Optional[StorageMedium]) -> None:
        self.storage = storage

    def read(self) -> Optional[dict]:
        """Return the active session, or None when absent or unreadable."""
        if self.storage is None:
            return None
        raw = self.storage.get_item(SESSION_KEY)
        if not raw:
            return None
        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.warning("Stored session is not valid JSON, ignoring it")
            return None
        username = normalize_username(parsed.get("username") if isinstance(parsed, dict) else None)
        if not username:
            return None
        return {"username": username}

    def write(self, username: str) -> None:
        if self.storage is None:
            return
        value = normalize_username(username)
        if not value:
            return
        self.storage.set_item(SESSION_KEY, json.dumps({"username": value}, ensure_ascii=False))
        logger.info("Session opened for %s", value)

    def clear(self) -> None:
        if self.storage is None:
            return
        self.storage.remove_item(SESSION_KEY)
