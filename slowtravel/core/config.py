"""
Configuration helpers for the slowtravel store.

Exposes a Settings object that reads environment variables (storage backend,
file/database locations, simulated latency, password scheme) so that
repositories/services do not fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

DEFAULT_DATA_FILE = Path(__file__).resolve().parents[2] / "data.json"
STORAGE_BACKENDS = {"json", "sql", "memory", "none"}
PASSWORD_SCHEMES = {"plain", "argon2"}


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    storage_backend: str
    storage_path: Path
    database_url: str
    latency_ms: int
    password_scheme: str
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str | None, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _choice(value: str | None, allowed: set[str], default: str) -> str:
        candidate = (value or "").strip().lower()
        return candidate if candidate in allowed else default

    storage_path = (os.getenv("STORAGE_PATH") or "").strip()
    return Settings(
        storage_backend=_choice(os.getenv("STORAGE_BACKEND"), STORAGE_BACKENDS, "json"),
        storage_path=Path(storage_path) if storage_path else DEFAULT_DATA_FILE,
        database_url=os.getenv("DATABASE_URL", ""),
        latency_ms=max(0, _int(os.getenv("LATENCY_MS"), 120)),
        password_scheme=_choice(os.getenv("PASSWORD_SCHEME"), PASSWORD_SCHEMES, "plain"),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
