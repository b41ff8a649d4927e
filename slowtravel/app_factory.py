"""Entry point wiring the storage medium chosen in Settings to the stores."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
import logging

from slowtravel.core.config import Settings, get_settings
from slowtravel.repositories.blob_store import StorageMedium
from slowtravel.repositories.json_storage import JsonFileStorage
from slowtravel.repositories.memory_storage import MemoryStorage
from slowtravel.services.auth_service import AuthService
from slowtravel.services.theme_service import ThemeStore
from slowtravel.services.travel_store import TravelStore

logger = logging.getLogger(__name__)


@dataclass
class Stores:
    travel: TravelStore
    auth: AuthService
    theme: ThemeStore


def create_storage(settings: Settings | None = None) -> Optional[StorageMedium]:
    """Build the medium named by STORAGE_BACKEND; ``none`` disables persistence."""
    settings = settings or get_settings()
    backend = settings.storage_backend
    if backend == "sql":
        from slowtravel.repositories.sql_repository import SQLStorage

        return SQLStorage(settings.database_url)
    if backend == "memory":
        return MemoryStorage()
    if backend == "none":
        logger.warning("No storage medium configured; data will not be persisted")
        return None
    return JsonFileStorage(settings.storage_path)


def create_stores(storage: Optional[StorageMedium] = None, settings: Settings | None = None) -> Stores:
    """
    Construct the stores once per process around one shared medium. Pass
    ``storage`` to inject a medium instead of building it from Settings.
    """
    settings = settings or get_settings()
    medium = storage if storage is not None else create_storage(settings)
    logger.info("Stores ready (backend=%s)", type(medium).__name__ if medium is not None else "none")
    return Stores(
        travel=TravelStore(medium, latency_ms=settings.latency_ms),
        auth=AuthService(medium, latency_ms=settings.latency_ms, password_scheme=settings.password_scheme),
        theme=ThemeStore(medium),
    )
