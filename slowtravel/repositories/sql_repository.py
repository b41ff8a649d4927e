"""Key-value storage medium backed by SQLAlchemy."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete

from slowtravel.db.engine import create_schema, open_session
from slowtravel.db.models import StorageItem


class SQLStorage:
    """Stores each key as one row of ``storage_items`` in the database at ``url``."""

    def __init__(self, url: str) -> None:
        self.url = url
        create_schema(url)

    def get_item(self, key: str) -> Optional[str]:
        with open_session(self.url) as session:
            entity = session.get(StorageItem, key)
            return entity.value if entity else None

    def set_item(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc)
        with open_session(self.url) as session:
            entity = session.get(StorageItem, key)
            if not entity:
                session.add(StorageItem(key=key, value=value, updated_at=now))
            else:
                entity.value = value
                entity.updated_at = now
            session.commit()

    def remove_item(self, key: str) -> None:
        with open_session(self.url) as session:
            session.execute(delete(StorageItem).where(StorageItem.key == key))
            session.commit()
