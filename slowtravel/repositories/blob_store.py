"""
Whole-document persistence on top of a key-value storage medium.

Each store keeps one JSON document under one key. Reading validates the
stored value through a ``coerce`` function with a defined fallback, so a
missing or corrupted value is replaced by the seed instead of surfacing a
parse error.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, Protocol
import json
import logging
import threading

from slowtravel.core.utils import clone

logger = logging.getLogger(__name__)


class StorageMedium(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class BlobStore:
    """
    Atomic read/write of one serialized document.

    ``coerce`` receives the parsed value and returns the canonical document;
    when the result differs from what was stored, the corrected document is
    written back. Without a medium every read returns a fresh seed and writes
    are dropped.
    """

    def __init__(
        self,
        storage: Optional[StorageMedium],
        key: str,
        seed: Callable[[], Any],
        coerce: Callable[[Any], Any],
    ) -> None:
        self.storage = storage
        self.key = key
        self._seed = seed
        self._coerce = coerce
        self._lock = threading.RLock()

    def seed(self) -> Any:
        return clone(self._seed())

    def read(self) -> Any:
        if self.storage is None:
            return self.seed()
        with self._lock:
            raw = self.storage.get_item(self.key)
            if raw is None:
                seeded = self.seed()
                logger.debug("Seeding %s", self.key)
                self.write(seeded)
                return seeded
            try:
                parsed = json.loads(raw)
            except ValueError:
                logger.warning("Stored value under %s is not valid JSON, re-seeding", self.key)
                seeded = self.seed()
                self.write(seeded)
                return seeded
            document = self._coerce(parsed)
            if document != parsed:
                logger.warning("Stored value under %s was malformed, writing corrected document", self.key)
                self.write(document)
            return document

    def write(self, document: Any) -> None:
        if self.storage is None:
            return
        with self._lock:
            self.storage.set_item(self.key, json.dumps(document, ensure_ascii=False))
        logger.debug("Wrote %s", self.key)

    @contextmanager
    def transaction(self) -> Iterator[Any]:
        """
        Hold the document lock across read-modify-write. The yielded document
        is written back when the block exits normally and discarded when it
        raises.
        """
        with self._lock:
            document = self.read()
            yield document
            self.write(document)
