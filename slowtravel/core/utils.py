"""
Utility helpers shared across repositories/services.
"""

from __future__ import annotations

import asyncio
import json
import uuid
from datetime import datetime, timedelta, timezone
from typing import Mapping, Optional, TypeVar

from .config import get_settings

T = TypeVar("T")


def clone(value: T) -> T:
    """
    Independent deep copy obtained by serializing to JSON and back.

    Values without a JSON form are stored as their string representation.
    """
    return json.loads(json.dumps(value, ensure_ascii=False, default=str))


def new_id() -> str:
    """Opaque unique identifier for generated records."""
    return str(uuid.uuid4())


def _format_timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def now_iso() -> str:
    """Current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    return _format_timestamp(datetime.now(timezone.utc))


def parse_timestamp(value: str | None) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def next_timestamp(previous: str | None) -> str:
    """
    Return now, or one millisecond after ``previous`` when the clock has not
    moved past it yet, so that ``updatedAt`` always advances.
    """
    now = datetime.now(timezone.utc)
    last = parse_timestamp(previous)
    if last and now <= last:
        now = last + timedelta(milliseconds=1)
    return _format_timestamp(now)


async def simulate_latency(value: T, delay_ms: int | None = None) -> T:
    """Resolve to a deep copy of ``value`` after a fixed delay."""
    delay = get_settings().latency_ms if delay_ms is None else max(0, delay_ms)
    await asyncio.sleep(delay / 1000)
    return clone(value)


def strip_password(user: dict | None) -> dict | None:
    """Copy of a user record without its password field."""
    if not user:
        return None
    return {key: value for key, value in user.items() if key != "password"}


def inbound_copy(value: object) -> dict:
    """Private copy of a caller-supplied mapping; anything else reads as empty."""
    return clone(dict(value)) if isinstance(value, Mapping) else {}
