"""Domain helpers coercing raw input into the canonical shape of each record.

Every function here is total: malformed input degrades to an empty or zero
value instead of raising.
"""
from __future__ import annotations

import math
from typing import Any, Mapping

UNTITLED_ROUTE = "Untitled route"

ROUTE_SNAPSHOT_FIELDS = ("id", "title", "region", "days", "pace", "summary", "tags", "highlight")


def to_text(value: Any) -> str:
    """Trimmed string form of ``value``; ``None`` becomes ``""``."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def to_number(value: Any) -> int | float:
    """Numeric form of ``value``; missing or unparsable input becomes ``0``."""
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            return 0
        try:
            number = float(raw)
        except ValueError:
            return 0
    else:
        return 0
    if math.isnan(number) or math.isinf(number) or number == 0:
        return 0
    return int(number) if number.is_integer() else number


def normalize_tags(tags: Any) -> list[str]:
    """
    Accept a list of values, a comma-separated string or nothing and return
    the trimmed, non-empty tags in their original order.
    """
    if not tags:
        return []
    if isinstance(tags, str):
        items = tags.split(",")
    elif isinstance(tags, (list, tuple)):
        items = tags
    else:
        return []
    cleaned = (to_text(item) for item in items)
    return [tag for tag in cleaned if tag]


def normalize_plan(plan: Any) -> list[dict]:
    """Coerce plan stops to ``{name, note}`` and drop stops without a name."""
    if not isinstance(plan, (list, tuple)):
        return []
    stops = []
    for stop in plan:
        source = stop if isinstance(stop, Mapping) else {}
        name = to_text(source.get("name"))
        if not name:
            continue
        stops.append({"name": name, "note": to_text(source.get("note"))})
    return stops


def pick_route_snapshot(route: Mapping[str, Any]) -> dict:
    """Display fields of a saved route, as embedded in an order."""
    return {field: route.get(field) for field in ROUTE_SNAPSHOT_FIELDS}
