"""
Basket routes and travel plans (orders).

Both collections live in one document; every operation reads it, applies
its change inside a transaction and answers with a delayed deep copy, the
way a remote API would.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from slowtravel.core.errors import InvalidInputError, NotFoundError
from slowtravel.core.utils import inbound_copy, new_id, next_timestamp, now_iso, simulate_latency
from slowtravel.domain.normalize import (
    UNTITLED_ROUTE,
    normalize_plan,
    normalize_tags,
    pick_route_snapshot,
    to_number,
    to_text,
)
from slowtravel.repositories.blob_store import BlobStore, StorageMedium

logger = logging.getLogger(__name__)

STORAGE_KEY = "slow-travel-mock-api-v1"

ROUTE_TEXT_FIELDS = ("title", "region", "pace", "summary", "highlight", "description")
ORDER_DATE_FIELDS = ("startDate", "endDate")
PROTECTED_ROUTE_FIELDS = {"id", "createdAt", "updatedAt"}
PROTECTED_ORDER_FIELDS = {"id", "routeId", "route", "createdAt", "updatedAt"}


def _seed() -> dict:
    return {"basketRoutes": [], "orders": []}


def coerce_document(value: Any) -> dict:
    """Keep the collections that are lists; anything else falls back to empty."""
    source = value if isinstance(value, dict) else {}
    routes = source.get("basketRoutes")
    orders = source.get("orders")
    return {
        "basketRoutes": routes if isinstance(routes, list) else [],
        "orders": orders if isinstance(orders, list) else [],
    }


def _find(items: list, record_id: Any) -> int:
    key = to_text(record_id)
    for idx, item in enumerate(items):
        if isinstance(item, dict) and item.get("id") == key:
            return idx
    return -1


def _date_text(value: Any) -> str:
    return to_text(value) if value else ""


class TravelStore:
    """CRUD over the saved routes (``basketRoutes``) and ``orders`` collections."""

    def __init__(self, storage: Optional[StorageMedium], *, latency_ms: int | None = None) -> None:
        self.blob = BlobStore(storage, STORAGE_KEY, _seed, coerce_document)
        self.latency_ms = latency_ms

    async def _respond(self, value):
        return await simulate_latency(value, self.latency_ms)

    # -------------------------------------- routes --------------------------------------
    async def list_routes(self) -> list[dict]:
        return await self._respond(self.blob.read()["basketRoutes"])

    async def get_route(self, route_id: str) -> dict:
        routes = self.blob.read()["basketRoutes"]
        idx = _find(routes, route_id)
        if idx == -1:
            raise NotFoundError("Route not found")
        return await self._respond(routes[idx])

    async def save_route(self, route: Mapping[str, Any] | None) -> dict:
        """
        Save a catalog route into the basket. Saving an id that is already
        present returns the stored record untouched.
        """
        candidate = inbound_copy(route)
        route_id = to_text(candidate.get("id"))
        if not route_id:
            raise InvalidInputError("Cannot save route: missing id")

        with self.blob.transaction() as state:
            idx = _find(state["basketRoutes"], route_id)
            if idx != -1:
                saved = state["basketRoutes"][idx]
            else:
                now = now_iso()
                saved = {
                    "id": route_id,
                    "title": to_text(candidate.get("title")) or UNTITLED_ROUTE,
                    "region": to_text(candidate.get("region")),
                    "days": to_number(candidate.get("days")),
                    "pace": to_text(candidate.get("pace")),
                    "summary": to_text(candidate.get("summary")),
                    "tags": normalize_tags(candidate.get("tags")),
                    "highlight": to_text(candidate.get("highlight")),
                    "description": to_text(candidate.get("description")),
                    "plan": normalize_plan(candidate.get("plan")),
                    "createdAt": now,
                    "updatedAt": now,
                }
                state["basketRoutes"].insert(0, saved)
                logger.info("Saved route %s to basket", route_id)
        return await self._respond(saved)

    async def update_route(self, route_id: str, updates: Mapping[str, Any] | None) -> dict:
        patch = inbound_copy(updates)
        with self.blob.transaction() as state:
            idx = _find(state["basketRoutes"], route_id)
            if idx == -1:
                raise NotFoundError("Route not found")
            current = state["basketRoutes"][idx]
            merged = dict(current)
            merged.update({key: value for key, value in patch.items() if key not in PROTECTED_ROUTE_FIELDS})
            for field in ROUTE_TEXT_FIELDS:
                value = patch.get(field)
                merged[field] = to_text(current.get(field) if value is None else value)
            days = patch.get("days")
            merged["days"] = to_number(current.get("days") if days is None else days)
            merged["tags"] = normalize_tags(patch["tags"]) if "tags" in patch else current.get("tags", [])
            merged["plan"] = normalize_plan(patch["plan"]) if "plan" in patch else current.get("plan", [])
            merged["updatedAt"] = next_timestamp(current.get("updatedAt"))
            state["basketRoutes"][idx] = merged
        logger.info("Updated route %s", merged["id"])
        return await self._respond(merged)

    async def delete_route(self, route_id: str) -> bool:
        """Remove a saved route; orders built from it keep their snapshot."""
        key = to_text(route_id)
        with self.blob.transaction() as state:
            before = len(state["basketRoutes"])
            state["basketRoutes"] = [r for r in state["basketRoutes"] if not (isinstance(r, dict) and r.get("id") == key)]
            removed = before - len(state["basketRoutes"])
        if removed:
            logger.info("Deleted route %s", key)
        return await self._respond(True)

    # -------------------------------------- orders --------------------------------------
    async def list_orders(self) -> list[dict]:
        return await self._respond(self.blob.read()["orders"])

    async def get_order(self, order_id: str) -> dict:
        orders = self.blob.read()["orders"]
        idx = _find(orders, order_id)
        if idx == -1:
            raise NotFoundError("Plan not found")
        return await self._respond(orders[idx])

    async def create_order(self, order: Mapping[str, Any] | None) -> dict:
        """Create a plan for a saved route, embedding a snapshot of that route."""
        fields = inbound_copy(order)
        route_key = to_text(fields.get("routeId"))
        if not route_key:
            raise InvalidInputError("Choose a route")

        with self.blob.transaction() as state:
            idx = _find(state["basketRoutes"], route_key)
            if idx == -1:
                raise NotFoundError("Route not found in the basket")
            now = now_iso()
            created = {
                "id": new_id(),
                "routeId": route_key,
                "route": pick_route_snapshot(state["basketRoutes"][idx]),
                "notes": to_text(fields.get("notes")),
                "startDate": _date_text(fields.get("startDate")),
                "endDate": _date_text(fields.get("endDate")),
                "createdAt": now,
                "updatedAt": now,
            }
            state["orders"].insert(0, created)
        logger.info("Created plan %s for route %s", created["id"], route_key)
        return await self._respond(created)

    async def update_order(self, order_id: str, updates: Mapping[str, Any] | None) -> dict:
        """Change notes and dates; the route snapshot never changes."""
        patch = inbound_copy(updates)
        with self.blob.transaction() as state:
            idx = _find(state["orders"], order_id)
            if idx == -1:
                raise NotFoundError("Plan not found")
            current = state["orders"][idx]
            merged = dict(current)
            merged.update({key: value for key, value in patch.items() if key not in PROTECTED_ORDER_FIELDS})
            merged["notes"] = to_text(patch["notes"]) if "notes" in patch else current.get("notes", "")
            for field in ORDER_DATE_FIELDS:
                merged[field] = _date_text(patch[field]) if field in patch else current.get(field, "")
            merged["updatedAt"] = next_timestamp(current.get("updatedAt"))
            state["orders"][idx] = merged
        logger.info("Updated plan %s", merged["id"])
        return await self._respond(merged)

    async def delete_order(self, order_id: str) -> bool:
        key = to_text(order_id)
        with self.blob.transaction() as state:
            before = len(state["orders"])
            state["orders"] = [o for o in state["orders"] if not (isinstance(o, dict) and o.get("id") == key)]
            removed = before - len(state["orders"])
        if removed:
            logger.info("Deleted plan %s", key)
        return await self._respond(True)
