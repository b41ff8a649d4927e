from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import pytest

# Make the slowtravel package importable for local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from slowtravel.core.errors import InvalidInputError, NotFoundError  # noqa: E402
from slowtravel.repositories.memory_storage import MemoryStorage  # noqa: E402
from slowtravel.services.travel_store import STORAGE_KEY, TravelStore  # noqa: E402

FJORD = {
    "id": "fjord",
    "title": " Fjords ",
    "region": "Norway",
    "days": "5",
    "pace": "slow",
    "summary": "Ferries and waterfalls",
    "tags": "sea, hike",
    "highlight": "Naeroyfjord",
    "description": "Five days on the west coast",
    "plan": [{"name": "Bergen", "note": "fish market"}, {"name": "", "note": "dropped"}],
}


def run(coro):
    return asyncio.run(coro)


@pytest.fixture()
def storage():
    return MemoryStorage()


@pytest.fixture()
def store(storage):
    return TravelStore(storage, latency_ms=0)


def test_save_route_normalizes_and_stamps(store):
    saved = run(store.save_route(FJORD))
    assert saved["title"] == "Fjords"
    assert saved["days"] == 5
    assert saved["tags"] == ["sea", "hike"]
    assert saved["plan"] == [{"name": "Bergen", "note": "fish market"}]
    assert saved["createdAt"] == saved["updatedAt"]


def test_save_route_requires_id(store):
    with pytest.raises(InvalidInputError):
        run(store.save_route({"title": "No id"}))
    with pytest.raises(InvalidInputError):
        run(store.save_route(None))


def test_save_route_without_title_gets_placeholder(store):
    saved = run(store.save_route({"id": "x"}))
    assert saved["title"] == "Untitled route"
    assert saved["days"] == 0
    assert saved["tags"] == [] and saved["plan"] == []


def test_save_route_is_idempotent_by_id(store):
    first = run(store.save_route(FJORD))
    again = run(store.save_route({**FJORD, "title": "Changed", "days": 9}))
    assert again == first
    assert len(run(store.list_routes())) == 1


def test_routes_are_listed_newest_first(store):
    run(store.save_route({"id": "a", "title": "A"}))
    run(store.save_route({"id": "b", "title": "B"}))
    assert [r["id"] for r in run(store.list_routes())] == ["b", "a"]


def test_update_route_merges_partial_patch(store):
    saved = run(store.save_route(FJORD))
    updated = run(store.update_route("fjord", {"days": 7}))
    assert updated["days"] == 7
    assert updated["title"] == "Fjords"
    assert updated["tags"] == ["sea", "hike"]
    assert updated["createdAt"] == saved["createdAt"]
    assert updated["updatedAt"] > updated["createdAt"]
    assert run(store.get_route("fjord")) == updated


def test_update_route_normalizes_fields(store):
    run(store.save_route(FJORD))
    updated = run(store.update_route("fjord", {"title": "  Lofoten ", "tags": None, "plan": "bad", "days": "abc"}))
    assert updated["title"] == "Lofoten"
    assert updated["tags"] == []
    assert updated["plan"] == []
    assert updated["days"] == 0


def test_update_route_cannot_rewrite_identity(store):
    saved = run(store.save_route(FJORD))
    updated = run(store.update_route("fjord", {"id": "other", "createdAt": "1999-01-01T00:00:00.000Z"}))
    assert updated["id"] == "fjord"
    assert updated["createdAt"] == saved["createdAt"]


def test_update_missing_route_fails(store):
    with pytest.raises(NotFoundError):
        run(store.update_route("missing", {"days": 1}))
    with pytest.raises(NotFoundError):
        run(store.get_route("missing"))


def test_delete_is_idempotent(store):
    run(store.save_route(FJORD))
    assert run(store.delete_route("missing")) is True
    assert len(run(store.list_routes())) == 1
    assert run(store.delete_route("fjord")) is True
    assert run(store.delete_route("fjord")) is True
    assert run(store.list_routes()) == []
    assert run(store.delete_order("missing")) is True
    assert run(store.list_orders()) == []


def test_create_order_snapshots_route(store):
    run(store.save_route(FJORD))
    order = run(store.create_order({"routeId": "fjord", "notes": " bring boots ", "startDate": "2026-06-01"}))
    assert order["id"]
    assert order["routeId"] == "fjord"
    assert order["notes"] == "bring boots"
    assert order["startDate"] == "2026-06-01"
    assert order["endDate"] == ""
    assert order["route"]["title"] == "Fjords"
    assert "plan" not in order["route"]


def test_create_order_validation(storage, store):
    with pytest.raises(InvalidInputError):
        run(store.create_order({"notes": "x"}))
    with pytest.raises(NotFoundError):
        run(store.create_order({"routeId": "missing-id", "notes": "x"}))
    assert run(store.list_orders()) == []
    assert json.loads(storage.get_item(STORAGE_KEY))["orders"] == []


def test_order_snapshot_survives_route_update(store):
    run(store.save_route(FJORD))
    order = run(store.create_order({"routeId": "fjord"}))
    run(store.update_route("fjord", {"title": "Renamed", "days": 12}))
    stored = run(store.get_order(order["id"]))
    assert stored["route"]["title"] == "Fjords"
    assert stored["route"]["days"] == 5


def test_deleting_route_keeps_orders(store):
    run(store.save_route(FJORD))
    order = run(store.create_order({"routeId": "fjord"}))
    run(store.delete_route("fjord"))
    assert run(store.get_order(order["id"]))["route"]["id"] == "fjord"
    assert len(run(store.list_orders())) == 1


def test_update_order_touches_notes_and_dates_only(store):
    run(store.save_route(FJORD))
    order = run(store.create_order({"routeId": "fjord", "notes": "a", "startDate": "2026-06-01", "endDate": "2026-06-05"}))
    updated = run(store.update_order(order["id"], {"endDate": "", "routeId": "other", "route": {}}))
    assert updated["notes"] == "a"
    assert updated["startDate"] == "2026-06-01"
    assert updated["endDate"] == ""
    assert updated["routeId"] == "fjord"
    assert updated["route"] == order["route"]
    assert updated["updatedAt"] > order["updatedAt"]

    updated = run(store.update_order(order["id"], {"notes": "  new notes "}))
    assert updated["notes"] == "new notes"
    assert updated["endDate"] == ""


def test_update_missing_order_fails(store):
    with pytest.raises(NotFoundError):
        run(store.update_order("nope", {"notes": "x"}))
    with pytest.raises(NotFoundError):
        run(store.get_order("nope"))


def test_orders_are_listed_newest_first(store):
    run(store.save_route(FJORD))
    first = run(store.create_order({"routeId": "fjord"}))
    second = run(store.create_order({"routeId": "fjord"}))
    assert first["id"] != second["id"]
    assert [o["id"] for o in run(store.list_orders())] == [second["id"], first["id"]]


def test_returned_records_do_not_alias_state(store):
    candidate = dict(FJORD, tags=["sea"])
    saved = run(store.save_route(candidate))
    candidate["tags"].append("mutated")
    saved["tags"].append("mutated")
    assert run(store.get_route("fjord"))["tags"] == ["sea"]


def test_state_survives_a_new_store_on_the_same_medium(storage, store):
    run(store.save_route(FJORD))
    assert run(TravelStore(storage, latency_ms=0).get_route("fjord"))["title"] == "Fjords"


def test_without_medium_every_read_starts_empty():
    store = TravelStore(None, latency_ms=0)
    saved = run(store.save_route(FJORD))
    assert saved["id"] == "fjord"
    assert run(store.list_routes()) == []


def test_latency_resolves_after_delay(storage):
    store = TravelStore(storage, latency_ms=5)
    assert run(store.list_routes()) == []


def test_overlapping_mutations_all_land(storage):
    store = TravelStore(storage, latency_ms=5)

    async def overlap():
        await asyncio.gather(*(store.save_route({"id": f"r{n}", "title": f"R{n}"}) for n in range(5)))
        await asyncio.gather(*(store.create_order({"routeId": f"r{n}", "notes": str(n)}) for n in range(5)))
        return await store.list_routes(), await store.list_orders()

    routes, orders = run(overlap())
    assert {r["id"] for r in routes} == {f"r{n}" for n in range(5)}
    assert sorted(o["notes"] for o in orders) == [str(n) for n in range(5)]


def test_update_order_with_null_notes_clears_them(store):
    run(store.save_route(FJORD))
    order = run(store.create_order({"routeId": "fjord", "notes": "boots"}))
    assert run(store.update_order(order["id"], {"notes": None}))["notes"] == ""
