import pytest
import httpx
from asgi_lifespan import LifespanManager

from app.core.taxonomy import ACCESSORY_SUBCATEGORIES
from app.main import app
from app.auth import deps as auth_deps
from app.auth.jwt import mint_access

API_BASE = "http://test"

SNAPSHOT = {
    "scenarios": [
        {"id": "s1", "name": "Office Work", "frequency": "5 times per week"},
        {"id": "s2", "name": "Social Outings", "frequency": "1 time per week"},
    ],
    "items": [
        {"id": "t1", "category": "top", "scenarios": ["s1"]},
        {"id": "t2", "category": "top", "scenarios": ["s1"]},
        {"id": "t3", "category": "top", "scenarios": ["s1"]},
        {"id": "bag", "category": "accessory", "subcategory": "Handbag"},
        {"id": "coat", "category": "outerwear", "season": ["winter"]},
    ],
}


@pytest.fixture
async def client():
    async with LifespanManager(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url=API_BASE) as ac:
            yield ac


@pytest.mark.asyncio
async def test_calculate_single_category(client: httpx.AsyncClient):
    body = {**SNAPSHOT, "season": "spring/fall", "category": "top", "scenario_id": "s1"}
    resp = await client.post("/v1/coverage/calculate", json=body)
    assert resp.status_code == 200
    data = resp.json()
    assert data["kind"] == "single"
    [record] = data["records"]
    assert record["current_items"] == 3
    assert record["needed_items_ideal"] == 8
    assert record["gap_type"] == "critical"
    assert record["priority_level"] == 1


@pytest.mark.asyncio
async def test_calculate_accessories(client: httpx.AsyncClient):
    body = {**SNAPSHOT, "season": "winter", "category": "accessory"}
    resp = await client.post("/v1/coverage/calculate", json=body)
    assert resp.status_code == 200
    data = resp.json()
    assert data["kind"] == "subcategories"
    assert len(data["records"]) == 9
    bag = next(r for r in data["records"] if r["subcategory"] == "Bag")
    assert bag["current_items"] == 1
    assert bag["season"] == "all_seasons"


@pytest.mark.asyncio
async def test_calculate_rejects_bad_input(client: httpx.AsyncClient):
    resp = await client.post(
        "/v1/coverage/calculate", json={**SNAPSHOT, "season": "monsoon", "category": "top", "scenario_id": "s1"}
    )
    assert resp.status_code == 400

    resp = await client.post(
        "/v1/coverage/calculate", json={**SNAPSHOT, "season": "summer", "category": "top", "scenario_id": "nope"}
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "scenario_not_in_snapshot"


@pytest.mark.asyncio
async def test_initialize_then_read(client: httpx.AsyncClient, store):
    resp = await client.post("/v1/coverage/initialize", json=SNAPSHOT)
    assert resp.status_code == 200
    assert resp.json()["count"] == 2 * 3 * 15

    resp = await client.get("/v1/coverage/categories/top", params={"season": "summer"})
    assert resp.status_code == 200
    assert resp.json()["count"] == 2

    resp = await client.get("/v1/coverage/outerwear", params={"season": "winter"})
    assert resp.json()["records"][0]["current_items"] == 1

    resp = await client.get("/v1/coverage/accessories")
    assert resp.status_code == 200
    # 4 seasonal subcategories x 3 seasons plus 5 all-season rows
    assert resp.json()["count"] == 17

    resp = await client.get("/v1/coverage/accessories", params={"season": "winter"})
    assert {r["subcategory"] for r in resp.json()["records"]} == set(ACCESSORY_SUBCATEGORIES)

    resp = await client.get("/v1/coverage/critical", params={"limit": 3})
    assert resp.status_code == 200
    records = resp.json()["records"]
    assert len(records) == 3
    assert all(r["gap_type"] == "critical" for r in records)


@pytest.mark.asyncio
async def test_category_query_backfills(client: httpx.AsyncClient, store):
    resp = await client.post("/v1/coverage/categories/bottom/query", params={"season": "summer"}, json=SNAPSHOT)
    assert resp.status_code == 200
    assert resp.json()["count"] == 2
    assert len(store) == 2


@pytest.mark.asyncio
async def test_accessory_category_view_is_rejected(client: httpx.AsyncClient):
    resp = await client.get("/v1/coverage/categories/accessory")
    assert resp.status_code == 400
    resp = await client.get("/v1/coverage/categories/hats")
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_lifestyle(client: httpx.AsyncClient):
    resp = await client.post(
        "/v1/coverage/lifestyle",
        json={"scenarios": [{"id": "s1", "name": "Remote Work", "frequency": "daily"}]},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["type"] == "indoor_focused"
    assert data["confidence"] == 0.9
    assert data["bags"] == {"min": 3, "ideal": 4, "max": 5}


@pytest.mark.asyncio
async def test_requires_bearer_token(client: httpx.AsyncClient):
    app.dependency_overrides.pop(auth_deps.get_current_user_id, None)
    resp = await client.get("/v1/coverage/critical")
    assert resp.status_code == 401

    token = mint_access("token-user")
    resp = await client.get("/v1/coverage/critical", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json()["count"] == 0
