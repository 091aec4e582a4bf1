from datetime import datetime, timedelta, timezone

import pytest
import httpx
from sqlalchemy import text
from asgi_lifespan import LifespanManager

from app.main import app
from app.core.db import get_session, init_db
from app.core.dates import today_local
from app.core.errors import EmptyPoolError
from app.recs.sessions import SessionStore
from app.routers.recommendations import get_session_store
from app.wardrobe.deps import get_item_pool
from app.wardrobe.providers.in_memory import InMemoryItemPool
from tests.fixtures.wardrobe_fixtures import FlakyItemPool, basic_wardrobe

API_BASE = "http://test"


@pytest.fixture(autouse=True)
async def clean_db():
    await init_db()
    async for session in get_session():
        await session.execute(text("DELETE FROM wardrobe_item"))
        await session.commit()
        break


@pytest.fixture
async def client():
    async with LifespanManager(app):
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url=API_BASE) as ac:
            yield ac


async def _make_items(client: httpx.AsyncClient, occasion: str = "casual", per_slot: int = 2) -> None:
    for category in ("top", "bottom", "shoes"):
        for n in range(per_slot):
            resp = await client.post(
                "/v1/items",
                json={"name": f"{occasion} {category} {n}", "category": category, "occasion": occasion},
            )
            assert resp.status_code == 201


@pytest.mark.asyncio
async def test_one_shot_recommendation(client: httpx.AsyncClient):
    resp = await client.get("/v1/recommendations")
    assert resp.status_code == 400
    assert resp.json()["detail"] == {"code": "insufficient_wardrobe", "missing": ["top", "bottom", "shoes"], "occasion": None}

    await _make_items(client, "casual")
    await client.post("/v1/items", json={"name": "Watch", "category": "accessory", "occasion": "casual"})
    resp = await client.get("/v1/recommendations", params={"occasion": "casual"})
    assert resp.status_code == 200
    outfit = resp.json()
    assert [it["category"] for it in outfit["items"]] == ["top", "bottom", "shoes"]
    assert outfit["occasion"] == "casual"

    resp = await client.get("/v1/recommendations", params={"occasion": "formal"})
    assert resp.status_code == 400
    assert resp.json()["detail"]["missing"] == ["top", "bottom", "shoes"]

    resp = await client.get("/v1/recommendations", params={"occasion": "party"})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_occasion_round_trip(client: httpx.AsyncClient):
    await _make_items(client, "casual")
    await _make_items(client, "formal")
    for _ in range(10):
        resp = await client.get("/v1/recommendations", params={"occasion": "formal"})
        assert {it["occasion"] for it in resp.json()["items"]} == {"formal"}


@pytest.mark.asyncio
async def test_session_navigation(client: httpx.AsyncClient):
    await _make_items(client, "sport", per_slot=3)

    resp = await client.post("/v1/recommendations/sessions", json={"occasion": "sport"})
    assert resp.status_code == 201
    state = resp.json()
    sid = state["session_id"]
    assert (state["index"], state["total"]) == (0, 1)
    first_id = state["outfit"]["id"]

    resp = await client.post(f"/v1/recommendations/sessions/{sid}/navigate", json={"direction": "prev"})
    assert (resp.json()["index"], resp.json()["total"]) == (0, 1)

    resp = await client.post(f"/v1/recommendations/sessions/{sid}/navigate", json={"direction": "next"})
    second = resp.json()
    assert (second["index"], second["total"]) == (1, 2)

    resp = await client.post(f"/v1/recommendations/sessions/{sid}/navigate", json={"direction": "prev"})
    assert resp.json()["outfit"]["id"] == first_id

    resp = await client.post(f"/v1/recommendations/sessions/{sid}/navigate", json={"direction": "next"})
    assert resp.json()["outfit"] == second["outfit"]
    assert resp.json()["total"] == 2

    resp = await client.get(f"/v1/recommendations/sessions/{sid}")
    assert resp.json()["index"] == 1
    assert resp.json()["occasion"] == "sport"

    resp = await client.post(f"/v1/recommendations/sessions/{sid}/navigate", json={"direction": "up"})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_accept_logs_wear_and_advances(client: httpx.AsyncClient):
    await _make_items(client, "casual")
    resp = await client.post("/v1/recommendations/sessions", json={"occasion": "casual"})
    sid = resp.json()["session_id"]
    accepted = resp.json()["outfit"]

    await client.post(f"/v1/recommendations/sessions/{sid}/navigate", json={"direction": "next"})
    await client.post(f"/v1/recommendations/sessions/{sid}/navigate", json={"direction": "prev"})

    resp = await client.post(f"/v1/recommendations/sessions/{sid}/accept")
    assert resp.status_code == 200
    body = resp.json()
    # the outfit that was ahead of the cursor is replaced by a fresh one
    assert (body["index"], body["total"]) == (1, 2)
    assert body["failed"] == []
    assert [it["id"] for it in body["worn"]] == [it["id"] for it in accepted["items"]]

    today = today_local().isoformat()
    for item in accepted["items"]:
        stored = (await client.get(f"/v1/items/{item['id']}")).json()
        assert stored["wear_count"] == 1
        assert stored["last_worn_date"] == today


@pytest.mark.asyncio
async def test_session_survives_insufficient_wardrobe(client: httpx.AsyncClient):
    await client.post("/v1/items", json={"name": "Tee", "category": "top", "occasion": "family"})
    resp = await client.post("/v1/recommendations/sessions", json={"occasion": "family"})
    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["missing"] == ["bottom", "shoes"]
    sid = detail["session_id"]

    resp = await client.get(f"/v1/recommendations/sessions/{sid}")
    assert resp.status_code == 200
    assert resp.json()["outfit"] is None
    assert resp.json()["total"] == 0

    resp = await client.post(f"/v1/recommendations/sessions/{sid}/accept")
    assert resp.status_code == 409

    await client.post("/v1/items", json={"name": "Chinos", "category": "bottom", "occasion": "family"})
    await client.post("/v1/items", json={"name": "Boots", "category": "shoes", "occasion": "family"})
    resp = await client.post(f"/v1/recommendations/sessions/{sid}/navigate", json={"direction": "next"})
    assert resp.status_code == 200
    assert resp.json()["total"] == 1


@pytest.mark.asyncio
async def test_switch_occasion_and_end_session(client: httpx.AsyncClient):
    await _make_items(client, "casual")
    await _make_items(client, "formal")
    resp = await client.post("/v1/recommendations/sessions", json={"occasion": "casual"})
    sid = resp.json()["session_id"]
    await client.post(f"/v1/recommendations/sessions/{sid}/navigate", json={"direction": "next"})

    resp = await client.post(f"/v1/recommendations/sessions/{sid}/occasion", json={"occasion": "formal"})
    assert resp.status_code == 200
    assert (resp.json()["index"], resp.json()["total"]) == (0, 1)
    assert {it["occasion"] for it in resp.json()["outfit"]["items"]} == {"formal"}

    resp = await client.delete(f"/v1/recommendations/sessions/{sid}")
    assert resp.status_code == 204
    resp = await client.get(f"/v1/recommendations/sessions/{sid}")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "session_not_found"


@pytest.mark.asyncio
async def test_wardrobe_analysis(client: httpx.AsyncClient):
    await _make_items(client, "casual", per_slot=2)
    await client.post("/v1/items", json={"name": "Blazer", "category": "top", "occasion": "formal"})
    resp = await client.get("/v1/wardrobe/analysis")
    assert resp.status_code == 200
    assert resp.json()["counts"] == {"formal": 0, "casual": 8, "sport": 0, "family": 0, "informal": 0}


class Clock:
    def __init__(self):
        self.now = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now


@pytest.fixture
def override_recs():
    """Swap the item pool and session store behind the recommendation routes."""

    def _install(pool, store=None):
        if store is None:
            store = SessionStore()
        app.dependency_overrides[get_item_pool] = lambda: pool
        app.dependency_overrides[get_session_store] = lambda: store
        return store

    yield _install
    app.dependency_overrides.pop(get_item_pool, None)
    app.dependency_overrides.pop(get_session_store, None)


@pytest.mark.asyncio
async def test_storage_failure_is_503_and_leaves_no_session(client: httpx.AsyncClient, override_recs):
    store = override_recs(FlakyItemPool(basic_wardrobe(owner_id="test-user"), fail_listing=True))

    resp = await client.get("/v1/recommendations")
    assert resp.status_code == 503
    assert resp.json() == {"detail": "storage_unavailable"}

    resp = await client.post("/v1/recommendations/sessions", json={"occasion": "casual"})
    assert resp.status_code == 503
    assert resp.json() == {"detail": "storage_unavailable"}
    assert len(store) == 0

    resp = await client.get("/v1/wardrobe/analysis")
    assert resp.status_code == 503


@pytest.mark.asyncio
async def test_total_wear_failure_is_503_with_failed_ids(client: httpx.AsyncClient, override_recs):
    wardrobe = basic_wardrobe(owner_id="test-user")
    override_recs(FlakyItemPool(wardrobe, fail_wear={it.id for it in wardrobe}))
    state = (await client.post("/v1/recommendations/sessions", json={"occasion": "casual"})).json()
    sid = state["session_id"]

    resp = await client.post(f"/v1/recommendations/sessions/{sid}/accept")
    assert resp.status_code == 503
    assert resp.json()["detail"] == {
        "code": "wear_logging_failed",
        "failed": [it["id"] for it in state["outfit"]["items"]],
    }
    resp = await client.get(f"/v1/recommendations/sessions/{sid}")
    assert (resp.json()["index"], resp.json()["total"]) == (0, 1)


@pytest.mark.asyncio
async def test_accept_retry_reports_logged_wears_once(client: httpx.AsyncClient, override_recs):
    wardrobe = basic_wardrobe(owner_id="test-user")
    top, bottom, shoes = wardrobe[:3]
    pool = InMemoryItemPool(wardrobe)
    override_recs(pool)
    sid = (await client.post("/v1/recommendations/sessions", json={"occasion": "casual"})).json()["session_id"]
    pool.remove(shoes.id)

    for _ in range(2):
        resp = await client.post(f"/v1/recommendations/sessions/{sid}/accept")
        assert resp.status_code == 400
        detail = resp.json()["detail"]
        assert detail["code"] == "accepted_not_advanced"
        assert detail["cause"] == "insufficient_wardrobe"
        assert detail["missing"] == ["shoes"]
        assert detail["worn"] == [top.id, bottom.id]
        assert detail["failed"] == [shoes.id]

    assert pool.get(top.id).wear_count == 1
    assert pool.get(bottom.id).wear_count == 1


@pytest.mark.asyncio
async def test_expired_session_is_410_then_404(client: httpx.AsyncClient, override_recs):
    clock = Clock()
    override_recs(InMemoryItemPool(basic_wardrobe(owner_id="test-user")), SessionStore(ttl_s=60, now=clock))
    sid = (await client.post("/v1/recommendations/sessions", json={})).json()["session_id"]

    clock.now += timedelta(seconds=61)
    resp = await client.get(f"/v1/recommendations/sessions/{sid}")
    assert resp.status_code == 410
    assert resp.json() == {"detail": "session_expired"}
    resp = await client.get(f"/v1/recommendations/sessions/{sid}")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_empty_pool_defect_is_500(client: httpx.AsyncClient, override_recs, monkeypatch):
    override_recs(InMemoryItemPool(basic_wardrobe(owner_id="test-user")))

    async def broken(*_args, **_kwargs):
        raise EmptyPoolError("weighted pick called with no candidates")

    monkeypatch.setattr("app.services.recs.service.assemble_from_pool", broken)
    resp = await client.get("/v1/recommendations")
    assert resp.status_code == 500
    assert resp.json() == {"detail": "internal_error"}
