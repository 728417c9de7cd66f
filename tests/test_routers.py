"""HTTP surface: server info, shelf and ingredient routes."""

from contextlib import asynccontextmanager

import httpx
import pytest

from core.auth import current_active_user
from db.database import get_async_session
from main import app
from services.matching import MatchingConfig
from services.shelf_matcher import get_matching_config


@asynccontextmanager
async def client_for(user, session_maker):
    async def override_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_session
    app.dependency_overrides[current_active_user] = lambda: user
    app.dependency_overrides[get_matching_config] = lambda: MatchingConfig(parent_ingredient_as_substitute=True)

    transport = httpx.ASGITransport(app=app)
    try:
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def client(bar, session_maker):
    async with client_for(bar.owner, session_maker) as client:
        yield client


@pytest.fixture
async def admin_client(bar, session, session_maker):
    admin = await bar.user("admin@example.com", superuser=True)
    await session.commit()
    async with client_for(admin, session_maker) as client:
        yield client


async def test_status(client):
    response = await client.get("/server/")
    assert response.status_code == 200
    assert response.json() == {"status": "available"}


async def test_version(client):
    response = await client.get("/server/version")
    assert response.status_code == 200
    assert set(response.json()["data"]) == {"name", "version", "type"}


async def test_openapi(client):
    response = await client.get("/server/openapi")
    assert response.status_code == 200
    assert "/shelf/cocktails" in response.json()["paths"]


async def test_shelf_add_is_idempotent(client, bar):
    gin_id = str(bar.ingredients["Gin"].id)

    first = await client.post("/shelf/", json={"ingredient_ids": [gin_id]})
    second = await client.post("/shelf/", json={"ingredient_ids": [gin_id, gin_id]})

    assert first.status_code == 201
    assert second.status_code == 201
    assert [i["id"] for i in second.json()] == [gin_id]


async def test_shelf_add_unknown_ingredient(client):
    response = await client.post("/shelf/", json={"ingredient_ids": ["00000000-0000-0000-0000-000000000001"]})
    assert response.status_code == 404


async def test_shelf_cocktails_and_matches(client, bar):
    ids = [str(bar.ingredients[name].id) for name in ("London Dry Gin", "Campari", "Red Vermouth")]
    await client.post("/shelf/", json={"ingredient_ids": ids})

    response = await client.get("/shelf/cocktails")
    assert response.status_code == 200
    assert set(response.json()["cocktail_ids"]) == {str(bar.negroni.id), str(bar.water.id)}

    response = await client.get(f"/shelf/cocktails/{bar.negroni.id}/matches")
    assert response.status_code == 200
    assert response.json()["ingredient_ids"] == [str(bar.ingredients["Campari"].id)]


async def test_shelf_cocktails_limit(client):
    response = await client.get("/shelf/cocktails", params={"limit": 0})
    assert response.status_code == 422


async def test_shelf_remove(client, bar):
    gin_id = str(bar.ingredients["Gin"].id)
    await client.post("/shelf/", json={"ingredient_ids": [gin_id]})

    response = await client.delete(f"/shelf/{gin_id}")
    assert response.status_code == 204

    response = await client.get("/shelf/")
    assert response.json() == []


async def test_ingredient_detail_lists_varieties(client, bar):
    gin = bar.ingredients["Gin"]

    response = await client.get(f"/ingredients/{gin.id}")

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Gin"
    assert body["parent_ingredient_id"] is None
    assert set(body["varieties"]) == {str(bar.ingredients["London Dry Gin"].id), str(bar.ingredients["Old Tom Gin"].id)}


async def test_create_variety(admin_client, bar):
    gin_id = str(bar.ingredients["Gin"].id)

    response = await admin_client.post("/ingredients/", json={"name": "Navy Strength Gin", "parent_ingredient_id": gin_id})

    assert response.status_code == 201
    assert response.json()["parent_ingredient_id"] == gin_id


async def test_create_requires_superuser(client):
    response = await client.post("/ingredients/", json={"name": "Mezcal"})
    assert response.status_code == 403


async def test_parent_cannot_be_a_variety(admin_client, bar):
    london_dry_id = str(bar.ingredients["London Dry Gin"].id)

    created = await admin_client.post("/ingredients/", json={"name": "Sloe Gin", "parent_ingredient_id": london_dry_id})
    updated = await admin_client.put(
        f"/ingredients/{bar.ingredients['Campari'].id}",
        json={"name": "Campari", "parent_ingredient_id": london_dry_id},
    )

    assert created.status_code == 400
    assert updated.status_code == 400


async def test_two_ingredients_cannot_parent_each_other(admin_client, bar):
    gin_id = str(bar.ingredients["Gin"].id)
    campari_id = str(bar.ingredients["Campari"].id)

    first = await admin_client.put(f"/ingredients/{campari_id}", json={"name": "Campari", "parent_ingredient_id": gin_id})
    second = await admin_client.put(f"/ingredients/{gin_id}", json={"name": "Gin", "parent_ingredient_id": campari_id})

    assert first.status_code == 200
    assert second.status_code == 400
    response = await admin_client.get(f"/ingredients/{gin_id}")
    assert response.json()["parent_ingredient_id"] is None


async def test_ingredient_with_varieties_cannot_get_a_parent(admin_client, bar):
    gin_id = str(bar.ingredients["Gin"].id)

    response = await admin_client.put(
        f"/ingredients/{gin_id}",
        json={"name": "Gin", "parent_ingredient_id": str(bar.ingredients["Campari"].id)},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Ingredient with varieties cannot have a parent"


async def test_ingredient_cannot_be_its_own_parent(admin_client, bar):
    campari_id = str(bar.ingredients["Campari"].id)
    response = await admin_client.put(f"/ingredients/{campari_id}", json={"name": "Campari", "parent_ingredient_id": campari_id})
    assert response.status_code == 400
