import json

import pytest
from sqlalchemy.exc import SQLAlchemyError

from recipepad.core.db import get_db
from recipepad.db.repositories import RecipeRepository
from recipepad.main import app


async def _publish(client, recipe_id, **data):
    response = await client.put(f"/recipes/{recipe_id}", json={"recipe": data})
    assert response.status_code == 200
    assert response.json() == {"ok": True}


@pytest.mark.asyncio
async def test_list_returns_body_with_validators(client):
    await _publish(client, "borscht", title="Borscht", servings=4)

    response = await client.get("/recipes")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    assert response.headers["cache-control"] == "public, max-age=30, stale-while-revalidate=300"
    assert response.headers["etag"].startswith('"r1-')
    assert response.headers["last-modified"].endswith(" GMT")
    assert response.json() == [{"title": "Borscht", "servings": 4, "id": "borscht"}]


@pytest.mark.asyncio
async def test_matching_if_none_match_returns_304(client, clock):
    await _publish(client, "borscht", title="Borscht")
    etag = (await client.get("/recipes")).headers["etag"]

    cached = await client.get("/recipes", headers={"If-None-Match": etag})
    assert cached.status_code == 304
    assert cached.content == b""

    clock.advance(30)
    recomputed = await client.get("/recipes", headers={"If-None-Match": etag})
    assert recomputed.status_code == 304


@pytest.mark.asyncio
async def test_mismatched_if_none_match_returns_full_body(client):
    await _publish(client, "borscht", title="Borscht")

    response = await client.get("/recipes", headers={"If-None-Match": '"r0-0"'})

    assert response.status_code == 200
    assert len(response.json()) == 1


@pytest.mark.asyncio
async def test_publish_then_list_sees_new_recipe(client):
    for index in range(1, 4):
        await _publish(client, f"r{index}", title=f"Recipe {index}")
    old_etag = (await client.get("/recipes")).headers["etag"]
    assert old_etag.startswith('"r3-')

    await _publish(client, "r4", title="Recipe 4")
    response = await client.get("/recipes", headers={"If-None-Match": old_etag})

    assert response.status_code == 200
    assert response.headers["etag"].startswith('"r4-')
    assert response.json()[0]["id"] == "r4"

    again = await client.get("/recipes", headers={"If-None-Match": response.headers["etag"]})
    assert again.status_code == 304


@pytest.mark.asyncio
async def test_same_snapshot_same_etag_across_cache_refresh(client, clock):
    await _publish(client, "borscht", title="Borscht")
    first = await client.get("/recipes")

    clock.advance(16)
    second = await client.get("/recipes")

    assert second.headers["etag"] == first.headers["etag"]
    assert second.content == first.content


@pytest.mark.asyncio
async def test_store_failure_returns_500_and_keeps_cache(client, listing_cache, clock, monkeypatch):
    await _publish(client, "borscht", title="Borscht")
    await client.get("/recipes")
    previous = listing_cache.entry
    clock.advance(20)

    async def broken(self):
        raise SQLAlchemyError("store unavailable")

    monkeypatch.setattr(RecipeRepository, "list_all", broken)

    response = await client.get("/recipes")

    assert response.status_code == 500
    assert response.json() == {"error": "internal"}
    assert listing_cache.entry is previous


@pytest.mark.asyncio
async def test_get_one(client):
    await _publish(client, "borscht", title="Borscht", id="ignored")

    response = await client.get("/recipes/borscht")

    assert response.status_code == 200
    assert response.headers["cache-control"] == "no-store"
    assert response.json() == {"title": "Borscht", "id": "borscht"}


@pytest.mark.asyncio
async def test_get_missing_is_404(client):
    response = await client.get("/recipes/missing")

    assert response.status_code == 404
    assert response.json() == {"error": "not found"}


@pytest.mark.asyncio
async def test_exists(client):
    await _publish(client, "borscht", title="Borscht")

    assert (await client.get("/recipes/borscht/exists")).json() == {"exists": True}
    assert (await client.get("/recipes/missing/exists")).json() == {"exists": False}


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"recipe": None}, {"recipe": "text"}, {"recipe": [1, 2]}])
async def test_publish_requires_recipe_object(client, body):
    response = await client.put("/recipes/borscht", json=body)

    assert response.status_code == 400
    assert response.json()["error"] == "body.recipe required"


@pytest.mark.asyncio
async def test_publish_overwrites_existing(client):
    await _publish(client, "borscht", title="Borscht")
    await _publish(client, "borscht", title="Borscht v2")

    listing = (await client.get("/recipes")).json()

    assert listing == [{"title": "Borscht v2", "id": "borscht"}]


@pytest.mark.asyncio
async def test_delete(client):
    await _publish(client, "borscht", title="Borscht")
    await client.get("/recipes")

    response = await client.delete("/recipes/borscht")
    assert response.status_code == 204
    assert response.content == b""

    assert (await client.get("/recipes")).json() == []
    # удаление несуществующего тоже 204
    assert (await client.delete("/recipes/borscht")).status_code == 204


@pytest.mark.asyncio
async def test_unicode_is_not_escaped(client):
    await _publish(client, "borscht", title="Борщ")

    response = await client.get("/recipes")

    assert "Борщ" in response.content.decode("utf-8")
    assert json.loads(response.content)[0]["title"] == "Борщ"


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"ok": True}


@pytest.mark.asyncio
async def test_publish_without_body(client):
    response = await client.put("/recipes/borscht")

    assert response.status_code == 400
    assert response.json() == {"error": "body.recipe required"}
    assert (await client.get("/recipes/borscht/exists")).json() == {"exists": False}


@pytest.mark.asyncio
async def test_health_reports_any_database_failure(client):
    class BrokenSession:
        async def execute(self, statement):
            raise RuntimeError("pool exhausted")

    async def broken_db():
        yield BrokenSession()

    app.dependency_overrides[get_db] = broken_db

    response = await client.get("/health")

    assert response.status_code == 500
    assert response.json() == {"ok": False}
