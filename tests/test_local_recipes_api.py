import pytest
from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError

from recipepad.core.security import create_access_token
from recipepad.db.repositories import LocalRecipeRepository
from recipepad.domains.recipes.services import LocalRecipeService

ALICE = {"X-Owner-Id": "alice"}
BOB = {"X-Owner-Id": "bob"}


@pytest.mark.asyncio
async def test_owner_is_required(client):
    response = await client.get("/local/recipes")

    assert response.status_code == 400
    assert response.json() == {"error": "owner required"}

    blank = await client.get("/local/recipes", headers={"X-Owner-Id": "   "})
    assert blank.status_code == 400


@pytest.mark.asyncio
async def test_owner_from_header_or_query(client):
    await client.put("/local/recipes/soup", json={"recipe": {"title": "Soup"}}, headers=ALICE)

    by_header = await client.get("/local/recipes", headers=ALICE)
    by_query = await client.get("/local/recipes", params={"owner": "alice"})

    assert by_header.status_code == 200
    assert by_header.headers["cache-control"] == "no-store"
    assert by_header.json() == by_query.json() == [{"title": "Soup", "id": "soup"}]


@pytest.mark.asyncio
async def test_owner_from_bearer_token_wins(client):
    token = create_access_token({"sub": "tg-42"})
    headers = {"Authorization": f"Bearer {token}", "X-Owner-Id": "alice"}

    await client.put("/local/recipes/soup", json={"recipe": {"title": "Soup"}}, headers=headers)

    assert (await client.get("/local/recipes", headers={"X-Owner-Id": "tg-42"})).json() == [
        {"title": "Soup", "id": "soup"}
    ]
    assert (await client.get("/local/recipes", headers=ALICE)).json() == []


@pytest.mark.asyncio
async def test_invalid_bearer_token_is_rejected(client):
    response = await client.get(
        "/local/recipes",
        headers={"Authorization": "Bearer not-a-token", "X-Owner-Id": "alice"}
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_path_id_overrides_body_id(client):
    response = await client.put(
        "/local/recipes/soup",
        json={"recipe": {"id": "other", "title": "Soup"}},
        headers=ALICE
    )
    assert response.json() == {"ok": True}

    stored = await client.get("/local/recipes/soup", headers=ALICE)
    assert stored.json() == {"id": "soup", "title": "Soup"}
    assert (await client.get("/local/recipes/other", headers=ALICE)).status_code == 404


@pytest.mark.asyncio
async def test_owners_are_isolated(client):
    await client.put("/local/recipes/soup", json={"recipe": {"title": "Alice soup"}}, headers=ALICE)
    await client.put("/local/recipes/soup", json={"recipe": {"title": "Bob soup"}}, headers=BOB)

    assert (await client.get("/local/recipes/soup", headers=ALICE)).json()["title"] == "Alice soup"
    assert (await client.get("/local/recipes/soup", headers=BOB)).json()["title"] == "Bob soup"

    await client.delete("/local/recipes/soup", headers=ALICE)
    assert (await client.get("/local/recipes/soup", headers=ALICE)).status_code == 404
    assert (await client.get("/local/recipes/soup", headers=BOB)).status_code == 200


@pytest.mark.asyncio
async def test_local_writes_do_not_touch_global_listing(client):
    await client.put("/local/recipes/soup", json={"recipe": {"title": "Soup"}}, headers=ALICE)

    assert (await client.get("/recipes")).json() == []


@pytest.mark.asyncio
async def test_bulk_upload(client):
    payload = {"recipes": [
        {"id": "a", "title": "First"},
        {"id": "b", "title": "Second"},
        {"id": "a", "title": "First again"},
    ]}

    response = await client.post("/local/recipes/bulk", json=payload, headers=ALICE)

    assert response.status_code == 200
    assert response.json() == {"ok": True, "count": 3}
    listing = {item["id"]: item for item in (await client.get("/local/recipes", headers=ALICE)).json()}
    assert set(listing) == {"a", "b"}
    assert listing["a"]["title"] == "First again"


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{}, {"recipes": []}, {"recipes": "nope"}])
async def test_bulk_upload_of_nothing(client, payload):
    response = await client.post("/local/recipes/bulk", json=payload, headers=ALICE)

    assert response.status_code == 200
    assert response.json() == {"ok": True, "count": 0}


@pytest.mark.asyncio
@pytest.mark.parametrize("items", [["text"], [{"title": "no id"}], [{"id": ""}], [{"id": 5}]])
async def test_bulk_upload_rejects_invalid_items(client, items):
    response = await client.post("/local/recipes/bulk", json={"recipes": items}, headers=ALICE)

    assert response.status_code == 400
    assert (await client.get("/local/recipes", headers=ALICE)).json() == []


@pytest.mark.asyncio
async def test_save_without_body(client):
    response = await client.put("/local/recipes/soup", headers=ALICE)

    assert response.status_code == 400
    assert response.json() == {"error": "body.recipe required"}


@pytest.mark.asyncio
async def test_bulk_upload_without_body(client):
    response = await client.post("/local/recipes/bulk", headers=ALICE)

    assert response.status_code == 200
    assert response.json() == {"ok": True, "count": 0}


@pytest.mark.asyncio
async def test_bulk_upload_is_rolled_back_on_store_failure(client, monkeypatch):
    original_upsert_rows = LocalRecipeRepository._upsert_rows

    async def failing_upsert_rows(self, rows):
        await original_upsert_rows(self, rows)
        raise SQLAlchemyError("connection lost")

    monkeypatch.setattr(LocalRecipeRepository, "_upsert_rows", failing_upsert_rows)
    payload = {"recipes": [{"id": "a", "title": "First"}, {"id": "b", "title": "Second"}]}

    response = await client.post("/local/recipes/bulk", json=payload, headers=ALICE)

    assert response.status_code == 500
    assert response.json() == {"error": "internal"}

    monkeypatch.undo()
    assert (await client.get("/local/recipes", headers=ALICE)).json() == []


@pytest.mark.asyncio
async def test_large_bulk_stays_within_driver_parameter_limit(db_engine, session):
    # asyncpg принимает не больше 32767 параметров на запрос
    sizes = []

    def record(conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith("INSERT") and parameters:
            first = parameters[0]
            sizes.append(len(first) if isinstance(first, (tuple, list, dict)) else len(parameters))

    event.listen(db_engine.sync_engine, "before_cursor_execute", record)
    try:
        items = [{"id": f"r{index}", "title": f"Recipe {index}"} for index in range(7000)]
        count = await LocalRecipeService(session).import_recipes("alice", items)
    finally:
        event.remove(db_engine.sync_engine, "before_cursor_execute", record)

    assert count == 7000
    assert sizes and max(sizes) < 32767
    assert len(await LocalRecipeService(session).list_recipes("alice")) == 7000
