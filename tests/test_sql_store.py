import pytest

from events_service.domain.lookup import Found, NOT_FOUND
from events_service.infrastructure.repositories import Repositories
from events_service.infrastructure.sql_store import SqlDocumentStore
from events_service.infrastructure.store import DocumentNotFound, UnknownCollection


@pytest.fixture
def store(tmp_path):
    """SQLite-файл во временной папке"""
    s = SqlDocumentStore(f"sqlite:///{tmp_path / 'test_events.db'}")
    s.init_schema()
    yield s
    s.engine.dispose()


@pytest.mark.asyncio
async def test_create_generates_numeric_ids(store):
    first = await store.create("events", {"title": "A", "date": "2025-12-01", "venue": "Hall"})
    second = await store.create("events", {"title": "B", "date": "2025-12-02", "venue": "Hall"})

    assert first["id"].isdigit()
    assert int(second["id"]) > int(first["id"])
    assert first["created_at"] is not None


@pytest.mark.asyncio
async def test_get_by_id_and_not_found(store):
    doc = await store.create("events", {"title": "A", "date": "2025-12-01", "venue": "Hall"})

    fetched = await store.get_by_id("events", doc["id"])
    assert fetched["title"] == "A"

    with pytest.raises(DocumentNotFound):
        await store.get_by_id("events", "12345")
    # та же коллекция, другой тип документа
    with pytest.raises(DocumentNotFound):
        await store.get_by_id("users", doc["id"])


@pytest.mark.asyncio
async def test_list_all_ordered(store):
    for title, date in [("C", "2025-12-10"), ("A", "2025-12-01"), ("B", "2025-12-05")]:
        await store.create("events", {"title": title, "date": date, "venue": "Hall"})

    docs = await store.list_all("events", order_field="date")
    assert [d["title"] for d in docs] == ["A", "B", "C"]


@pytest.mark.asyncio
async def test_query_by_fields(store):
    await store.create("registrations", {"name": "A", "email": "a@example.com", "event_id": "1"})
    await store.create("registrations", {"name": "B", "email": "b@example.com", "event_id": "1"})
    await store.create("registrations", {"name": "A2", "email": "a@example.com", "event_id": "2"})

    assert len(await store.query_by_field("registrations", "event_id", "1")) == 2
    matched = await store.query_by_fields("registrations", [("email", "a@example.com"), ("event_id", "2")])
    assert [d["name"] for d in matched] == ["A2"]


@pytest.mark.asyncio
async def test_put_update_delete(store):
    await store.put("users", "uid-1", {"uid": "uid-1", "email": "a@example.com", "role": "student"})

    updated = await store.update("users", "uid-1", {"role": "admin"})
    assert updated["role"] == "admin"
    assert updated["email"] == "a@example.com"
    assert updated["updated_at"] is not None

    with pytest.raises(DocumentNotFound):
        await store.update("users", "ghost", {"role": "admin"})

    await store.delete("users", "uid-1")
    await store.delete("users", "uid-1")
    assert await store.list_all("users") == []


@pytest.mark.asyncio
async def test_unknown_collection(store):
    with pytest.raises(UnknownCollection):
        await store.list_all("courses")


@pytest.mark.asyncio
async def test_repositories_over_sql_store(store):
    repos = Repositories(store)
    e1 = await repos.events.create("Summit", "2025-12-01", "Auditorium A")
    await repos.registrations.create("Alice", "Alice@Example.com", e1.id)

    assert await repos.registrations.exists("alice@example.com", e1.id)
    assert isinstance(await repos.events.get(e1.id), Found)

    await repos.events.delete(e1.id)
    assert await repos.events.get(e1.id) is NOT_FOUND
    assert len(await repos.registrations.list_by_event(e1.id)) == 1

    user = await repos.users.create("uid-1", "bob@example.com")
    again = await repos.users.create("uid-1", "bob@example.com")
    assert again.uid == user.uid
    assert len(await store.list_all("users")) == 1
