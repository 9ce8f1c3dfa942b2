import pytest
from unittest.mock import AsyncMock

from events_service.infrastructure.memory_store import InMemoryDocumentStore
from events_service.infrastructure.query_shim import QueryDispatcher, normalize_sql
from events_service.infrastructure.repositories import Repositories
from events_service.infrastructure.store import StoreUnavailable


@pytest.fixture
def db():
    return QueryDispatcher(Repositories(InMemoryDocumentStore()))


def test_normalize_sql():
    assert normalize_sql("  select *\n  from   events\torder by date ") == "SELECT * FROM EVENTS ORDER BY DATE"


@pytest.mark.asyncio
async def test_insert_and_select_event(db):
    result = await db.query("INSERT INTO events (title, date, venue) VALUES (?, ?, ?)",
                            ["AI Workshop", "2025-12-05", "Lab 3"])
    assert len(result) == 1
    event_id = result[0]["insertId"]

    [events] = await db.query("SELECT * FROM events WHERE id = ?", [event_id])
    assert events == [{"id": event_id, "title": "AI Workshop", "date": "2025-12-05", "venue": "Lab 3"}]


@pytest.mark.asyncio
async def test_select_id_from_events(db):
    [inserted] = await db.query(
        "insert into events (title, date, venue) values (?, ?, ?)", ["Summit", "2025-12-01", "Hall"])
    event_id = inserted["insertId"]

    [events] = await db.query("SELECT id FROM events WHERE id = ?", [event_id])
    assert len(events) == 1
    assert events[0]["id"] == event_id


@pytest.mark.asyncio
async def test_select_missing_event_is_empty(db):
    assert await db.query("SELECT * FROM events WHERE id = ?", ["nope"]) == [[]]


@pytest.mark.asyncio
async def test_select_all_events_ordered(db):
    for title, date in [("C", "2025-12-10"), ("A", "2025-12-01"), ("B", "2025-12-05")]:
        await db.query("INSERT INTO events (title, date, venue) VALUES (?, ?, ?)", [title, date, "Hall"])

    result = await db.query("SELECT * FROM events ORDER BY date ASC")
    assert len(result) == 1
    assert [e["title"] for e in result[0]] == ["A", "B", "C"]


@pytest.mark.asyncio
async def test_registration_existence_check(db):
    [inserted] = await db.query(
        "INSERT INTO events (title, date, venue) VALUES (?, ?, ?)", ["Summit", "2025-12-01", "Hall"])
    event_id = inserted["insertId"]
    check = "SELECT id FROM registrations WHERE email = ? AND event_id = ?"

    assert await db.query(check, ["alice@example.com", event_id]) == [[]]

    result = await db.query("INSERT INTO registrations (name, email, event_id) VALUES (?, ?, ?)",
                            ["Alice", "Alice@Example.com", event_id])
    assert "insertId" in result[0]

    assert await db.query(check, ["ALICE@example.com", event_id]) == [[{"id": 1}]]


@pytest.mark.asyncio
async def test_join_query(db):
    ids = []
    for title in ["E1", "E2"]:
        [inserted] = await db.query(
            "INSERT INTO events (title, date, venue) VALUES (?, ?, ?)", [title, "2025-12-01", f"{title} hall"])
        event_id = inserted["insertId"]
        ids.append(event_id)
    for name, event_id in [("R1", ids[0]), ("R2", ids[1]), ("R3", ids[0])]:
        await db.query("INSERT INTO registrations (name, email, event_id) VALUES (?, ?, ?)",
                       [name, f"{name.lower()}@example.com", event_id])

    [rows] = await db.query("""
        SELECT r.id, r.name, r.email,
               e.title as event_title, e.date as event_date, e.venue as event_venue
        FROM registrations r
        INNER JOIN events e ON r.event_id = e.id
        ORDER BY r.id DESC
    """)

    assert [r["name"] for r in rows] == ["R3", "R2", "R1"]
    assert rows[1] == {
        "id": rows[1]["id"], "name": "R2", "email": "r2@example.com",
        "event_title": "E2", "event_date": "2025-12-01", "event_venue": "E2 hall",
    }


@pytest.mark.asyncio
async def test_unmatched_query_returns_empty(db):
    assert await db.query("UPDATE events SET title = ? WHERE id = ?", ["x", "1"]) == [[]]
    assert await db.query("DROP TABLE registrations") == [[]]


@pytest.mark.asyncio
async def test_store_errors_are_reraised():
    repos = Repositories(InMemoryDocumentStore())
    repos.events.store = AsyncMock()
    repos.events.store.list_all.side_effect = StoreUnavailable("down")

    with pytest.raises(StoreUnavailable):
        await QueryDispatcher(repos).query("SELECT * FROM events")
