"""The same contract must hold for MemoryStore and SqlStore."""

from datetime import date, datetime, timezone

import pytest

from dailyfive.core.database import build_engine, create_all_tables
from dailyfive.core.errors import DuplicateRowError, NotFoundError, PersistenceError, ValidationError
from dailyfive.features.store import SqlStore


def _task_set(user_id, day):
    row = {"user_id": user_id, "created_date": day}
    for slot in range(1, 6):
        row[f"task{slot}_id"] = slot
    return row


def test_insert_applies_defaults_and_ids(seeded_store):
    first = seeded_store.insert("daily_task_sets", _task_set("u1", date(2024, 1, 1)))
    second = seeded_store.insert("daily_task_sets", _task_set("u1", date(2024, 1, 2)))

    assert second["id"] != first["id"]
    assert [first[f"task{slot}_completed"] for slot in range(1, 6)] == [False] * 5
    assert first["created_at"] is not None


def test_unique_user_day_enforced(seeded_store):
    seeded_store.insert("daily_task_sets", _task_set("u1", date(2024, 1, 1)))
    with pytest.raises(DuplicateRowError) as exc_info:
        seeded_store.insert("daily_task_sets", _task_set("u1", date(2024, 1, 1)))
    assert exc_info.value.key == {"user_id": "u1", "created_date": date(2024, 1, 1)}
    # Another user on the same day is fine
    seeded_store.insert("daily_task_sets", _task_set("u2", date(2024, 1, 1)))


def test_query_ranges_are_inclusive_and_ordered(seeded_store):
    for day in (5, 1, 3, 9):
        seeded_store.insert("daily_task_sets", _task_set("u1", date(2024, 1, day)))

    rows = seeded_store.query_many(
        "daily_task_sets",
        {"user_id": "u1"},
        order_by="created_date",
        ranges={"created_date": (date(2024, 1, 1), date(2024, 1, 5))},
    )
    assert [row["created_date"] for row in rows] == [date(2024, 1, 1), date(2024, 1, 3), date(2024, 1, 5)]

    newest_first = seeded_store.query_many("daily_task_sets", {"user_id": "u1"}, order_by="-created_date")
    assert newest_first[0]["created_date"] == date(2024, 1, 9)


def test_query_one_missing_returns_none(store):
    assert store.query_one("profiles", {"user_id": "ghost"}) is None


def test_update_returns_rowcount(store):
    store.insert("profiles", {"user_id": "u1"})
    assert store.update("profiles", {"user_id": "u1"}, {"user_streak": 4}) == 1
    assert store.update("profiles", {"user_id": "nobody"}, {"user_streak": 4}) == 0
    assert store.query_one("profiles", {"user_id": "u1"})["user_streak"] == 4


def test_increment_respects_floor(store):
    store.insert("profiles", {"user_id": "u1", "achievement_points": 30})

    assert store.increment("profiles", {"user_id": "u1"}, "achievement_points", 20) == 50
    assert store.increment("profiles", {"user_id": "u1"}, "achievement_points", -60) is None
    assert store.query_one("profiles", {"user_id": "u1"})["achievement_points"] == 50
    assert store.increment("profiles", {"user_id": "u1"}, "achievement_points", -50) == 0


def test_increment_missing_row(store):
    with pytest.raises(NotFoundError):
        store.increment("profiles", {"user_id": "ghost"}, "completed_tasks", 1)


def test_delete(store):
    store.insert("notes", {"user_id": "u1", "title": "a", "content": "", "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc)})
    assert store.delete("notes", {"user_id": "u2"}) == 0
    assert store.delete("notes", {"user_id": "u1"}) == 1
    assert store.query_many("notes", {}) == []


def test_unknown_table(store):
    with pytest.raises(ValidationError):
        store.query_many("nope", {})


@pytest.fixture
def sql_store():
    engine = build_engine("sqlite://")
    create_all_tables(engine)
    yield SqlStore(engine)
    engine.dispose()


def test_check_violation_is_not_a_duplicate(sql_store):
    with pytest.raises(PersistenceError) as exc_info:
        sql_store.insert("profiles", {"user_id": "u1", "achievement_points": -5})
    assert not isinstance(exc_info.value, DuplicateRowError)
    assert sql_store.query_one("profiles", {"user_id": "u1"}) is None


def test_not_null_violation_is_not_a_duplicate(sql_store):
    row = _task_set("u1", date(2024, 1, 1))
    del row["task3_id"]
    with pytest.raises(PersistenceError) as exc_info:
        sql_store.insert("daily_task_sets", row)
    assert not isinstance(exc_info.value, DuplicateRowError)


def test_duplicate_primary_key_reports_key(sql_store):
    sql_store.insert("profiles", {"user_id": "u1"})
    with pytest.raises(DuplicateRowError) as exc_info:
        sql_store.insert("profiles", {"user_id": "u1"})
    assert exc_info.value.key == {"user_id": "u1"}
