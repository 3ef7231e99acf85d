# dailyfive/conftest.py
import os
import random
from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("ENV", "test")

from dailyfive.core.database import build_engine, create_all_tables
from dailyfive.features.badges.service import seed_badges
from dailyfive.features.market.service import seed_shop_items
from dailyfive.features.quotes.service import seed_quotes
from dailyfive.features.store import MemoryStore, SqlStore
from dailyfive.features.tasks.catalog import seed_catalog
from dailyfive.models.daily_tasks import TASK_SLOTS

TODAY = date(2024, 3, 15)


@pytest.fixture
def today():
    return TODAY


def _sql_store():
    engine = build_engine("sqlite://")
    create_all_tables(engine)
    return SqlStore(engine)


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """
    Empty store, once per implementation.

    Every test using it runs against MemoryStore and a SQLite-backed SqlStore.
    """
    if request.param == "memory":
        yield MemoryStore()
        return
    sql_store = _sql_store()
    yield sql_store
    sql_store.engine.dispose()


@pytest.fixture
def seeded_store(store):
    seed_catalog(store)
    seed_badges(store)
    seed_shop_items(store)
    seed_quotes(store)
    return store


@pytest.fixture
def add_day(seeded_store):
    """Insert a task set for ``day`` with the given completion flags."""

    def _add(user_id, day, flags=(True,) * 5):
        row = {"user_id": user_id, "created_date": day}
        for slot, done in zip(TASK_SLOTS, flags):
            row[f"task{slot}_id"] = slot
            row[f"task{slot}_completed"] = bool(done)
        return seeded_store.insert("daily_task_sets", row)

    return _add


@pytest.fixture
def add_history(add_day):
    """Fully completed days ``start_offset .. start_offset + count - 1`` days before ``end``."""

    def _add(user_id, end, count, start_offset=0):
        for offset in range(start_offset, start_offset + count):
            add_day(user_id, end - timedelta(days=offset))

    return _add


@pytest.fixture
def client(seeded_store, today):
    from dailyfive.api.deps import get_today
    from dailyfive.main import create_app

    app = create_app(store=seeded_store, rng=random.Random(7), seed=False)
    app.dependency_overrides[get_today] = lambda: today
    with TestClient(app) as test_client:
        yield test_client
