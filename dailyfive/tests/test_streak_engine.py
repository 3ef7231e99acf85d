from datetime import date, timedelta

import pytest

from dailyfive.core.errors import PersistenceError
from dailyfive.features.store import MemoryStore
from dailyfive.features.streaks.service import StreakService
from dailyfive.tests.mocks import BrokenStore


def _streak(store, user_id, today):
    return StreakService(store).calculate_streak(user_id, today)


def test_no_history_is_zero(seeded_store, today):
    result = _streak(seeded_store, "nobody", today)
    assert result.streak == 0
    assert [entry.status for entry in result.status_data] == [0] * 7


def test_consecutive_days_including_today(seeded_store, add_history, today):
    add_history("u1", today, 5)
    assert _streak(seeded_store, "u1", today).streak == 5


def test_single_completed_today(seeded_store, add_day, today):
    add_day("u1", today)
    assert _streak(seeded_store, "u1", today).streak == 1


@pytest.mark.parametrize("today_flags", [None, (True, False, False, False, False), (False,) * 5])
def test_unfinished_today_keeps_streak(seeded_store, add_day, add_history, today, today_flags):
    add_history("u2", today, 4, start_offset=1)
    if today_flags is not None:
        add_day("u2", today, today_flags)

    assert _streak(seeded_store, "u2", today).streak == 4


def test_gap_yesterday_breaks_streak(seeded_store, add_day, add_history, today):
    add_day("u3", today)
    # Yesterday absent, then six completed days before it
    add_history("u3", today, 6, start_offset=2)
    assert _streak(seeded_store, "u3", today).streak == 1


def test_partial_yesterday_breaks_streak(seeded_store, add_day, add_history, today):
    add_day("u3", today)
    add_day("u3", today - timedelta(days=1), (True, True, True, True, False))
    add_history("u3", today, 3, start_offset=2)
    assert _streak(seeded_store, "u3", today).streak == 1


def test_unfinished_today_and_yesterday_is_zero(seeded_store, add_day, add_history, today):
    add_day("u4", today, (True, False, False, False, False))
    add_history("u4", today, 5, start_offset=2)
    assert _streak(seeded_store, "u4", today).streak == 0


def test_window_caps_streak(seeded_store, add_history, today):
    add_history("u5", today, 40)
    assert _streak(seeded_store, "u5", today).streak == 30


def test_window_caps_streak_ending_yesterday(seeded_store, add_history, today):
    add_history("u5", today, 40, start_offset=1)
    # Today is skipped, the window still ends 29 days back
    assert _streak(seeded_store, "u5", today).streak == 29


def test_custom_window(seeded_store, add_history, today):
    add_history("u6", today, 12)
    assert StreakService(seeded_store, window_days=10).calculate_streak("u6", today).streak == 10


def test_other_users_do_not_leak(seeded_store, add_history, today):
    add_history("alice", today, 3)
    add_history("bob", today, 8)
    assert _streak(seeded_store, "alice", today).streak == 3
    assert _streak(seeded_store, "bob", today).streak == 8


def test_status_summary_oldest_to_newest(seeded_store, add_day, today):
    add_day("u7", today, (True,) * 5)
    add_day("u7", today - timedelta(days=1), (True, False, False, False, False))
    add_day("u7", today - timedelta(days=2), (False,) * 5)
    add_day("u7", today - timedelta(days=6), (True, True, True, True, False))
    # Outside the 7-day summary
    add_day("u7", today - timedelta(days=7), (True,) * 5)

    result = _streak(seeded_store, "u7", today)

    assert [entry.date for entry in result.status_data] == [today - timedelta(days=d) for d in range(6, -1, -1)]
    assert [entry.status for entry in result.status_data] == [1, 0, 0, 0, 0, 1, 2]


def test_streak_persisted_to_profile(seeded_store, add_history, today):
    add_history("u8", today, 3)
    _streak(seeded_store, "u8", today)

    profile = seeded_store.query_one("profiles", {"user_id": "u8"})
    assert profile["user_streak"] == 3


def test_recalculation_overwrites_stale_streak(seeded_store, add_day, add_history, today):
    add_history("u9", today - timedelta(days=10), 5)
    _streak(seeded_store, "u9", today - timedelta(days=10))
    assert seeded_store.query_one("profiles", {"user_id": "u9"})["user_streak"] == 5

    _streak(seeded_store, "u9", today)
    assert seeded_store.query_one("profiles", {"user_id": "u9"})["user_streak"] == 0


def test_result_payload_uses_iso_dates(seeded_store, add_day, today):
    add_day("u10", today)
    payload = _streak(seeded_store, "u10", today).to_dict()
    assert payload["streak"] == 1
    assert payload["as_of"] == "2024-03-15"
    assert payload["status_data"][-1] == {"date": "2024-03-15", "status": 2}


def test_persistence_failure_propagates():
    store = BrokenStore(PersistenceError("backend down"))
    store.insert("profiles", {"user_id": "u11"})
    with pytest.raises(PersistenceError):
        StreakService(store).calculate_streak("u11", date(2024, 1, 1))


def test_read_failure_leaves_profile_untouched(today):
    class FailingReads(MemoryStore):
        def query_many(self, table, filters, order_by=None, ranges=None):
            if table == "daily_task_sets":
                raise PersistenceError("read failed")
            return super().query_many(table, filters, order_by, ranges)

    store = FailingReads()
    store.insert("profiles", {"user_id": "u12", "user_streak": 4})
    with pytest.raises(PersistenceError):
        StreakService(store).calculate_streak("u12", today)
    assert store.query_one("profiles", {"user_id": "u12"})["user_streak"] == 4
