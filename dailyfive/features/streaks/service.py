from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, List, Optional

from dailyfive.core import dates
from dailyfive.core.config import settings
from dailyfive.core.logging import log_event
from dailyfive.features.profiles.service import ProfileService
from dailyfive.features.store import Store
from dailyfive.models.daily_tasks import DailyTaskSet, StreakResult, StreakStatusEntry


class StreakService:
    """
    Consecutive-day streak over fully completed daily task sets.

    The scan walks backward from today inside a fixed lookback window. An
    unfinished today is skipped rather than counted as a break, so a streak
    stays visible until the day is over. Streaks longer than the window are
    reported as the window length.
    """

    def __init__(
        self,
        store: Store,
        window_days: Optional[int] = None,
        status_days: Optional[int] = None,
    ):
        self.store = store
        self.window_days = window_days or settings.STREAK_WINDOW_DAYS
        self.status_days = status_days or settings.STATUS_WINDOW_DAYS
        self.profiles = ProfileService(store)

    def calculate_streak(self, user_id: str, today: Optional[date] = None) -> StreakResult:
        """Compute the streak and 7-day summary, then persist the streak."""
        current_date = today or dates.today()
        window_start = current_date - timedelta(days=self.window_days - 1)
        fetch_start = min(window_start, current_date - timedelta(days=self.status_days - 1))

        rows = self.store.query_many(
            "daily_task_sets",
            {"user_id": user_id},
            order_by="created_date",
            ranges={"created_date": (fetch_start, current_date)},
        )
        sets: Dict[date, DailyTaskSet] = {}
        for row in rows:
            task_set = DailyTaskSet.from_row(row)
            sets[task_set.created_date] = task_set

        completed = {day: task_set.is_fully_completed for day, task_set in sets.items()}
        streak = self._scan(completed, current_date, window_start)
        status_data = self._status_summary(sets, current_date)

        # Only written once the whole scan succeeded
        self.profiles.get_or_create_profile(user_id)
        self.store.update("profiles", {"user_id": user_id}, {"user_streak": streak})

        log_event(
            "info",
            "streak.calculated",
            user_id=user_id,
            event_type="streak.calculated",
            extra={"streak": streak, "day": dates.iso_day(current_date)},
        )
        return StreakResult(user_id=user_id, streak=streak, status_data=status_data, as_of=current_date)

    # Internal helpers -------------------------------------------------
    @staticmethod
    def _scan(completed: Dict[date, bool], today: date, window_start: date) -> int:
        day = today
        if not completed.get(day, False):
            # Today still in progress: neither breaks nor extends the streak
            day -= timedelta(days=1)

        streak = 0
        while day >= window_start and completed.get(day, False):
            streak += 1
            day -= timedelta(days=1)
        return streak

    def _status_summary(self, sets: Dict[date, DailyTaskSet], today: date) -> List[StreakStatusEntry]:
        summary = []
        for day in dates.trailing_days(today, self.status_days):
            task_set = sets.get(day)
            summary.append(StreakStatusEntry(date=day, status=task_set.status if task_set else 0))
        return summary
