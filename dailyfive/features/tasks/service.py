from __future__ import annotations

import random
from datetime import date, datetime, timezone
from typing import Dict, List, Optional, Tuple

from dailyfive.core import dates
from dailyfive.core.errors import CatalogExhaustedError, DuplicateRowError, NotFoundError, ValidationError
from dailyfive.core.logging import log_event
from dailyfive.features.profiles.service import ProfileService
from dailyfive.features.store import Store
from dailyfive.features.tasks.catalog import load_catalog
from dailyfive.models.daily_tasks import TASK_SLOTS, DailyTaskSet, TaskCatalogEntry

TASKS_PER_DAY = len(TASK_SLOTS)


class DailyTaskService:
    """Lazy once-per-day task assignment and completion tracking."""

    def __init__(self, store: Store, rng: Optional[random.Random] = None):
        self.store = store
        self.rng = rng or random.Random()
        self.profiles = ProfileService(store)

    def ensure_today_set(self, user_id: str, today: Optional[date] = None) -> DailyTaskSet:
        """
        Get or assign the task set for ``today`` (idempotent).

        Only the first call of the day inserts. A concurrent caller that loses
        the insert race gets the winning row back instead of a second set.
        """
        current_date = today or dates.today()
        existing = self._get_row(user_id, current_date)
        if existing:
            return self._hydrate(existing)

        catalog = load_catalog(self.store)
        picked = self._sample(catalog)
        row = {
            "user_id": user_id,
            "created_date": current_date,
            "created_at": datetime.now(timezone.utc),
        }
        for slot, entry in zip(TASK_SLOTS, picked):
            row[f"task{slot}_id"] = entry.id
            row[f"task{slot}_completed"] = False

        try:
            created = self.store.insert("daily_task_sets", row)
        except DuplicateRowError:
            log_event(
                "warning",
                "tasks.assign.conflict",
                user_id=user_id,
                event_type="tasks.assign.conflict",
                extra={"day": dates.iso_day(current_date)},
            )
            created = self._get_row(user_id, current_date)
            if created is None:
                raise
            return self._hydrate(created, catalog)

        log_event(
            "info",
            "tasks.assigned",
            user_id=user_id,
            event_type="tasks.assigned",
            extra={"day": dates.iso_day(current_date), "task_ids": [entry.id for entry in picked]},
        )
        return self._hydrate(created, catalog)

    def get_set(self, user_id: str, day: date) -> DailyTaskSet:
        row = self._get_row(user_id, day)
        if row is None:
            raise NotFoundError(f"No task set for {dates.iso_day(day)}")
        return self._hydrate(row)

    def toggle_task(self, user_id: str, slot: int, today: Optional[date] = None) -> Tuple[DailyTaskSet, List[dict]]:
        self._check_slot(slot)
        task_set = self.ensure_today_set(user_id, today)
        return self._apply(task_set, slot, not task_set.completed[slot - 1])

    def set_task_completed(
        self,
        user_id: str,
        slot: int,
        completed: bool,
        today: Optional[date] = None,
    ) -> Tuple[DailyTaskSet, List[dict]]:
        """Set one completion flag on today's set. No-op when already in that state."""
        self._check_slot(slot)
        task_set = self.ensure_today_set(user_id, today)
        if task_set.completed[slot - 1] == completed:
            return task_set, []
        return self._apply(task_set, slot, completed)

    # Internal helpers -------------------------------------------------
    def _apply(self, task_set: DailyTaskSet, slot: int, completed: bool) -> Tuple[DailyTaskSet, List[dict]]:
        user_id = task_set.user_id
        column = f"task{slot}_completed"
        # Only the caller that actually flips the flag counts it
        changed = self.store.update(
            "daily_task_sets",
            {"id": task_set.id, column: not completed},
            {column: completed},
        )
        current = self._hydrate(self.store.query_one("daily_task_sets", {"id": task_set.id}))
        if not changed:
            return current, []

        self.profiles.get_or_create_profile(user_id)
        # A None result means the counter is already at zero
        self.store.increment("profiles", {"user_id": user_id}, "completed_tasks", 1 if completed else -1)

        day = dates.iso_day(current.created_date)
        task_id = current.task_ids[slot - 1]
        emitted: List[dict] = [
            {
                "type": "task.completed" if completed else "task.uncompleted",
                "payload": {"userId": user_id, "day": day, "slot": slot, "taskId": task_id},
            }
        ]
        if completed and current.is_fully_completed:
            emitted.append({"type": "tasks.all_completed", "payload": {"userId": user_id, "day": day}})
            log_event("info", "tasks.all_completed", user_id=user_id, event_type="tasks.all_completed", extra={"day": day})
        return current, emitted

    def _sample(self, catalog: List[TaskCatalogEntry]) -> List[TaskCatalogEntry]:
        if len(catalog) < TASKS_PER_DAY:
            raise CatalogExhaustedError(
                f"Task catalog has {len(catalog)} entries, {TASKS_PER_DAY} are needed for a daily set"
            )
        shuffled = list(catalog)
        self.rng.shuffle(shuffled)
        return shuffled[:TASKS_PER_DAY]

    def _get_row(self, user_id: str, day: date) -> Optional[dict]:
        return self.store.query_one("daily_task_sets", {"user_id": user_id, "created_date": day})

    def _hydrate(self, row: dict, catalog: Optional[List[TaskCatalogEntry]] = None) -> DailyTaskSet:
        entries = catalog if catalog is not None else load_catalog(self.store)
        by_id: Dict[int, TaskCatalogEntry] = {entry.id: entry for entry in entries}
        return DailyTaskSet.from_row(row, by_id)

    @staticmethod
    def _check_slot(slot: int) -> None:
        if slot not in TASK_SLOTS:
            raise ValidationError(f"Task slot must be between {TASK_SLOTS[0]} and {TASK_SLOTS[-1]}, got {slot}")
