from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Literal, Optional

TASK_SLOTS = (1, 2, 3, 4, 5)

# 0 = nothing done, 1 = partially done, 2 = all five done
DayStatus = Literal[0, 1, 2]


@dataclass(frozen=True)
class TaskCatalogEntry:
    """One possible daily task. Admin-populated, read-only here."""

    id: int
    title: str
    icon: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> TaskCatalogEntry:
        return cls(
            id=row["id"],
            title=row["title"],
            icon=row.get("icon"),
            description=row.get("description"),
        )


@dataclass
class DailyTaskSet:
    """
    The five tasks assigned to one user for one calendar date.
    Day-level, no timezone: `created_date` is a plain date.
    """

    id: int
    user_id: str
    created_date: date
    task_ids: List[int]
    completed: List[bool] = field(default_factory=lambda: [False] * len(TASK_SLOTS))
    tasks: List[Optional[TaskCatalogEntry]] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: dict, catalog: Optional[dict] = None) -> DailyTaskSet:
        task_ids = [row[f"task{slot}_id"] for slot in TASK_SLOTS]
        task_set = cls(
            id=row["id"],
            user_id=row["user_id"],
            created_date=row["created_date"],
            task_ids=task_ids,
            completed=[bool(row[f"task{slot}_completed"]) for slot in TASK_SLOTS],
        )
        if catalog:
            task_set.tasks = [catalog.get(task_id) for task_id in task_ids]
        return task_set

    @property
    def completed_count(self) -> int:
        return sum(1 for flag in self.completed if flag)

    @property
    def is_fully_completed(self) -> bool:
        return all(self.completed)

    @property
    def status(self) -> DayStatus:
        return day_status(self.completed_count, len(self.completed))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "created_date": self.created_date.isoformat(),
            "completed_count": self.completed_count,
            "status": self.status,
            "tasks": [
                {
                    "slot": slot,
                    "task_id": task_id,
                    "title": task.title if task else None,
                    "icon": task.icon if task else None,
                    "description": task.description if task else None,
                    "completed": done,
                }
                for slot, task_id, task, done in zip(
                    TASK_SLOTS,
                    self.task_ids,
                    self.tasks or [None] * len(self.task_ids),
                    self.completed,
                )
            ],
        }


def day_status(completed_count: int, total: int = len(TASK_SLOTS)) -> DayStatus:
    if completed_count >= total:
        return 2
    if completed_count > 0:
        return 1
    return 0


@dataclass(frozen=True)
class StreakStatusEntry:
    date: date
    status: DayStatus

    def to_dict(self) -> dict:
        return {"date": self.date.isoformat(), "status": self.status}


@dataclass
class StreakResult:
    user_id: str
    streak: int
    status_data: List[StreakStatusEntry]
    as_of: date

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "streak": self.streak,
            "as_of": self.as_of.isoformat(),
            "status_data": [entry.to_dict() for entry in self.status_data],
        }
