from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass
class UserProfile:
    """Counters kept per user. Only user_streak is written by the streak engine."""

    user_id: str
    user_streak: int = 0
    completed_tasks: int = 0
    achievement_points: int = 0

    @classmethod
    def from_row(cls, row: dict) -> UserProfile:
        return cls(
            user_id=row["user_id"],
            user_streak=row.get("user_streak") or 0,
            completed_tasks=row.get("completed_tasks") or 0,
            achievement_points=row.get("achievement_points") or 0,
        )

    def to_dict(self) -> dict:
        return asdict(self)
