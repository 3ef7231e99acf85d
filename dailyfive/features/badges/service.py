"""
Badge progress and claiming.

Three badge families track three counters:
- streak => profile.user_streak
- tasks  => profile.completed_tasks
- login  => distinct days with an assigned task set
Claiming an achieved badge adds its points to profile.achievement_points.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from dailyfive.core.errors import ConflictError, DuplicateRowError, NotFoundError, PersistenceError, ValidationError
from dailyfive.core.logging import log_event
from dailyfive.features.profiles.service import ProfileService
from dailyfive.features.store import Store
from dailyfive.models.rewards import BADGE_TYPES, Badge, BadgeType, UserBadge, UserStats

# (badge_type, level, name, requirement, points)
DEFAULT_BADGES = [
    ("streak", 1, "Warming Up", 3, 10),
    ("streak", 2, "One Week Strong", 7, 25),
    ("streak", 3, "Fortnight Focus", 14, 50),
    ("streak", 4, "Unbreakable", 30, 100),
    ("tasks", 1, "First Steps", 10, 10),
    ("tasks", 2, "Getting Things Done", 50, 25),
    ("tasks", 3, "Centurion", 100, 50),
    ("tasks", 4, "Task Master", 250, 100),
    ("login", 1, "Regular", 3, 5),
    ("login", 2, "Habitual", 7, 15),
    ("login", 3, "Devoted", 30, 50),
    ("login", 4, "Lifer", 100, 100),
]


def seed_badges(store: Store) -> int:
    if store.query_many("badges", {}):
        return 0
    rows = [
        {"badge_type": badge_type, "level": level, "name": name, "requirement": requirement, "points": points}
        for badge_type, level, name, requirement, points in DEFAULT_BADGES
    ]
    return len(store.insert_many("badges", rows))


class BadgeService:
    def __init__(self, store: Store):
        self.store = store
        self.profiles = ProfileService(store)

    def user_stats(self, user_id: str) -> UserStats:
        profile = self.profiles.get_or_create_profile(user_id)
        rows = self.store.query_many("daily_task_sets", {"user_id": user_id})
        return UserStats(
            streak=profile.user_streak,
            completed_tasks=profile.completed_tasks,
            login_days=len({row["created_date"] for row in rows}),
        )

    def update_progress(self, user_id: str, badge_type: BadgeType, progress: int) -> List[Badge]:
        """Record progress on every badge of ``badge_type``; return newly achieved badges."""
        if badge_type not in BADGE_TYPES:
            raise ValidationError(f"Unknown badge type '{badge_type}'")

        newly_achieved: List[Badge] = []
        for badge in self._badges(badge_type):
            achieved = progress >= badge.requirement
            patch = {
                "progress": progress,
                "is_achieved": achieved,
                "achieved_at": datetime.now(timezone.utc) if achieved else None,
            }
            current = self._user_badge_row(user_id, badge.id)
            if current is None:
                try:
                    self.store.insert("user_badges", {"user_id": user_id, "badge_id": badge.id, **patch})
                except DuplicateRowError:
                    current = self._user_badge_row(user_id, badge.id)
                else:
                    if achieved:
                        newly_achieved.append(badge)
                    continue

            # Achieved badges are frozen
            if current["is_achieved"]:
                continue
            self.store.update("user_badges", {"id": current["id"], "is_achieved": False}, patch)
            if achieved:
                newly_achieved.append(badge)

        return newly_achieved

    def refresh_progress(self, user_id: str) -> List[Badge]:
        stats = self.user_stats(user_id)
        unlocked: List[Badge] = []
        for badge_type in BADGE_TYPES:
            unlocked.extend(self.update_progress(user_id, badge_type, stats.progress_for(badge_type)))
        for badge in unlocked:
            log_event(
                "info",
                "badge.achieved",
                user_id=user_id,
                event_type="badge.achieved",
                extra={"badge_id": badge.id, "badge_type": badge.badge_type, "level": badge.level},
            )
        return unlocked

    def list_badges(self, user_id: str) -> Dict[str, List[UserBadge]]:
        rows = {row["badge_id"]: row for row in self.store.query_many("user_badges", {"user_id": user_id})}
        earned: List[UserBadge] = []
        available: List[UserBadge] = []
        for badge in self._badges():
            user_badge = self._to_user_badge(badge, rows.get(badge.id))
            (earned if user_badge.is_achieved else available).append(user_badge)
        return {"earned": earned, "available": available}

    def claim_badge(self, user_id: str, badge_id: int) -> Tuple[UserBadge, int]:
        """Claim an achieved badge once; returns the badge and the new point balance."""
        row = self.store.query_one("badges", {"id": badge_id})
        if row is None:
            raise NotFoundError(f"Badge {badge_id} not found")
        badge = Badge.from_row(row)

        stats = self.user_stats(user_id)
        if stats.progress_for(badge.badge_type) < badge.requirement:
            raise ValidationError(f"Badge requirement not met: {badge.name} needs {badge.requirement}")

        self.update_progress(user_id, badge.badge_type, stats.progress_for(badge.badge_type))
        current = self._user_badge_row(user_id, badge.id)
        claimed_at = datetime.now(timezone.utc)
        # claimed_at IS NULL guard makes a double claim a no-op
        changed = self.store.update(
            "user_badges",
            {"id": current["id"], "claimed_at": None},
            {"claimed_at": claimed_at, "is_achieved": True},
        )
        if not changed:
            raise ConflictError(f"Badge {badge.name} already claimed")

        try:
            points = self.store.increment("profiles", {"user_id": user_id}, "achievement_points", badge.points)
        except PersistenceError:
            # Reopen the claim so it can be retried
            self.store.update("user_badges", {"id": current["id"]}, {"claimed_at": None})
            raise
        log_event(
            "info",
            "badge.claimed",
            user_id=user_id,
            event_type="badge.claimed",
            extra={"badge_id": badge.id, "points": badge.points, "balance": points},
        )
        return self._to_user_badge(badge, self._user_badge_row(user_id, badge.id)), points

    # Internal helpers -------------------------------------------------
    def _badges(self, badge_type: Optional[str] = None) -> List[Badge]:
        filters = {"badge_type": badge_type} if badge_type else {}
        rows = self.store.query_many("badges", filters, order_by="id")
        return sorted((Badge.from_row(row) for row in rows), key=lambda b: (BADGE_TYPES.index(b.badge_type), b.level))

    def _user_badge_row(self, user_id: str, badge_id: int) -> Optional[dict]:
        return self.store.query_one("user_badges", {"user_id": user_id, "badge_id": badge_id})

    @staticmethod
    def _to_user_badge(badge: Badge, row: Optional[dict]) -> UserBadge:
        if row is None:
            return UserBadge(badge=badge)
        return UserBadge(
            badge=badge,
            progress=row["progress"],
            is_achieved=bool(row["is_achieved"]),
            achieved_at=row.get("achieved_at"),
            claimed_at=row.get("claimed_at"),
        )
