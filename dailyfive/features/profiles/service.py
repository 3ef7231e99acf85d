"""
Profile domain service.
- get_or_create_profile(user_id)
- get_profile(user_id)
"""

from datetime import datetime, timezone
from typing import Optional

from dailyfive.core.errors import DuplicateRowError
from dailyfive.features.store import Store
from dailyfive.models.profile import UserProfile


class ProfileService:
    def __init__(self, store: Store):
        self.store = store

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        row = self.store.query_one("profiles", {"user_id": user_id})
        return UserProfile.from_row(row) if row else None

    def get_or_create_profile(self, user_id: str) -> UserProfile:
        existing = self.get_profile(user_id)
        if existing:
            return existing

        try:
            row = self.store.insert(
                "profiles",
                {
                    "user_id": user_id,
                    "user_streak": 0,
                    "completed_tasks": 0,
                    "achievement_points": 0,
                    "created_at": datetime.now(timezone.utc),
                },
            )
        except DuplicateRowError:
            # Another request created it first
            row = self.store.query_one("profiles", {"user_id": user_id})
        return UserProfile.from_row(row)
