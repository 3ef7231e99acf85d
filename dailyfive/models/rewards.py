"""Badge and market domain models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Optional

BadgeType = Literal["streak", "tasks", "login"]
BADGE_TYPES = ("streak", "tasks", "login")


def _iso(moment: Optional[datetime]) -> Optional[str]:
    return moment.isoformat() if moment else None


@dataclass(frozen=True)
class Badge:
    id: int
    badge_type: BadgeType
    level: int
    name: str
    requirement: int
    points: int

    @classmethod
    def from_row(cls, row: dict) -> Badge:
        return cls(
            id=row["id"],
            badge_type=row["badge_type"],
            level=row["level"],
            name=row["name"],
            requirement=row["requirement"],
            points=row["points"],
        )


@dataclass
class UserBadge:
    badge: Badge
    progress: int = 0
    is_achieved: bool = False
    achieved_at: Optional[datetime] = None
    claimed_at: Optional[datetime] = None

    @property
    def claimed(self) -> bool:
        return self.claimed_at is not None

    def to_dict(self) -> dict:
        return {
            "badge_id": self.badge.id,
            "badge_type": self.badge.badge_type,
            "level": self.badge.level,
            "name": self.badge.name,
            "requirement": self.badge.requirement,
            "points": self.badge.points,
            "progress": self.progress,
            "is_achieved": self.is_achieved,
            "achieved_at": _iso(self.achieved_at),
            "claimed": self.claimed,
            "claimed_at": _iso(self.claimed_at),
        }


@dataclass(frozen=True)
class UserStats:
    streak: int
    completed_tasks: int
    login_days: int

    def progress_for(self, badge_type: BadgeType) -> int:
        if badge_type == "streak":
            return self.streak
        if badge_type == "tasks":
            return self.completed_tasks
        return self.login_days


@dataclass(frozen=True)
class ShopItem:
    id: int
    name: str
    price: int
    description: Optional[str] = None
    is_active: bool = True

    @classmethod
    def from_row(cls, row: dict) -> ShopItem:
        return cls(
            id=row["id"],
            name=row["name"],
            price=row["price"],
            description=row.get("description"),
            is_active=bool(row.get("is_active", True)),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
        }


@dataclass(frozen=True)
class Purchase:
    id: int
    user_id: str
    item_id: int
    price_paid: int
    purchase_date: datetime

    @classmethod
    def from_row(cls, row: dict) -> Purchase:
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            item_id=row["item_id"],
            price_paid=row["price_paid"],
            purchase_date=row["purchase_date"],
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "item_id": self.item_id,
            "price_paid": self.price_paid,
            "purchase_date": _iso(self.purchase_date),
        }
