from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Note:
    id: int
    user_id: str
    title: str
    content: str
    created_at: datetime

    @classmethod
    def from_row(cls, row: dict) -> Note:
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            title=row.get("title") or "",
            content=row.get("content") or "",
            created_at=row["created_at"],
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "created_at": self.created_at.isoformat(),
        }
