from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Quote:
    id: Optional[int]
    text: str
    author: str

    @classmethod
    def from_row(cls, row: dict) -> Quote:
        return cls(id=row["id"], text=row["text"], author=row.get("author") or "Daily Five")

    def to_dict(self) -> dict:
        return {"id": self.id, "text": self.text, "author": self.author}


@dataclass(frozen=True)
class EducationItem:
    id: int
    title: str
    description: Optional[str]
    content_url: str
    image_url: Optional[str]
    duration: Optional[str]
    created_at: datetime

    @classmethod
    def from_row(cls, row: dict) -> EducationItem:
        return cls(
            id=row["id"],
            title=row["title"],
            description=row.get("description"),
            content_url=row["content_url"],
            image_url=row.get("image_url"),
            duration=row.get("duration"),
            created_at=row["created_at"],
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "content_url": self.content_url,
            "image_url": self.image_url,
            "duration": self.duration,
            "created_at": self.created_at.isoformat(),
        }
