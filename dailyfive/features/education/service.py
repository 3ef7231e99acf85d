"""
Education content: links to short articles, videos and exercises.

The list is curated by operators through ``add_content``; users only read it.
"""

from datetime import datetime, timezone
from typing import List, Optional
from urllib.parse import urlparse

from dailyfive.core.errors import ValidationError
from dailyfive.features.store import Store
from dailyfive.models.content import EducationItem


def _check_url(value: Optional[str], field: str) -> None:
    if value is None:
        return
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError(f"{field} must be an http(s) URL")


class EducationService:
    def __init__(self, store: Store):
        self.store = store

    def list_content(self) -> List[EducationItem]:
        rows = self.store.query_many("education_content", {}, order_by="-created_at")
        return [EducationItem.from_row(row) for row in rows]

    def add_content(
        self,
        title: str,
        content_url: str,
        description: Optional[str] = None,
        image_url: Optional[str] = None,
        duration: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> EducationItem:
        title = (title or "").strip()
        if not title:
            raise ValidationError("Education content needs a title")
        _check_url(content_url or "", "content_url")
        _check_url(image_url, "image_url")

        row = self.store.insert(
            "education_content",
            {
                "title": title,
                "description": description,
                "content_url": content_url,
                "image_url": image_url,
                "duration": duration,
                "created_at": created_at or datetime.now(timezone.utc),
            },
        )
        return EducationItem.from_row(row)
