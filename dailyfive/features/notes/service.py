from datetime import datetime, timezone
from typing import List

from dailyfive.core.errors import NotFoundError, ValidationError
from dailyfive.features.store import Store
from dailyfive.models.note import Note


class NoteService:
    def __init__(self, store: Store):
        self.store = store

    def create_note(self, user_id: str, title: str = "", content: str = "") -> Note:
        title = (title or "").strip()
        content = (content or "").strip()
        if not title and not content:
            raise ValidationError("A note needs a title or some content")

        row = self.store.insert(
            "notes",
            {
                "user_id": user_id,
                "title": title,
                "content": content,
                "created_at": datetime.now(timezone.utc),
            },
        )
        return Note.from_row(row)

    def list_notes(self, user_id: str) -> List[Note]:
        return [Note.from_row(row) for row in self.store.query_many("notes", {"user_id": user_id}, order_by="id")]

    def delete_note(self, user_id: str, note_id: int) -> None:
        if not self.store.delete("notes", {"id": note_id, "user_id": user_id}):
            raise NotFoundError(f"Note {note_id} not found")
