from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from dailyfive.api.deps import get_note_service
from dailyfive.core.auth import get_current_user_id
from dailyfive.features.notes.service import NoteService

router = APIRouter()


class NoteRequest(BaseModel):
    title: str = Field("", max_length=200)
    content: str = Field("", max_length=10000)


@router.get("/v1/notes")
def list_notes(
    user_id: str = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service),
):
    return {"notes": [note.to_dict() for note in service.list_notes(user_id)]}


@router.post("/v1/notes", status_code=201)
def create_note(
    req: NoteRequest,
    user_id: str = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service),
):
    return service.create_note(user_id, req.title, req.content).to_dict()


@router.delete("/v1/notes/{note_id}", status_code=204)
def delete_note(
    note_id: int,
    user_id: str = Depends(get_current_user_id),
    service: NoteService = Depends(get_note_service),
):
    service.delete_note(user_id, note_id)
