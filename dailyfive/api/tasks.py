from datetime import date

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from dailyfive.api.deps import get_task_service, get_today
from dailyfive.core import dates
from dailyfive.core.auth import get_current_user_id
from dailyfive.features.tasks.service import DailyTaskService

router = APIRouter()


class CompletionRequest(BaseModel):
    completed: bool


@router.get("/v1/tasks/today")
def get_today_tasks(
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    service: DailyTaskService = Depends(get_task_service),
):
    """Return today's five tasks, assigning them on the first call of the day."""
    return service.ensure_today_set(user_id, today).to_dict()


@router.post("/v1/tasks/today/{slot}/toggle")
def toggle_task(
    slot: int,
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    service: DailyTaskService = Depends(get_task_service),
):
    task_set, emitted = service.toggle_task(user_id, slot, today)
    return {"task_set": task_set.to_dict(), "emitted": emitted}


@router.put("/v1/tasks/today/{slot}")
def set_task_completed(
    slot: int,
    req: CompletionRequest,
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    service: DailyTaskService = Depends(get_task_service),
):
    """Idempotent variant of toggle: set the flag to an explicit value."""
    task_set, emitted = service.set_task_completed(user_id, slot, req.completed, today)
    return {"task_set": task_set.to_dict(), "emitted": emitted}


@router.get("/v1/tasks/{day}")
def get_task_set(
    day: str,
    user_id: str = Depends(get_current_user_id),
    service: DailyTaskService = Depends(get_task_service),
):
    return service.get_set(user_id, dates.parse_day(day)).to_dict()
