from fastapi import APIRouter, Depends

from dailyfive.api.deps import get_badge_service
from dailyfive.core.auth import get_current_user_id
from dailyfive.features.badges.service import BadgeService

router = APIRouter()


@router.get("/v1/badges")
def list_badges(
    user_id: str = Depends(get_current_user_id),
    service: BadgeService = Depends(get_badge_service),
):
    grouped = service.list_badges(user_id)
    return {key: [badge.to_dict() for badge in badges] for key, badges in grouped.items()}


@router.post("/v1/badges/refresh")
def refresh_badges(
    user_id: str = Depends(get_current_user_id),
    service: BadgeService = Depends(get_badge_service),
):
    unlocked = service.refresh_progress(user_id)
    return {"unlocked": [badge.id for badge in unlocked]}


@router.post("/v1/badges/{badge_id}/claim")
def claim_badge(
    badge_id: int,
    user_id: str = Depends(get_current_user_id),
    service: BadgeService = Depends(get_badge_service),
):
    """Claim an achieved badge and collect its points."""
    user_badge, balance = service.claim_badge(user_id, badge_id)
    return {"badge": user_badge.to_dict(), "achievement_points": balance}
