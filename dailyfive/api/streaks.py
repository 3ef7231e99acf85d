from datetime import date

from fastapi import APIRouter, Depends

from dailyfive.api.deps import get_badge_service, get_streak_service, get_today
from dailyfive.core.auth import get_current_user_id
from dailyfive.features.badges.service import BadgeService
from dailyfive.features.streaks.service import StreakService

router = APIRouter()


@router.get("/v1/streaks/current")
def get_current_streak(
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    streaks: StreakService = Depends(get_streak_service),
    badges: BadgeService = Depends(get_badge_service),
):
    """Recalculate and persist the user's streak, then advance badge progress."""
    result = streaks.calculate_streak(user_id, today)
    unlocked = badges.refresh_progress(user_id)
    payload = result.to_dict()
    payload["badges_unlocked"] = [badge.id for badge in unlocked]
    return payload
