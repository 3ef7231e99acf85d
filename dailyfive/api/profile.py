from fastapi import APIRouter, Depends

from dailyfive.api.deps import get_profile_service
from dailyfive.core.auth import get_current_user_id
from dailyfive.features.profiles.service import ProfileService

router = APIRouter()


@router.get("/v1/profile")
def get_profile(
    user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service),
):
    return service.get_or_create_profile(user_id).to_dict()
