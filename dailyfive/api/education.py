from fastapi import APIRouter, Depends

from dailyfive.api.deps import get_education_service
from dailyfive.features.education.service import EducationService

router = APIRouter()


@router.get("/v1/education")
def list_education_content(service: EducationService = Depends(get_education_service)):
    return {"items": [item.to_dict() for item in service.list_content()]}
