from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..models.people import PagedResponse, UserProfileResponse
from ..services.people_service import PeopleService, get_people_service

router = APIRouter(prefix="/locations", tags=["locations"])


@router.get("/{location_id}/companies", response_model=PagedResponse[UserProfileResponse])
async def list_location_companies(
    location_id: int,
    telegram_id: int = Query(..., alias="telegramId"),
    page: int = Query(1),
    page_size: Optional[int] = Query(None, alias="pageSize"),
    service: PeopleService = Depends(get_people_service),
):
    """Other people who keep this location among their favorites."""
    return await service.companies_at_location(location_id, telegram_id, page, page_size)


__all__ = ["router"]
