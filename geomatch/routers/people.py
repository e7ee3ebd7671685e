"""People discovery and like/dislike endpoints backed by the people service."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ..models.people import (
    DislikeRequest,
    DislikeResponse,
    LikeRequest,
    LikeResponse,
    MatchesResponse,
    PagedResponse,
    UserProfileWithLocationsResponse,
)
from ..services.exceptions import InvalidArgumentError, UserNotFoundError
from ..services.people_service import PeopleService, get_people_service

router = APIRouter(prefix="/people", tags=["people"])

SearchPage = PagedResponse[UserProfileWithLocationsResponse]


@router.get("/search", response_model=SearchPage)
async def search_people(
    telegram_id: int = Query(..., alias="telegramId"),
    page: int = Query(1),
    page_size: Optional[int] = Query(None, alias="pageSize"),
    service: PeopleService = Depends(get_people_service),
):
    return await service.search_combined(telegram_id, page, page_size)


@router.get("/by-locations", response_model=SearchPage)
async def search_people_by_locations(
    telegram_id: int = Query(..., alias="telegramId"),
    page: int = Query(1),
    page_size: Optional[int] = Query(None, alias="pageSize"),
    service: PeopleService = Depends(get_people_service),
):
    return await service.search_by_locations(telegram_id, page, page_size)


@router.get("/by-interests", response_model=SearchPage)
async def search_people_by_interests(
    telegram_id: int = Query(..., alias="telegramId"),
    page: int = Query(1),
    page_size: Optional[int] = Query(None, alias="pageSize"),
    service: PeopleService = Depends(get_people_service),
):
    return await service.search_by_interests(telegram_id, page, page_size)


@router.get("/all", response_model=SearchPage)
async def list_all_people(
    telegram_id: int = Query(..., alias="telegramId"),
    page: int = Query(1),
    page_size: Optional[int] = Query(None, alias="pageSize"),
    service: PeopleService = Depends(get_people_service),
):
    return await service.search_all(telegram_id, page, page_size)


@router.post("/like", response_model=LikeResponse)
async def like_user(
    payload: LikeRequest,
    response: Response,
    service: PeopleService = Depends(get_people_service),
) -> LikeResponse:
    try:
        result = await service.like(payload.telegram_id, payload.target_telegram_id, payload.message)
    except InvalidArgumentError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from None
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from None

    if result.is_match:
        response.status_code = status.HTTP_201_CREATED
    return result


@router.post("/dislike", response_model=DislikeResponse, status_code=status.HTTP_201_CREATED)
async def dislike_user(
    payload: DislikeRequest,
    service: PeopleService = Depends(get_people_service),
) -> DislikeResponse:
    try:
        success = await service.dislike(payload.telegram_id, payload.target_telegram_id)
    except InvalidArgumentError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from None
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from None
    return DislikeResponse(success=success)


@router.get("/matches", response_model=MatchesResponse)
async def list_matches(
    telegram_id: int = Query(..., alias="telegramId"),
    service: PeopleService = Depends(get_people_service),
) -> MatchesResponse:
    matches = await service.list_matches(telegram_id)
    return MatchesResponse(matches=matches)


__all__ = ["router"]
