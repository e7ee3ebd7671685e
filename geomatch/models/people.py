from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from .identifiers import TelegramId

T = TypeVar("T")


class LocationInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    category_id: Optional[int] = Field(default=None, alias="categoryId")


class UserProfileResponse(BaseModel):
    """Public profile card shown in people listings."""

    model_config = ConfigDict(populate_by_name=True)

    telegram_id: TelegramId = Field(alias="telegramId")
    username: str = ""
    first_name: Optional[str] = Field(default=None, alias="firstName")
    age_range: str = Field(default="", alias="ageRange")
    gender: Optional[str] = None
    is_student: bool = Field(default=False, alias="isStudent")
    interests: List[str] = Field(default_factory=list)
    profile_description: Optional[str] = Field(default=None, alias="profileDescription")
    profile_photos: List[str] = Field(default_factory=list, alias="profilePhotos")


class UserProfileWithLocationsResponse(UserProfileResponse):
    matching_locations: List[LocationInfo] = Field(default_factory=list, alias="matchingLocations")


class PagedResponse(BaseModel, Generic[T]):
    model_config = ConfigDict(populate_by_name=True)

    data: List[T] = Field(default_factory=list)
    page: int = 1
    page_size: int = Field(default=20, alias="pageSize")
    total_count: int = Field(default=0, alias="totalCount")
    total_pages: int = Field(default=0, alias="totalPages")
    has_previous_page: bool = Field(default=False, alias="hasPreviousPage")
    has_next_page: bool = Field(default=False, alias="hasNextPage")


class LikeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    telegram_id: TelegramId = Field(alias="telegramId")
    target_telegram_id: TelegramId = Field(alias="targetTelegramId")
    message: Optional[str] = None


class DislikeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    telegram_id: TelegramId = Field(alias="telegramId")
    target_telegram_id: TelegramId = Field(alias="targetTelegramId")


class MatchUserInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    telegram_id: TelegramId = Field(alias="telegramId")
    username: str = ""
    first_name: Optional[str] = Field(default=None, alias="firstName")


class MatchInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    created_at: datetime = Field(alias="createdAt")
    user1: MatchUserInfo
    user2: MatchUserInfo


class LikeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    is_match: bool = Field(default=False, alias="isMatch")
    match: Optional[MatchInfo] = None


class DislikeResponse(BaseModel):
    success: bool = True


class MatchSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    match_id: str = Field(alias="matchId")
    matched_at: datetime = Field(alias="matchedAt")
    user: UserProfileResponse


class MatchesResponse(BaseModel):
    matches: List[MatchSummary] = Field(default_factory=list)


__all__ = [
    "DislikeRequest",
    "DislikeResponse",
    "LikeRequest",
    "LikeResponse",
    "LocationInfo",
    "MatchInfo",
    "MatchSummary",
    "MatchUserInfo",
    "MatchesResponse",
    "PagedResponse",
    "UserProfileResponse",
    "UserProfileWithLocationsResponse",
]
