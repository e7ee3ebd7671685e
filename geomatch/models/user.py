from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.functional_validators import BeforeValidator

from .identifiers import PyObjectId, TelegramId


def _none_as_empty_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, list):
        return [item for item in value if item is not None]
    return value


def _none_as_empty_str(value: Any) -> Any:
    return "" if value is None else value


def _none_as_false(value: Any) -> Any:
    return False if value is None else value


# Incomplete profiles are stored with null lists and names
StoredList = Annotated[List[str], BeforeValidator(_none_as_empty_list)]
StoredStr = Annotated[str, BeforeValidator(_none_as_empty_str)]
StoredFlag = Annotated[bool, BeforeValidator(_none_as_false)]


class UserDocument(BaseModel):
    """User record as stored by profile management. Read-only to matching."""

    model_config = ConfigDict(populate_by_name=True, extra="allow", arbitrary_types_allowed=True)

    id: Optional[PyObjectId] = Field(default=None, alias="_id")
    telegram_id: TelegramId = Field(alias="telegramId")
    username: StoredStr = ""
    first_name: Optional[str] = Field(default=None, alias="firstName")
    gender: Optional[str] = None
    partner_preference: Optional[str] = Field(default=None, alias="partnerPreference")
    interests: StoredList = Field(default_factory=list)
    profile_description: Optional[str] = Field(default=None, alias="profileDescription")
    profile_photos: StoredList = Field(default_factory=list, alias="profilePhotos")
    age_range: StoredStr = Field(default="", alias="ageRange")
    is_student: StoredFlag = Field(default=False, alias="isStudent")
    is_active: bool = Field(default=True, alias="isActive")
    is_deleted: bool = Field(default=False, alias="isDeleted")

    @property
    def is_profile_complete(self) -> bool:
        has_description = bool((self.profile_description or "").strip())
        has_photo = any(isinstance(p, str) and p.strip() for p in self.profile_photos)
        return has_description and has_photo


class LocationDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow", arbitrary_types_allowed=True)

    id: int
    name: StoredStr = ""
    category_id: Optional[int] = Field(default=None, alias="categoryId")
    is_deleted: bool = Field(default=False, alias="isDeleted")


__all__ = ["LocationDocument", "UserDocument"]
