from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .identifiers import PyObjectId, TelegramId
from .people import UserProfileResponse


class NotificationType(str, Enum):
    LIKE = "like"
    MATCH = "match"


class NotificationDocument(BaseModel):
    """Notification record stored in MongoDB."""

    model_config = ConfigDict(populate_by_name=True, extra="allow", arbitrary_types_allowed=True)

    id: PyObjectId = Field(alias="_id")
    telegram_id: TelegramId = Field(alias="telegramId")
    type: NotificationType
    from_telegram_id: Optional[TelegramId] = Field(default=None, alias="fromTelegramId")
    message: Optional[str] = None
    is_read: bool = Field(default=False, alias="isRead")
    created_at: datetime = Field(alias="createdAt")
    is_deleted: bool = Field(default=False, alias="isDeleted")


class NotificationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: NotificationType
    is_read: bool = Field(alias="isRead")
    created_at: datetime = Field(alias="createdAt")
    message: Optional[str] = None
    from_user: Optional[UserProfileResponse] = Field(default=None, alias="fromUser")


class NotificationsResponse(BaseModel):
    notifications: List[NotificationResponse] = Field(default_factory=list)


class MarkNotificationAsReadRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    telegram_id: TelegramId = Field(alias="telegramId")
    notification_id: str = Field(alias="notificationId", min_length=1)


__all__ = [
    "MarkNotificationAsReadRequest",
    "NotificationDocument",
    "NotificationResponse",
    "NotificationType",
    "NotificationsResponse",
]
