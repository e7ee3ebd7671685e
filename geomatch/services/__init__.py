from .exceptions import InvalidArgumentError, PeopleServiceError, UserNotFoundError
from .notification_service import (
    NotificationService,
    drain_notifications,
    get_notification_service,
    schedule_notification,
)
from .people_service import PeopleService, get_people_service

__all__ = [
    "InvalidArgumentError",
    "NotificationService",
    "PeopleService",
    "PeopleServiceError",
    "UserNotFoundError",
    "drain_notifications",
    "get_notification_service",
    "get_people_service",
    "schedule_notification",
]
