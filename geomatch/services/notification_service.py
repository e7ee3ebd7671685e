from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Set

from bson import ObjectId
from bson.errors import InvalidId

from .. import redis_bus
from ..config import get_settings
from ..db import get_db
from ..models.notification import (
    NotificationDocument,
    NotificationResponse,
    NotificationType,
)
from ..repositories.notifications import NotificationRepository
from ..repositories.users import UserRepository
from .profiles import to_profile_response

LOGGER = logging.getLogger("uvicorn.error")

NOTIFICATIONS_TOPIC = "notifications"

# Strong references to in-flight notification tasks until they finish
_pending_notifications: Set["asyncio.Task[None]"] = set()


def _on_notification_done(task: "asyncio.Task[None]") -> None:
    _pending_notifications.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        LOGGER.warning("Notification task %s failed: %r", task.get_name(), exc)


def schedule_notification(
    send: Callable[[], Awaitable[object]],
    *,
    label: str,
    timeout: float,
) -> "asyncio.Task[None]":
    """Run ``send`` in the background, bounded by ``timeout``. Never raises into the caller."""

    async def _run() -> None:
        await asyncio.wait_for(send(), timeout=timeout)

    task = asyncio.create_task(_run(), name=f"{label}-notification")
    _pending_notifications.add(task)
    task.add_done_callback(_on_notification_done)
    return task


async def drain_notifications() -> None:
    """Wait for every notification scheduled so far to finish or time out."""
    if _pending_notifications:
        await asyncio.gather(*list(_pending_notifications), return_exceptions=True)


class NotificationService:
    """Creates and reads like/match notifications.

    Creation persists the record and announces it on the Redis bus so that a
    delivery worker (bot, push, webhook) can pick it up. Delivery itself is not
    handled here.
    """

    def __init__(
        self,
        repository: NotificationRepository,
        user_repo: UserRepository,
        *,
        list_limit: int = 50,
    ) -> None:
        self._repository = repository
        self._user_repo = user_repo
        self._list_limit = list_limit

    async def create_like_notification(
        self,
        to_telegram_id: int,
        from_telegram_id: int,
        message: Optional[str] = None,
    ) -> NotificationResponse:
        LOGGER.debug(
            "create_like_notification: to=%s from=%s", to_telegram_id, from_telegram_id
        )
        return await self._create(NotificationType.LIKE, to_telegram_id, from_telegram_id, message)

    async def create_match_notification(
        self,
        to_telegram_id: int,
        from_telegram_id: int,
    ) -> NotificationResponse:
        LOGGER.debug(
            "create_match_notification: to=%s from=%s", to_telegram_id, from_telegram_id
        )
        return await self._create(NotificationType.MATCH, to_telegram_id, from_telegram_id, None)

    async def _create(
        self,
        notification_type: NotificationType,
        to_telegram_id: int,
        from_telegram_id: int,
        message: Optional[str],
    ) -> NotificationResponse:
        document = await self._repository.insert(
            telegram_id=to_telegram_id,
            notification_type=notification_type,
            from_telegram_id=from_telegram_id,
            message=message,
        )
        LOGGER.info("%s notification created: id=%s", notification_type.value.capitalize(), document.id)
        await redis_bus.publish(
            NOTIFICATIONS_TOPIC,
            {
                "type": "notification_created",
                "notificationId": str(document.id),
                "notificationType": notification_type.value,
                "telegramId": to_telegram_id,
                "fromTelegramId": from_telegram_id,
            },
        )
        responses = await self._to_responses([document])
        return responses[0]

    async def list_notifications(self, telegram_id: int, unread_only: bool = False) -> List[NotificationResponse]:
        documents = await self._repository.list_for_user(
            telegram_id, unread_only=unread_only, limit=self._list_limit
        )
        return await self._to_responses(documents)

    async def mark_as_read(self, notification_id: str, telegram_id: int) -> bool:
        try:
            object_id = ObjectId(notification_id)
        except (InvalidId, TypeError):
            return False
        return await self._repository.mark_read(object_id, telegram_id)

    async def _to_responses(self, documents: List[NotificationDocument]) -> List[NotificationResponse]:
        senders = await self._user_repo.get_many(
            doc.from_telegram_id for doc in documents if doc.from_telegram_id is not None
        )
        responses: List[NotificationResponse] = []
        for doc in documents:
            sender = senders.get(doc.from_telegram_id) if doc.from_telegram_id is not None else None
            responses.append(
                NotificationResponse(
                    id=str(doc.id),
                    type=doc.type,
                    is_read=doc.is_read,
                    created_at=doc.created_at,
                    message=doc.message,
                    from_user=to_profile_response(sender) if sender else None,
                )
            )
        return responses


def get_notification_service() -> NotificationService:
    db = get_db()
    return NotificationService(
        NotificationRepository(db),
        UserRepository(db),
        list_limit=get_settings().notification_list_limit,
    )


__all__ = [
    "NotificationService",
    "drain_notifications",
    "get_notification_service",
    "schedule_notification",
]
