"""Persistence for like/match notifications."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from pymongo import DESCENDING

from ..db.collections import NOTIFICATIONS_COLLECTION
from ..models.notification import NotificationDocument, NotificationType
from .base import ActiveRecordRepository, active_filter


class NotificationRepository(ActiveRecordRepository):
    collection_name = NOTIFICATIONS_COLLECTION

    async def insert(
        self,
        *,
        telegram_id: int,
        notification_type: NotificationType,
        from_telegram_id: Optional[int] = None,
        message: Optional[str] = None,
    ) -> NotificationDocument:
        doc = {
            "_id": ObjectId(),
            "telegramId": telegram_id,
            "type": notification_type.value,
            "fromTelegramId": from_telegram_id,
            "message": message,
            "isRead": False,
            "createdAt": datetime.now(timezone.utc),
            "isDeleted": False,
        }
        await self._collection.insert_one(doc)
        return NotificationDocument(**doc)

    async def list_for_user(
        self,
        telegram_id: int,
        *,
        unread_only: bool = False,
        limit: int = 50,
    ) -> list[NotificationDocument]:
        query: dict[str, object] = {"telegramId": telegram_id}
        if unread_only:
            query["isRead"] = False
        cursor = (
            self._collection.find(active_filter(query))
            .sort("createdAt", DESCENDING)
            .limit(limit)
        )
        return [NotificationDocument(**doc) async for doc in cursor]

    async def mark_read(self, notification_id: ObjectId, telegram_id: int) -> bool:
        result = await self._collection.update_one(
            active_filter({"_id": notification_id, "telegramId": telegram_id}),
            {"$set": {"isRead": True, "updatedAt": datetime.now(timezone.utc)}},
        )
        return bool(result.matched_count)


__all__ = ["NotificationRepository"]
