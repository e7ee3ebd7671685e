"""Read access to user records owned by profile management."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..db.collections import USERS_COLLECTION
from ..models.user import UserDocument
from .base import ActiveRecordRepository, active_filter

LOGGER = logging.getLogger("uvicorn.error")


class UserRepository(ActiveRecordRepository):
    """Lookup of users by their external (Telegram) id."""

    collection_name = USERS_COLLECTION

    async def get_by_telegram_id(self, telegram_id: int) -> Optional[UserDocument]:
        doc = await self._collection.find_one(active_filter({"telegramId": telegram_id}))
        return UserDocument(**doc) if doc else None

    async def get_many(self, telegram_ids: Iterable[int]) -> dict[int, UserDocument]:
        ids = list(set(telegram_ids))
        if not ids:
            return {}
        cursor = self._collection.find(active_filter({"telegramId": {"$in": ids}}))
        users: dict[int, UserDocument] = {}
        async for doc in cursor:
            user = UserDocument(**doc)
            users[user.telegram_id] = user
        return users

    async def list_active(
        self,
        *,
        exclude_ids: Iterable[int] = (),
        only_ids: Optional[Iterable[int]] = None,
    ) -> list[UserDocument]:
        """Active, non-deleted users, optionally restricted to ``only_ids``."""

        id_filter: dict[str, object] = {"$nin": list(exclude_ids)}
        if only_ids is not None:
            wanted = list(only_ids)
            if not wanted:
                return []
            id_filter["$in"] = wanted
        cursor = self._collection.find(active_filter({"isActive": {"$ne": False}, "telegramId": id_filter}))
        return [UserDocument(**doc) async for doc in cursor]


__all__ = ["UserRepository"]
