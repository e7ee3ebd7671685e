"""Directed like/dislike edges and canonical matches."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Tuple

from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError

from ..db.collections import DISLIKES_COLLECTION, LIKES_COLLECTION, MATCHES_COLLECTION
from ..models.likes import MatchDocument, canonical_pair
from .base import ActiveRecordRepository, active_filter
from .exceptions import NotFoundRepositoryError

LOGGER = logging.getLogger("uvicorn.error")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _ReactionRepository(ActiveRecordRepository):
    """One directed edge per (userId, targetUserId), enforced by a unique index."""

    async def create(self, user_id: int, target_user_id: int, *, message: Optional[str] = None) -> bool:
        """Write the edge. Returns False when it already existed."""

        now = _utcnow()
        document: dict[str, object] = {
            "userId": user_id,
            "targetUserId": target_user_id,
            "createdAt": now,
            "isDeleted": False,
        }
        if message is not None:
            document["message"] = message

        try:
            result = await self._collection.update_one(
                {"userId": user_id, "targetUserId": target_user_id},
                {"$setOnInsert": document},
                upsert=True,
            )
        except DuplicateKeyError:
            # A concurrent writer inserted the same edge first
            LOGGER.debug(
                "Duplicate %s edge absorbed: %s -> %s", self.collection_name, user_id, target_user_id
            )
            return False
        if result.upserted_id is not None:
            return True

        # The pair exists; bring it back only if it had been soft-deleted.
        revived = await self._collection.update_one(
            {"userId": user_id, "targetUserId": target_user_id, "isDeleted": True},
            {"$set": {"isDeleted": False, "createdAt": now, "message": message}},
        )
        return bool(revived.modified_count)

    async def exists(self, user_id: int, target_user_id: int) -> bool:
        doc = await self._collection.find_one(
            active_filter({"userId": user_id, "targetUserId": target_user_id}),
            projection={"_id": 1},
        )
        return doc is not None

    async def targets_of(self, user_id: int) -> set[int]:
        cursor = self._collection.find(active_filter({"userId": user_id}), projection={"targetUserId": 1})
        return {doc["targetUserId"] async for doc in cursor}

    async def sources_of(self, user_id: int) -> set[int]:
        cursor = self._collection.find(active_filter({"targetUserId": user_id}), projection={"userId": 1})
        return {doc["userId"] async for doc in cursor}


class LikeRepository(_ReactionRepository):
    collection_name = LIKES_COLLECTION


class DislikeRepository(_ReactionRepository):
    collection_name = DISLIKES_COLLECTION


class MatchRepository(ActiveRecordRepository):
    """Matches keyed by the canonical (smaller id, larger id) pair."""

    collection_name = MATCHES_COLLECTION

    async def get(self, user_a: int, user_b: int) -> Optional[MatchDocument]:
        user_id1, user_id2 = canonical_pair(user_a, user_b)
        doc = await self._collection.find_one(active_filter({"userId1": user_id1, "userId2": user_id2}))
        return MatchDocument(**doc) if doc else None

    async def create(self, user_a: int, user_b: int) -> Tuple[MatchDocument, bool]:
        """Create the match once. The flag is True only for the writer that created it."""

        user_id1, user_id2 = canonical_pair(user_a, user_b)
        now = _utcnow()
        created = False
        try:
            result = await self._collection.update_one(
                {"userId1": user_id1, "userId2": user_id2},
                {
                    "$setOnInsert": {
                        "userId1": user_id1,
                        "userId2": user_id2,
                        "createdAt": now,
                        "isDeleted": False,
                    }
                },
                upsert=True,
            )
            created = result.upserted_id is not None
        except DuplicateKeyError:
            LOGGER.debug("Concurrent match creation absorbed for pair (%s, %s)", user_id1, user_id2)

        if not created:
            revived = await self._collection.update_one(
                {"userId1": user_id1, "userId2": user_id2, "isDeleted": True},
                {"$set": {"isDeleted": False, "createdAt": now}},
            )
            created = bool(revived.modified_count)

        match = await self.get(user_id1, user_id2)
        if match is None:  # pragma: no cover - the upsert above guarantees a row
            raise NotFoundRepositoryError("match missing after upsert")
        return match, created

    async def list_for_user(self, user_id: int) -> list[MatchDocument]:
        cursor = self._collection.find(
            active_filter({"$or": [{"userId1": user_id}, {"userId2": user_id}]})
        ).sort("createdAt", DESCENDING)
        return [MatchDocument(**doc) async for doc in cursor]


__all__ = ["DislikeRepository", "LikeRepository", "MatchRepository"]
