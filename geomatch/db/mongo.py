from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from .collections import (
    DISLIKES_COLLECTION,
    FAVORITE_LOCATIONS_COLLECTION,
    LIKES_COLLECTION,
    LOCATIONS_COLLECTION,
    MATCHES_COLLECTION,
    NOTIFICATIONS_COLLECTION,
    USERS_COLLECTION,
)


async def ensure_people_indexes(db: AsyncIOMotorDatabase) -> None:
    users = db[USERS_COLLECTION]
    await users.create_index([("telegramId", ASCENDING)], name="users_telegram_id_unique", unique=True)
    await users.create_index([("isActive", ASCENDING), ("isDeleted", ASCENDING)], name="users_active_idx")

    await db[LOCATIONS_COLLECTION].create_index([("id", ASCENDING)], name="locations_id_unique", unique=True)

    favorites = db[FAVORITE_LOCATIONS_COLLECTION]
    await favorites.create_index(
        [("userId", ASCENDING), ("locationId", ASCENDING)],
        name="favorites_user_location_unique",
        unique=True,
    )
    await favorites.create_index([("locationId", ASCENDING)], name="favorites_location_idx")


async def ensure_reaction_indexes(db: AsyncIOMotorDatabase) -> None:
    for name in (LIKES_COLLECTION, DISLIKES_COLLECTION):
        collection = db[name]
        await collection.create_index(
            [("userId", ASCENDING), ("targetUserId", ASCENDING)],
            name=f"{name}_user_target_unique",
            unique=True,
        )
        await collection.create_index(
            [("targetUserId", ASCENDING), ("createdAt", DESCENDING)],
            name=f"{name}_target_idx",
        )

    matches = db[MATCHES_COLLECTION]
    await matches.create_index(
        [("userId1", ASCENDING), ("userId2", ASCENDING)],
        name="matches_canonical_pair_unique",
        unique=True,
    )
    await matches.create_index([("userId2", ASCENDING)], name="matches_user2_idx")


async def ensure_notification_indexes(db: AsyncIOMotorDatabase) -> None:
    await db[NOTIFICATIONS_COLLECTION].create_index(
        [("telegramId", ASCENDING), ("createdAt", DESCENDING)],
        name="notifications_recipient_idx",
    )


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    await ensure_people_indexes(db)
    await ensure_reaction_indexes(db)
    await ensure_notification_indexes(db)


__all__ = [
    "ensure_indexes",
    "ensure_notification_indexes",
    "ensure_people_indexes",
    "ensure_reaction_indexes",
]
