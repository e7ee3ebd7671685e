"""Shared plumbing for repositories over soft-deletable collections."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase


def active_filter(query: Optional[Mapping[str, Any]] = None) -> dict[str, Any]:
    """Restrict ``query`` to records that have not been soft-deleted.

    Every read in the repository layer goes through this predicate so that a
    deleted user, favorite, reaction or match is invisible to the services.
    """
    scoped: dict[str, Any] = dict(query or {})
    scoped["isDeleted"] = {"$ne": True}
    return scoped


class ActiveRecordRepository:
    """Base class binding a repository to one MongoDB collection."""

    collection_name: str = ""

    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        self._collection: AsyncIOMotorCollection = database[self.collection_name]


__all__ = ["ActiveRecordRepository", "active_filter"]
