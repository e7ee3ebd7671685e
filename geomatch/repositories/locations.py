"""Read access to locations and users' favorite locations."""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Optional

from ..db.collections import FAVORITE_LOCATIONS_COLLECTION, LOCATIONS_COLLECTION
from ..models.user import LocationDocument
from .base import ActiveRecordRepository, active_filter


class LocationRepository(ActiveRecordRepository):
    collection_name = LOCATIONS_COLLECTION

    async def exists(self, location_id: int) -> bool:
        doc = await self._collection.find_one(active_filter({"id": location_id}), projection={"_id": 1})
        return doc is not None

    async def get_many(self, location_ids: Iterable[int]) -> dict[int, LocationDocument]:
        ids = list(set(location_ids))
        if not ids:
            return {}
        cursor = self._collection.find(active_filter({"id": {"$in": ids}}))
        locations: dict[int, LocationDocument] = {}
        async for doc in cursor:
            location = LocationDocument(**doc)
            locations[location.id] = location
        return locations


class FavoriteLocationRepository(ActiveRecordRepository):
    collection_name = FAVORITE_LOCATIONS_COLLECTION

    async def list_location_ids(self, user_id: int) -> set[int]:
        cursor = self._collection.find(active_filter({"userId": user_id}), projection={"locationId": 1})
        return {doc["locationId"] async for doc in cursor}

    async def shared_locations(
        self,
        location_ids: Iterable[int],
        *,
        user_ids: Optional[Iterable[int]] = None,
    ) -> dict[int, set[int]]:
        """Map each user favoriting any of ``location_ids`` to the ids they share."""

        wanted = list(set(location_ids))
        if not wanted:
            return {}
        query: dict[str, object] = {"locationId": {"$in": wanted}}
        if user_ids is not None:
            query["userId"] = {"$in": list(set(user_ids))}
        cursor = self._collection.find(active_filter(query), projection={"userId": 1, "locationId": 1})
        shared: dict[int, set[int]] = defaultdict(set)
        async for doc in cursor:
            shared[doc["userId"]].add(doc["locationId"])
        return dict(shared)

    async def list_user_ids_for_location(self, location_id: int) -> set[int]:
        cursor = self._collection.find(active_filter({"locationId": location_id}), projection={"userId": 1})
        return {doc["userId"] async for doc in cursor}


__all__ = ["FavoriteLocationRepository", "LocationRepository"]
