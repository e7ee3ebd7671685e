"""MongoDB collection names used by geomatch."""

from __future__ import annotations

USERS_COLLECTION = "users"
LOCATIONS_COLLECTION = "locations"
FAVORITE_LOCATIONS_COLLECTION = "favorite_locations"
LIKES_COLLECTION = "user_likes"
DISLIKES_COLLECTION = "user_dislikes"
MATCHES_COLLECTION = "matches"
NOTIFICATIONS_COLLECTION = "notifications"

__all__ = [
    "USERS_COLLECTION",
    "LOCATIONS_COLLECTION",
    "FAVORITE_LOCATIONS_COLLECTION",
    "LIKES_COLLECTION",
    "DISLIKES_COLLECTION",
    "MATCHES_COLLECTION",
    "NOTIFICATIONS_COLLECTION",
]
