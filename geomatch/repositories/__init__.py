"""Repository layer to abstract MongoDB access patterns."""

from .base import ActiveRecordRepository, active_filter
from .locations import FavoriteLocationRepository, LocationRepository
from .notifications import NotificationRepository
from .reactions import DislikeRepository, LikeRepository, MatchRepository
from .users import UserRepository

__all__ = [
    "ActiveRecordRepository",
    "DislikeRepository",
    "FavoriteLocationRepository",
    "LikeRepository",
    "LocationRepository",
    "MatchRepository",
    "NotificationRepository",
    "UserRepository",
    "active_filter",
]
