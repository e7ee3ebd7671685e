from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from datetime import datetime, timezone
from pathlib import Path
import sys
from typing import Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

SERVICE_ROOT = Path(__file__).resolve().parents[1]
if str(SERVICE_ROOT) not in sys.path:
    sys.path.insert(0, str(SERVICE_ROOT))

from geomatch.config import get_settings
from geomatch.db import close_mongo_connection, connect_to_mongo, get_db
from geomatch.main import app
from geomatch.repositories import (
    DislikeRepository,
    FavoriteLocationRepository,
    LikeRepository,
    LocationRepository,
    MatchRepository,
    NotificationRepository,
    UserRepository,
)
from geomatch.services.notification_service import NotificationService, drain_notifications
from geomatch.services.people_service import PeopleService


@pytest.fixture(autouse=True)
def _env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MONGO_URI", "mongodb://localhost:27017/test")
    monkeypatch.setenv("MONGO_DB_NAME", "geomatch-test")
    monkeypatch.setenv("REDIS_URL", "")
    monkeypatch.setenv("REDIS_PUBSUB_ENABLED", "false")
    monkeypatch.delenv("EXCLUSION_POLICY", raising=False)
    monkeypatch.delenv("UNKNOWN_PREFERENCE_ACCEPTS", raising=False)
    get_settings.cache_clear()  # type: ignore[attr-defined]


@pytest_asyncio.fixture
async def mongo_client(monkeypatch: pytest.MonkeyPatch) -> AsyncIterator[AsyncMongoMockClient]:
    client = AsyncMongoMockClient()

    def _client_factory(*_args, **_kwargs) -> AsyncMongoMockClient:
        return client

    monkeypatch.setattr("geomatch.db.AsyncIOMotorClient", _client_factory)
    yield client
    client.close()


@pytest_asyncio.fixture
async def db(mongo_client: AsyncMongoMockClient):
    await connect_to_mongo()
    yield get_db()
    await drain_notifications()
    await close_mongo_connection()


@pytest_asyncio.fixture
async def api_client(db) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client


class Seeder:
    """Writes users, locations and favorites the way profile management stores them."""

    def __init__(self, database) -> None:
        self._db = database

    async def user(
        self,
        telegram_id: int,
        username: str,
        *,
        gender: Optional[str] = "female",
        partner_preference: Optional[str] = "any",
        interests: Optional[list[str]] = None,
        description: Optional[str] = "Hi there",
        photos: Optional[list[str]] = None,
        is_active: bool = True,
        is_deleted: bool = False,
    ) -> None:
        await self._db["users"].insert_one(
            {
                "telegramId": telegram_id,
                "username": username,
                "firstName": username.capitalize(),
                "gender": gender,
                "partnerPreference": partner_preference,
                "interests": interests or [],
                "profileDescription": description,
                "profilePhotos": ["photo-1"] if photos is None else photos,
                "ageRange": "18-24",
                "isStudent": True,
                "isActive": is_active,
                "isDeleted": is_deleted,
            }
        )

    async def location(self, location_id: int, name: str, *, category_id: int = 1, is_deleted: bool = False) -> None:
        await self._db["locations"].insert_one(
            {"id": location_id, "name": name, "categoryId": category_id, "isDeleted": is_deleted}
        )

    async def favorite(self, user_id: int, location_id: int, *, is_deleted: bool = False) -> None:
        await self._db["favorite_locations"].insert_one(
            {"userId": user_id, "locationId": location_id, "isDeleted": is_deleted}
        )

    async def like(self, user_id: int, target_user_id: int) -> None:
        await self._db["user_likes"].insert_one(
            {
                "userId": user_id,
                "targetUserId": target_user_id,
                "createdAt": datetime.now(timezone.utc),
                "isDeleted": False,
            }
        )


@pytest.fixture
def seed(db) -> Seeder:
    return Seeder(db)


class RecordingNotifications:
    """Notification port double that remembers what it was asked to send."""

    def __init__(self) -> None:
        self.likes: list[tuple[int, int, Optional[str]]] = []
        self.matches: list[tuple[int, int]] = []

    async def create_like_notification(self, to_telegram_id: int, from_telegram_id: int, message=None):
        self.likes.append((to_telegram_id, from_telegram_id, message))

    async def create_match_notification(self, to_telegram_id: int, from_telegram_id: int):
        self.matches.append((to_telegram_id, from_telegram_id))


@pytest.fixture
def recording_notifications() -> RecordingNotifications:
    return RecordingNotifications()


@pytest.fixture
def make_people_service(db) -> Callable[..., PeopleService]:
    """Build a PeopleService over the mock database with optional setting overrides."""

    def _factory(notifications=None, **overrides) -> PeopleService:
        settings = get_settings().model_copy(update=overrides) if overrides else get_settings()
        users = UserRepository(db)
        return PeopleService(
            users=users,
            favorites=FavoriteLocationRepository(db),
            locations=LocationRepository(db),
            likes=LikeRepository(db),
            dislikes=DislikeRepository(db),
            matches=MatchRepository(db),
            notifications=notifications or NotificationService(NotificationRepository(db), users),
            settings=settings,
        )

    return _factory


@pytest.fixture
def people_service(make_people_service) -> PeopleService:
    return make_people_service()
