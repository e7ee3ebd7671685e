from __future__ import annotations

import pytest

from geomatch.services.notification_service import drain_notifications

A, B, C = 100, 200, 300


async def _seed(seed) -> None:
    await seed.location(7, "L7", category_id=2)
    await seed.user(A, "alex", gender="male", partner_preference="female")
    await seed.user(B, "bella", gender="female", partner_preference="male")
    await seed.user(C, "carla", gender="female", partner_preference="any")
    await seed.favorite(A, 7)
    await seed.favorite(B, 7)


@pytest.mark.asyncio
async def test_search_endpoint_returns_camel_case_page(api_client, seed) -> None:
    await _seed(seed)

    response = await api_client.get("/api/people/search", params={"telegramId": A, "pageSize": 1})

    assert response.status_code == 200, response.text
    payload = response.json()
    assert payload["page"] == 1
    assert payload["pageSize"] == 1
    assert payload["totalCount"] == 1
    assert payload["hasNextPage"] is False
    assert payload["data"][0]["telegramId"] == B
    assert payload["data"][0]["matchingLocations"] == [{"id": 7, "name": "L7", "categoryId": 2}]

    everyone = await api_client.get("/api/people/all", params={"telegramId": A})
    assert [item["telegramId"] for item in everyone.json()["data"]] == [B, C]


@pytest.mark.asyncio
async def test_like_endpoint_status_codes(api_client, seed) -> None:
    await _seed(seed)

    first = await api_client.post("/api/people/like", json={"telegramId": A, "targetTelegramId": B, "message": "hi"})
    assert first.status_code == 200, first.text
    assert first.json()["isMatch"] is False

    second = await api_client.post("/api/people/like", json={"telegramId": B, "targetTelegramId": A})
    assert second.status_code == 201, second.text
    body = second.json()
    assert body["success"] is True
    assert body["isMatch"] is True
    assert body["match"]["user1"]["telegramId"] == B
    assert body["match"]["user2"]["telegramId"] == A
    assert body["match"]["createdAt"]

    self_like = await api_client.post("/api/people/like", json={"telegramId": A, "targetTelegramId": A})
    assert self_like.status_code == 400

    too_long = await api_client.post(
        "/api/people/like", json={"telegramId": A, "targetTelegramId": C, "message": "x" * 501}
    )
    assert too_long.status_code == 400

    missing = await api_client.post("/api/people/like", json={"telegramId": A, "targetTelegramId": 999})
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Target user not found"

    matches = await api_client.get("/api/people/matches", params={"telegramId": A})
    assert matches.status_code == 200
    assert [m["user"]["telegramId"] for m in matches.json()["matches"]] == [B]


@pytest.mark.asyncio
async def test_dislike_endpoint(api_client, seed) -> None:
    await _seed(seed)

    response = await api_client.post("/api/people/dislike", json={"telegramId": A, "targetTelegramId": B})
    assert response.status_code == 201
    assert response.json() == {"success": True}

    search = await api_client.get("/api/people/by-locations", params={"telegramId": A})
    assert search.json()["data"] == []

    unknown = await api_client.post("/api/people/dislike", json={"telegramId": 999, "targetTelegramId": B})
    assert unknown.status_code == 404
    assert unknown.json()["detail"] == "User not found"


@pytest.mark.asyncio
async def test_location_companies_endpoint(api_client, seed) -> None:
    await _seed(seed)

    response = await api_client.get("/api/locations/7/companies", params={"telegramId": A})

    assert response.status_code == 200
    payload = response.json()
    assert [item["telegramId"] for item in payload["data"]] == [B]
    assert "matchingLocations" not in payload["data"][0]


@pytest.mark.asyncio
async def test_notification_endpoints(api_client, seed) -> None:
    await _seed(seed)
    await api_client.post("/api/people/like", json={"telegramId": A, "targetTelegramId": B, "message": "hi"})
    await drain_notifications()

    listing = await api_client.get("/api/notifications", params={"telegramId": B})
    assert listing.status_code == 200
    notes = listing.json()["notifications"]
    assert len(notes) == 1
    assert notes[0]["type"] == "like"
    assert notes[0]["isRead"] is False
    assert notes[0]["fromUser"]["telegramId"] == A

    marked = await api_client.post(
        "/api/notifications/read", json={"telegramId": B, "notificationId": notes[0]["id"]}
    )
    assert marked.status_code == 200

    unread = await api_client.get("/api/notifications", params={"telegramId": B, "unreadOnly": "true"})
    assert unread.json()["notifications"] == []

    missing = await api_client.post(
        "/api/notifications/read", json={"telegramId": A, "notificationId": notes[0]["id"]}
    )
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_admin_and_health_endpoints(api_client) -> None:
    indexes = await api_client.post("/api/admin/ensure-indexes")
    assert indexes.status_code == 200
    assert indexes.json() == {"ok": True}

    health = await api_client.get("/api/health/db")
    assert health.json() == {"mongo": "connected", "db": "geomatch-test"}

    root = await api_client.get("/")
    assert root.json() == {"status": "geomatch-api-ok"}
