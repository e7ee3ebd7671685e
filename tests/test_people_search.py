from __future__ import annotations

import pytest

A, B, C, D, E = 100, 200, 300, 400, 500


async def _seed_campus(seed) -> None:
    await seed.location(7, "L7", category_id=3)
    await seed.location(8, "Library", category_id=4)
    await seed.user(A, "alex", gender="male", partner_preference="female", interests=["music:jazz", "sport:run"])
    await seed.user(B, "bella", gender="female", partner_preference="male")
    await seed.favorite(A, 7)
    await seed.favorite(B, 7)


@pytest.mark.asyncio
async def test_location_search_returns_overlap(seed, people_service) -> None:
    await _seed_campus(seed)

    page = await people_service.search_by_locations(A, 1, 20)

    assert [item.telegram_id for item in page.data] == [B]
    assert [location.name for location in page.data[0].matching_locations] == ["L7"]
    assert page.data[0].matching_locations[0].category_id == 3
    assert page.total_count == 1


@pytest.mark.asyncio
async def test_dislike_removes_candidate_from_every_search(seed, people_service) -> None:
    await _seed_campus(seed)
    await seed.user(C, "carla", gender="female", partner_preference="any", interests=["music:pop", "sport:swim"])

    assert await people_service.dislike(A, B) is True

    for search in (
        people_service.search_combined,
        people_service.search_by_locations,
        people_service.search_by_interests,
        people_service.search_all,
    ):
        page = await search(A, 1, 20)
        assert B not in [item.telegram_id for item in page.data]

    everyone = await people_service.search_all(A, 1, 20)
    assert [item.telegram_id for item in everyone.data] == [C]


@pytest.mark.asyncio
async def test_combined_search_puts_location_block_first_without_duplicates(seed, people_service) -> None:
    await _seed_campus(seed)
    # B shares both a place and interests; C and D only interests
    await seed.user(B + 1, "bianca", gender="female", partner_preference="male", interests=["music", "sport"])
    await seed.favorite(B + 1, 8)
    await seed.favorite(A, 8)
    await seed.user(C, "anna", gender="female", partner_preference="any", interests=["music:pop", "sport:swim"])
    await seed.user(D, "zoe", gender="female", partner_preference="male", interests=["Music", "SPORT", "art"])
    await seed.user(E, "eve", gender="female", partner_preference="male", interests=["music"])

    page = await people_service.search_combined(A, 1, 20)
    ids = [item.telegram_id for item in page.data]

    assert ids == [B, B + 1, C, D]
    assert len(ids) == len(set(ids))
    assert page.total_count == 4


@pytest.mark.asyncio
async def test_location_block_ranks_by_number_of_shared_places(seed, people_service) -> None:
    await _seed_campus(seed)
    await seed.user(C, "aaron", gender="female", partner_preference="male")
    await seed.favorite(C, 7)
    await seed.favorite(C, 8)
    await seed.favorite(A, 8)

    page = await people_service.search_by_locations(A, 1, 20)

    assert [item.telegram_id for item in page.data] == [C, B]
    assert [location.name for location in page.data[0].matching_locations] == ["L7", "Library"]


@pytest.mark.asyncio
async def test_interest_search_requires_two_categories(seed, people_service) -> None:
    await _seed_campus(seed)
    await seed.user(C, "cleo", gender="female", partner_preference="male", interests=["music:rock"])
    await seed.user(D, "dana", gender="female", partner_preference="male", interests=["music:rock", "sport"])

    page = await people_service.search_by_interests(A, 1, 20)

    assert [item.telegram_id for item in page.data] == [D]


@pytest.mark.asyncio
async def test_interest_search_is_empty_without_interests(seed, people_service) -> None:
    await seed.user(A, "alex", interests=[])
    await seed.user(B, "bella", interests=["music", "sport"])

    page = await people_service.search_by_interests(A, 1, 20)

    assert page.data == []
    assert page.total_count == 0


@pytest.mark.asyncio
async def test_open_search_skips_incomplete_inactive_and_deleted_users(seed, people_service) -> None:
    await seed.user(A, "alex")
    await seed.user(B, "bella")
    await seed.user(C, "carla", photos=[])
    await seed.user(D, "dora", is_active=False)
    await seed.user(E, "emma", is_deleted=True)

    page = await people_service.search_all(A, 1, 20)

    assert [item.telegram_id for item in page.data] == [B]


@pytest.mark.asyncio
async def test_deleted_favorites_do_not_count(seed, people_service) -> None:
    await seed.location(7, "L7")
    await seed.user(A, "alex")
    await seed.user(B, "bella")
    await seed.favorite(A, 7)
    await seed.favorite(B, 7, is_deleted=True)

    page = await people_service.search_by_locations(A, 1, 20)

    assert page.data == []


@pytest.mark.asyncio
async def test_unknown_requester_gets_empty_page(seed, people_service) -> None:
    await seed.user(B, "bella")

    page = await people_service.search_combined(999, 2, 10)

    assert page.data == []
    assert page.page == 2
    assert page.page_size == 10
    assert page.total_pages == 0


@pytest.mark.asyncio
async def test_search_pagination_is_clamped(seed, people_service) -> None:
    await seed.user(A, "alex")
    for offset in range(1, 6):
        await seed.user(A + offset, f"user{offset}")

    first = await people_service.search_all(A, 0, 2)
    assert first.page == 1
    assert [item.username for item in first.data] == ["user1", "user2"]
    assert first.total_count == 5
    assert first.total_pages == 3
    assert first.has_next_page is True
    assert first.has_previous_page is False

    last = await people_service.search_all(A, 3, 2)
    assert [item.username for item in last.data] == ["user5"]
    assert last.has_next_page is False

    huge = await people_service.search_all(A, 1, 1000)
    assert huge.page_size == 100


@pytest.mark.asyncio
async def test_bidirectional_policy_hides_admirers(seed, make_people_service) -> None:
    await seed.user(A, "alex")
    await seed.user(B, "bella")
    await seed.user(C, "carla")
    await seed.like(B, A)

    outgoing = await make_people_service().search_all(A, 1, 20)
    assert [item.telegram_id for item in outgoing.data] == [B, C]

    bidirectional = await make_people_service(exclusion_policy="bidirectional").search_all(A, 1, 20)
    assert [item.telegram_id for item in bidirectional.data] == [C]


@pytest.mark.asyncio
async def test_unknown_preference_can_be_denied(seed, make_people_service) -> None:
    await seed.user(A, "alex", partner_preference="robots")
    await seed.user(B, "bella")

    permissive = await make_people_service().search_all(A, 1, 20)
    assert [item.telegram_id for item in permissive.data] == [B]

    strict = await make_people_service(unknown_preference_accepts=False).search_all(A, 1, 20)
    assert strict.data == []


@pytest.mark.asyncio
async def test_null_profile_fields_do_not_break_searches(seed, db, people_service) -> None:
    await _seed_campus(seed)
    await db["users"].insert_one(
        {
            "telegramId": C,
            "username": None,
            "gender": "female",
            "partnerPreference": "male",
            "interests": None,
            "profileDescription": None,
            "profilePhotos": None,
            "ageRange": None,
            "isStudent": None,
            "isActive": True,
            "isDeleted": False,
        }
    )
    await db["users"].insert_one(
        {
            "telegramId": D,
            "username": None,
            "gender": "female",
            "partnerPreference": "male",
            "interests": None,
            "profileDescription": "New here",
            "profilePhotos": ["photo-1", None],
            "isActive": True,
            "isDeleted": False,
        }
    )
    await seed.favorite(C, 7)

    everyone = await people_service.search_all(A, 1, 20)
    by_interest = await people_service.search_by_interests(A, 1, 20)
    by_location = await people_service.search_by_locations(A, 1, 20)
    combined = await people_service.search_combined(A, 1, 20)

    assert sorted(item.telegram_id for item in everyone.data) == [B, D]
    assert C not in [item.telegram_id for item in by_interest.data]
    assert [item.telegram_id for item in by_location.data] == [B]
    assert C not in [item.telegram_id for item in combined.data]
    assert next(item for item in everyone.data if item.telegram_id == D).username == ""


@pytest.mark.asyncio
async def test_deleted_locations_do_not_count_toward_overlap(seed, people_service) -> None:
    await seed.location(7, "Closed cafe", is_deleted=True)
    await seed.location(8, "Library")
    await seed.location(9, "Gym")
    await seed.user(A, "alex", gender="male", partner_preference="female")
    await seed.user(B, "aaa", gender="female", partner_preference="male")
    await seed.user(C, "bbb", gender="female", partner_preference="male")
    for location_id in (7, 8, 9):
        await seed.favorite(A, location_id)
    await seed.favorite(B, 7)
    await seed.favorite(B, 8)
    await seed.favorite(C, 8)
    await seed.favorite(C, 9)

    page = await people_service.search_by_locations(A, 1, 20)

    assert [item.telegram_id for item in page.data] == [C, B]
    assert [location.name for location in page.data[1].matching_locations] == ["Library"]
