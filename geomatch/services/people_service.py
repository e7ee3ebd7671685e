from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Sequence, Set, Tuple

from ..config import EXCLUSION_POLICY_BIDIRECTIONAL, Settings, get_settings
from ..db import get_db
from ..models.likes import MatchDocument, PairState
from ..models.people import (
    LikeResponse,
    MatchInfo,
    MatchSummary,
    PagedResponse,
    UserProfileResponse,
    UserProfileWithLocationsResponse,
)
from ..models.user import UserDocument
from ..repositories.locations import FavoriteLocationRepository, LocationRepository
from ..repositories.notifications import NotificationRepository
from ..repositories.reactions import DislikeRepository, LikeRepository, MatchRepository
from ..repositories.users import UserRepository
from .exceptions import InvalidArgumentError, UserNotFoundError
from .interests import extract_interest_categories
from .notification_service import NotificationService, schedule_notification
from .pagination import build_page, empty_page, normalize_page, paginate
from .profiles import to_match_user_info, to_profile_response, to_profile_with_locations
from .ranking import (
    RankedCandidate,
    build_exclusions,
    interest_scorer,
    location_scorer,
    name_sort_key,
    open_scorer,
    rank_candidates,
)

LOGGER = logging.getLogger("uvicorn.error")


@dataclass
class SearchContext:
    requester: UserDocument
    favorite_location_ids: Set[int]
    exclusions: Set[int] = field(default_factory=set)


Ranker = Callable[[SearchContext], Awaitable[List[RankedCandidate]]]


class PeopleService:
    """People discovery and the like/dislike/match protocol."""

    def __init__(
        self,
        *,
        users: UserRepository,
        favorites: FavoriteLocationRepository,
        locations: LocationRepository,
        likes: LikeRepository,
        dislikes: DislikeRepository,
        matches: MatchRepository,
        notifications: NotificationService,
        settings: Optional[Settings] = None,
    ) -> None:
        self._users = users
        self._favorites = favorites
        self._locations = locations
        self._likes = likes
        self._dislikes = dislikes
        self._matches = matches
        self._notifications = notifications
        self._settings = settings or get_settings()

    def _normalize_page(self, page: int, page_size: Optional[int]) -> Tuple[int, int]:
        if page_size is None:
            page_size = self._settings.default_page_size
        return normalize_page(page, page_size, max_page_size=self._settings.max_page_size)

    # --- Search ---

    async def search_combined(
        self, telegram_id: int, page: int = 1, page_size: Optional[int] = None
    ) -> PagedResponse[UserProfileWithLocationsResponse]:
        """People sharing favorite places first, then people sharing interests."""
        LOGGER.debug("search_combined: telegramId=%s page=%s pageSize=%s", telegram_id, page, page_size)
        return await self._search(telegram_id, page, page_size, [self._rank_by_locations, self._rank_by_interests])

    async def search_by_locations(
        self, telegram_id: int, page: int = 1, page_size: Optional[int] = None
    ) -> PagedResponse[UserProfileWithLocationsResponse]:
        LOGGER.debug("search_by_locations: telegramId=%s page=%s pageSize=%s", telegram_id, page, page_size)
        return await self._search(telegram_id, page, page_size, [self._rank_by_locations])

    async def search_by_interests(
        self, telegram_id: int, page: int = 1, page_size: Optional[int] = None
    ) -> PagedResponse[UserProfileWithLocationsResponse]:
        LOGGER.debug("search_by_interests: telegramId=%s page=%s pageSize=%s", telegram_id, page, page_size)
        return await self._search(telegram_id, page, page_size, [self._rank_by_interests])

    async def search_all(
        self, telegram_id: int, page: int = 1, page_size: Optional[int] = None
    ) -> PagedResponse[UserProfileWithLocationsResponse]:
        LOGGER.debug("search_all: telegramId=%s page=%s pageSize=%s", telegram_id, page, page_size)
        return await self._search(telegram_id, page, page_size, [self._rank_all])

    async def _search(
        self,
        telegram_id: int,
        page: int,
        page_size: Optional[int],
        rankers: Sequence[Ranker],
    ) -> PagedResponse[UserProfileWithLocationsResponse]:
        page, page_size = self._normalize_page(page, page_size)
        requester = await self._users.get_by_telegram_id(telegram_id)
        if requester is None:
            LOGGER.warning("User with telegramId %s not found", telegram_id)
            return empty_page(page, page_size)

        context = SearchContext(
            requester=requester,
            favorite_location_ids=await self._live_favorite_location_ids(telegram_id),
            exclusions=await self._exclusions_for(requester),
        )

        ranked: List[RankedCandidate] = []
        for ranker in rankers:
            block = await ranker(context)
            ranked.extend(block)
            # later blocks never repeat a user an earlier block already returned
            context.exclusions.update(item.user.telegram_id for item in block)

        start = (page - 1) * page_size
        page_items = ranked[start : start + page_size]
        profiles = await self._with_locations(page_items, context.favorite_location_ids)
        return build_page(profiles, page, page_size, len(ranked))

    async def _live_favorite_location_ids(self, telegram_id: int) -> Set[int]:
        """Favorites whose location has not been deleted; only these are scored and shown."""
        favorite_ids = await self._favorites.list_location_ids(telegram_id)
        return set(await self._locations.get_many(favorite_ids))

    async def _exclusions_for(self, requester: UserDocument) -> Set[int]:
        user_id = requester.telegram_id
        policy = self._settings.exclusion_policy
        liked_by: Set[int] = set()
        disliked_by: Set[int] = set()
        if policy == EXCLUSION_POLICY_BIDIRECTIONAL:
            liked_by = await self._likes.sources_of(user_id)
            disliked_by = await self._dislikes.sources_of(user_id)
        return build_exclusions(
            user_id,
            await self._likes.targets_of(user_id),
            await self._dislikes.targets_of(user_id),
            liked_by=liked_by,
            disliked_by=disliked_by,
            policy=policy,
        )

    async def _rank_by_locations(self, context: SearchContext) -> List[RankedCandidate]:
        if not context.favorite_location_ids:
            LOGGER.debug("User %s has no favorite locations", context.requester.telegram_id)
            return []
        shared = await self._favorites.shared_locations(context.favorite_location_ids)
        candidate_ids = set(shared) - context.exclusions
        pool = await self._users.list_active(exclude_ids=context.exclusions, only_ids=candidate_ids)
        return rank_candidates(
            context.requester,
            pool,
            scorer=location_scorer,
            exclusions=context.exclusions,
            shared_locations=shared,
            unknown_preference_accepts=self._settings.unknown_preference_accepts,
        )

    async def _rank_by_interests(self, context: SearchContext) -> List[RankedCandidate]:
        categories = extract_interest_categories(context.requester.interests)
        if not categories:
            LOGGER.debug("User %s has no interests", context.requester.telegram_id)
            return []
        pool = await self._users.list_active(exclude_ids=context.exclusions)
        return rank_candidates(
            context.requester,
            pool,
            scorer=interest_scorer(categories, self._settings.min_shared_interests),
            exclusions=context.exclusions,
            shared_locations={},
            unknown_preference_accepts=self._settings.unknown_preference_accepts,
        )

    async def _rank_all(self, context: SearchContext) -> List[RankedCandidate]:
        pool = await self._users.list_active(exclude_ids=context.exclusions)
        return rank_candidates(
            context.requester,
            pool,
            scorer=open_scorer,
            exclusions=context.exclusions,
            shared_locations={},
            unknown_preference_accepts=self._settings.unknown_preference_accepts,
        )

    async def _with_locations(
        self,
        items: Sequence[RankedCandidate],
        favorite_location_ids: Set[int],
    ) -> List[UserProfileWithLocationsResponse]:
        """Shape one page of candidates, annotating the places they share with the requester."""

        shared = {}
        if items and favorite_location_ids:
            shared = await self._favorites.shared_locations(
                favorite_location_ids,
                user_ids=[item.user.telegram_id for item in items],
            )
        location_ids: Set[int] = set()
        for location_set in shared.values():
            location_ids.update(location_set)
        locations = await self._locations.get_many(location_ids)

        return [
            to_profile_with_locations(item.user, shared.get(item.user.telegram_id, set()), locations)
            for item in items
        ]

    # --- Companies at a location ---

    async def companies_at_location(
        self,
        location_id: int,
        telegram_id: int,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> PagedResponse[UserProfileResponse]:
        """Everybody else who keeps ``location_id`` among their favorites, by name."""
        LOGGER.debug(
            "companies_at_location: locationId=%s telegramId=%s page=%s pageSize=%s",
            location_id,
            telegram_id,
            page,
            page_size,
        )
        page, page_size = self._normalize_page(page, page_size)

        if not await self._locations.exists(location_id):
            LOGGER.warning("Location %s not found", location_id)
            return empty_page(page, page_size)

        requester = await self._users.get_by_telegram_id(telegram_id)
        if requester is None:
            LOGGER.warning("User with telegramId %s not found", telegram_id)
            return empty_page(page, page_size)

        user_ids = await self._favorites.list_user_ids_for_location(location_id)
        user_ids.discard(requester.telegram_id)
        companions = await self._users.list_active(
            exclude_ids=[requester.telegram_id], only_ids=user_ids
        )
        companions.sort(key=name_sort_key)

        result = paginate(companions, page, page_size)
        result.data = [to_profile_response(user) for user in result.data]
        return result

    # --- Like / dislike ---

    async def _resolve_pair(self, telegram_id: int, target_telegram_id: int) -> Tuple[UserDocument, UserDocument]:
        current_user = await self._users.get_by_telegram_id(telegram_id)
        if current_user is None:
            raise UserNotFoundError(telegram_id)
        target_user = await self._users.get_by_telegram_id(target_telegram_id)
        if target_user is None:
            raise UserNotFoundError(target_telegram_id, role="target")
        return current_user, target_user

    async def _pair(self, user_a: int, user_b: int) -> Tuple[PairState, Optional[MatchDocument]]:
        match = await self._matches.get(user_a, user_b)
        state = PairState.resolve(
            forward_like=await self._likes.exists(user_a, user_b),
            reverse_like=await self._likes.exists(user_b, user_a),
            match_exists=match is not None,
        )
        return state, match

    async def pair_state(self, user_a: int, user_b: int) -> PairState:
        state, _ = await self._pair(user_a, user_b)
        return state

    async def like(
        self,
        telegram_id: int,
        target_telegram_id: int,
        message: Optional[str] = None,
    ) -> LikeResponse:
        LOGGER.debug("like: telegramId=%s targetTelegramId=%s", telegram_id, target_telegram_id)

        if telegram_id == target_telegram_id:
            raise InvalidArgumentError("Cannot like yourself")
        max_length = self._settings.like_message_max_length
        if message is not None and len(message) > max_length:
            raise InvalidArgumentError(f"Message cannot exceed {max_length} characters")
        if message is not None and not message.strip():
            message = None

        current_user, target_user = await self._resolve_pair(telegram_id, target_telegram_id)

        if await self._likes.exists(telegram_id, target_telegram_id):
            LOGGER.debug("User %s already liked user %s", telegram_id, target_telegram_id)
            return await self._existing_like_response(current_user, target_user)

        if not await self._likes.create(telegram_id, target_telegram_id, message=message):
            # An identical like committed concurrently; it owns the side effects.
            return await self._existing_like_response(current_user, target_user)

        reverse_like = await self._likes.exists(target_telegram_id, telegram_id)
        if not PairState.can_match(forward_like=True, reverse_like=reverse_like):
            self._dispatch(
                "like",
                lambda: self._notifications.create_like_notification(
                    target_telegram_id, telegram_id, message
                ),
            )
            return LikeResponse(is_match=False)

        match, created = await self._matches.create(telegram_id, target_telegram_id)
        if created:
            LOGGER.info("Match created between users %s and %s", match.user_id1, match.user_id2)
            # each party hears about the other; a mutual like never sends a like notification
            self._dispatch(
                "match",
                lambda: self._notifications.create_match_notification(target_telegram_id, telegram_id),
            )
            self._dispatch(
                "match",
                lambda: self._notifications.create_match_notification(telegram_id, target_telegram_id),
            )
        return self._match_response(match, current_user, target_user)

    async def _existing_like_response(self, current_user: UserDocument, target_user: UserDocument) -> LikeResponse:
        state, match = await self._pair(current_user.telegram_id, target_user.telegram_id)
        if state is not PairState.MATCHED or match is None:
            return LikeResponse(is_match=False)
        return self._match_response(match, current_user, target_user)

    @staticmethod
    def _match_response(match: MatchDocument, current_user: UserDocument, target_user: UserDocument) -> LikeResponse:
        return LikeResponse(
            is_match=True,
            match=MatchInfo(
                id=str(match.id),
                created_at=match.created_at,
                user1=to_match_user_info(current_user),
                user2=to_match_user_info(target_user),
            ),
        )

    def _dispatch(self, label: str, send: Callable[[], Awaitable[object]]) -> None:
        schedule_notification(send, label=label, timeout=self._settings.notification_timeout_seconds)

    async def dislike(self, telegram_id: int, target_telegram_id: int) -> bool:
        LOGGER.debug("dislike: telegramId=%s targetTelegramId=%s", telegram_id, target_telegram_id)

        if telegram_id == target_telegram_id:
            raise InvalidArgumentError("Cannot dislike yourself")

        await self._resolve_pair(telegram_id, target_telegram_id)

        if await self._dislikes.exists(telegram_id, target_telegram_id):
            LOGGER.debug("User %s already disliked user %s", telegram_id, target_telegram_id)
            return True

        await self._dislikes.create(telegram_id, target_telegram_id)
        return True

    # --- Matches ---

    async def list_matches(self, telegram_id: int) -> List[MatchSummary]:
        requester = await self._users.get_by_telegram_id(telegram_id)
        if requester is None:
            LOGGER.warning("User with telegramId %s not found", telegram_id)
            return []

        matches = await self._matches.list_for_user(telegram_id)
        others = await self._users.get_many(match.other_party(telegram_id) for match in matches)
        summaries: List[MatchSummary] = []
        for match in matches:
            other = others.get(match.other_party(telegram_id))
            if other is None:
                continue
            summaries.append(
                MatchSummary(match_id=str(match.id), matched_at=match.created_at, user=to_profile_response(other))
            )
        return summaries


def get_people_service() -> PeopleService:
    db = get_db()
    settings = get_settings()
    users = UserRepository(db)
    return PeopleService(
        users=users,
        favorites=FavoriteLocationRepository(db),
        locations=LocationRepository(db),
        likes=LikeRepository(db),
        dislikes=DislikeRepository(db),
        matches=MatchRepository(db),
        notifications=NotificationService(
            NotificationRepository(db),
            users,
            list_limit=settings.notification_list_limit,
        ),
        settings=settings,
    )


__all__ = ["PeopleService", "SearchContext", "get_people_service"]
