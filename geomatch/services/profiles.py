"""Conversion of stored users into the public profile shapes."""

from __future__ import annotations

from typing import Iterable, List, Mapping

from ..models.people import (
    LocationInfo,
    MatchUserInfo,
    UserProfileResponse,
    UserProfileWithLocationsResponse,
)
from ..models.user import LocationDocument, UserDocument


def _clean_list(values: Iterable[object]) -> List[str]:
    cleaned: List[str] = []
    for value in values or ():
        if isinstance(value, str) and value.strip():
            cleaned.append(value.strip())
    return cleaned


def _profile_fields(user: UserDocument) -> dict:
    return {
        "telegram_id": user.telegram_id,
        "username": user.username,
        "first_name": user.first_name,
        "age_range": user.age_range,
        "gender": user.gender,
        "is_student": user.is_student,
        "interests": _clean_list(user.interests),
        "profile_description": user.profile_description,
        "profile_photos": _clean_list(user.profile_photos),
    }


def to_profile_response(user: UserDocument) -> UserProfileResponse:
    return UserProfileResponse(**_profile_fields(user))


def to_profile_with_locations(
    user: UserDocument,
    shared_location_ids: Iterable[int],
    locations: Mapping[int, LocationDocument],
) -> UserProfileWithLocationsResponse:
    """Attach the overlapping locations that still resolve, ordered by name."""

    matching = [
        LocationInfo(id=location.id, name=location.name, category_id=location.category_id)
        for location in (locations.get(loc_id) for loc_id in shared_location_ids)
        if location is not None
    ]
    matching.sort(key=lambda info: (info.name.casefold(), info.id))
    return UserProfileWithLocationsResponse(**_profile_fields(user), matching_locations=matching)


def to_match_user_info(user: UserDocument) -> MatchUserInfo:
    return MatchUserInfo(telegram_id=user.telegram_id, username=user.username, first_name=user.first_name)


__all__ = ["to_match_user_info", "to_profile_response", "to_profile_with_locations"]
