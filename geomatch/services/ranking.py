"""Candidate ranking shared by the location, interest and open searches.

All three searches run the same pipeline: drop excluded, inactive,
incomplete and incompatible users, score what is left with the strategy's
own scorer, then order by score (descending) and name. A scorer returns
``None`` to reject a candidate outright.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Mapping, Optional, Set, Tuple

from ..config import EXCLUSION_POLICY_BIDIRECTIONAL
from ..models.user import UserDocument
from .compatibility import is_compatible
from .interests import extract_interest_categories, shared_categories

Scorer = Callable[[UserDocument, Set[int]], Optional[int]]


@dataclass
class RankedCandidate:
    user: UserDocument
    score: int
    shared_location_ids: Set[int] = field(default_factory=set)


def build_exclusions(
    user_id: int,
    liked: Iterable[int] = (),
    disliked: Iterable[int] = (),
    *,
    liked_by: Iterable[int] = (),
    disliked_by: Iterable[int] = (),
    policy: str,
) -> Set[int]:
    """Ids that must never be offered to ``user_id`` as candidates."""

    excluded = {user_id}
    excluded.update(liked)
    excluded.update(disliked)
    if policy == EXCLUSION_POLICY_BIDIRECTIONAL:
        excluded.update(liked_by)
        excluded.update(disliked_by)
    return excluded


def name_sort_key(user: UserDocument) -> Tuple[str, int]:
    return ((user.username or "").casefold(), user.telegram_id)


def is_eligible(candidate: UserDocument) -> bool:
    return candidate.is_active and not candidate.is_deleted and candidate.is_profile_complete


def rank_candidates(
    requester: UserDocument,
    pool: Iterable[UserDocument],
    *,
    scorer: Scorer,
    exclusions: Set[int],
    shared_locations: Mapping[int, Set[int]],
    unknown_preference_accepts: bool = True,
) -> List[RankedCandidate]:
    ranked: List[RankedCandidate] = []
    for candidate in pool:
        if candidate.telegram_id in exclusions or not is_eligible(candidate):
            continue
        if not is_compatible(requester, candidate, unknown_accepts=unknown_preference_accepts):
            continue
        shared = set(shared_locations.get(candidate.telegram_id, ()))
        score = scorer(candidate, shared)
        if score is None:
            continue
        ranked.append(RankedCandidate(user=candidate, score=score, shared_location_ids=shared))

    ranked.sort(key=lambda item: (-item.score, *name_sort_key(item.user)))
    return ranked


def location_scorer(candidate: UserDocument, shared: Set[int]) -> Optional[int]:
    return len(shared) or None


def interest_scorer(requester_categories: Set[str], minimum: int) -> Scorer:
    def _score(candidate: UserDocument, shared: Set[int]) -> Optional[int]:
        overlap = len(shared_categories(requester_categories, extract_interest_categories(candidate.interests)))
        if overlap == 0 or overlap < minimum:
            return None
        return overlap

    return _score


def open_scorer(candidate: UserDocument, shared: Set[int]) -> Optional[int]:
    return 0


__all__ = [
    "RankedCandidate",
    "Scorer",
    "build_exclusions",
    "interest_scorer",
    "is_eligible",
    "location_scorer",
    "name_sort_key",
    "open_scorer",
    "rank_candidates",
]
