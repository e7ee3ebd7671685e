from __future__ import annotations

from typing import Iterable, Optional, Set

CATEGORY_SEPARATOR = ":"


def extract_interest_categories(interests: Optional[Iterable[object]]) -> Set[str]:
    """Reduce interest tags to their top-level categories.

    ``"theatre:drama"`` and ``"theatre:comedy"`` both count as ``"theatre"``;
    a tag without a separator is its own category. Categories are trimmed and
    case-folded, blank entries are skipped.
    """
    categories: Set[str] = set()
    for interest in interests or ():
        if not isinstance(interest, str):
            continue
        category = interest.split(CATEGORY_SEPARATOR, 1)[0].strip().casefold()
        if category:
            categories.add(category)
    return categories


def shared_categories(left: Iterable[str], right: Iterable[str]) -> Set[str]:
    return set(left) & set(right)


__all__ = ["CATEGORY_SEPARATOR", "extract_interest_categories", "shared_categories"]
