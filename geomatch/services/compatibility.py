"""Gender/partner-preference compatibility between two users."""

from __future__ import annotations

from typing import Optional

from ..models.user import UserDocument

PREFERENCE_ALONE = "alone"
PREFERENCE_ANY = "any"
GENDERS = frozenset({"male", "female"})


def _normalize(value: Optional[str]) -> str:
    return (value or "").strip().casefold()


def does_accept(user: UserDocument, gender: Optional[str], *, unknown_accepts: bool = True) -> bool:
    """Whether ``user`` is open to meeting somebody of ``gender``."""

    preference = _normalize(user.partner_preference)
    if preference == PREFERENCE_ALONE:
        return False
    if preference == PREFERENCE_ANY:
        return True
    if preference in GENDERS:
        return _normalize(gender) == preference
    return unknown_accepts


def is_compatible(a: UserDocument, b: UserDocument, *, unknown_accepts: bool = True) -> bool:
    return does_accept(a, b.gender, unknown_accepts=unknown_accepts) and does_accept(
        b, a.gender, unknown_accepts=unknown_accepts
    )


__all__ = [
    "GENDERS",
    "PREFERENCE_ALONE",
    "PREFERENCE_ANY",
    "does_accept",
    "is_compatible",
]
