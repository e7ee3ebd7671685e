from datetime import datetime
from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field

from .identifiers import PyObjectId, TelegramId


def canonical_pair(user_a: int, user_b: int) -> Tuple[int, int]:
    """Return the unordered pair with the smaller id first."""
    return (user_a, user_b) if user_a <= user_b else (user_b, user_a)


class PairState(str, Enum):
    """Relationship state of an unordered user pair."""

    NO_SIGNAL = "no_signal"
    LIKED = "liked"
    MATCHED = "matched"

    @classmethod
    def resolve(cls, forward_like: bool, reverse_like: bool, match_exists: bool) -> "PairState":
        if match_exists:
            return cls.MATCHED
        if forward_like or reverse_like:
            return cls.LIKED
        return cls.NO_SIGNAL

    @staticmethod
    def can_match(forward_like: bool, reverse_like: bool) -> bool:
        return forward_like and reverse_like


class MatchDocument(BaseModel):
    """Canonical match row; user_id1 is always the smaller id."""

    model_config = ConfigDict(populate_by_name=True, extra="allow", arbitrary_types_allowed=True)

    id: PyObjectId = Field(alias="_id")
    user_id1: TelegramId = Field(alias="userId1")
    user_id2: TelegramId = Field(alias="userId2")
    created_at: datetime = Field(alias="createdAt")
    is_deleted: bool = Field(default=False, alias="isDeleted")

    def other_party(self, user_id: int) -> int:
        return self.user_id2 if self.user_id1 == user_id else self.user_id1


__all__ = [
    "MatchDocument",
    "PairState",
    "canonical_pair",
]
