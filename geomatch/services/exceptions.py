"""Typed failures raised by the people service."""

from __future__ import annotations


class PeopleServiceError(Exception):
    """Base class for people service failures the caller must react to."""


class InvalidArgumentError(PeopleServiceError, ValueError):
    """Raised for self-targeting reactions or oversized like messages."""


class UserNotFoundError(PeopleServiceError, LookupError):
    """Raised when a requester or target cannot be resolved."""

    def __init__(self, telegram_id: int, role: str = "user") -> None:
        self.telegram_id = telegram_id
        self.role = role
        label = "User" if role == "user" else "Target user"
        super().__init__(f"{label} not found")


__all__ = ["InvalidArgumentError", "PeopleServiceError", "UserNotFoundError"]
