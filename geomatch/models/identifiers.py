"""Common identifier types shared across models."""

from __future__ import annotations

from typing import Annotated, Any

from bson import ObjectId
from pydantic.functional_serializers import PlainSerializer
from pydantic.functional_validators import BeforeValidator


def _validate_object_id(value: Any) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("ObjectId string must not be empty")
        try:
            return ObjectId(text)
        except Exception as exc:  # pragma: no cover - invalid hex
            raise ValueError("Invalid ObjectId hex string") from exc
    raise TypeError("ObjectId value must be str or ObjectId instance")


def _validate_telegram_id(value: Any) -> int:
    # bool is an int subclass; a flag is never a valid id
    if isinstance(value, bool):
        raise TypeError("telegram id must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("-").isdigit():
            return int(text)
        raise ValueError("telegram id string must be numeric")
    raise TypeError("telegram id must be an integer")


PyObjectId = Annotated[
    ObjectId,
    BeforeValidator(_validate_object_id),
    PlainSerializer(lambda value: str(value), return_type=str),
]

TelegramId = Annotated[int, BeforeValidator(_validate_telegram_id)]

__all__ = ["PyObjectId", "TelegramId"]
