from __future__ import annotations

from enum import Enum
from typing import TypeVar
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from payping.domain.errors import ValidationError

E = TypeVar("E", bound=Enum)

CLIENT_NAME_MAX = 100
CLIENT_CONTACT_MAX = 100
CLIENT_NOTES_MAX = 500
REMINDER_MESSAGE_MAX = 1000


def required_text(value: str | None, field: str, max_length: int | None = None) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field} is required")
    if max_length is not None and len(text) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return text


def optional_text(value: str | None, field: str, max_length: int | None = None) -> str | None:
    text = (value or "").strip()
    if not text:
        return None
    if max_length is not None and len(text) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return text


def enum_value(enum_cls: type[E], value: E | str | None, field: str) -> E:
    try:
        return enum_cls(value)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"{field} must be one of: {allowed}") from exc


def zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValidationError(f"Unknown timezone: {name}") from exc
