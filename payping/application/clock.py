from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Callable
from zoneinfo import ZoneInfo

from payping.core.config import get_settings

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    """Current instant in the configured application timezone."""
    return datetime.now(ZoneInfo(get_settings().app_timezone))


def as_aware(moment: datetime, tz: tzinfo | None) -> datetime:
    """Read a naive timestamp as wall-clock time in ``tz``."""
    if moment.tzinfo is not None or tz is None:
        return moment
    return moment.replace(tzinfo=tz)
