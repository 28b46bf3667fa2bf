# src/taskmaster/core/clock.py

"""
Clock and calendar-window helpers.

All instants are integer milliseconds since the epoch. Calendar boundaries
(start of day, first day of week) are computed in the clock's timezone;
tz=None means the platform local clock.
"""

from __future__ import annotations

import time
from datetime import datetime, timedelta, tzinfo
from typing import Protocol

DAY_MS = 86_400_000
HOUR_MS = 3_600_000
MINUTE_MS = 60_000


class Clock(Protocol):
    tz: tzinfo | None

    def now_ms(self) -> int: ...


class SystemClock:
    """Wall clock. tz=None keeps calendar math in local time."""

    def __init__(self, tz: tzinfo | None = None) -> None:
        self.tz = tz

    def now_ms(self) -> int:
        return int(time.time() * 1000)


def _to_datetime(ts_ms: int, tz: tzinfo | None) -> datetime:
    return datetime.fromtimestamp(ts_ms / 1000, tz)


def _to_ms(dt: datetime) -> int:
    return int(round(dt.timestamp() * 1000))


def start_of_day(ts_ms: int, tz: tzinfo | None = None) -> int:
    dt = _to_datetime(ts_ms, tz)
    return _to_ms(dt.replace(hour=0, minute=0, second=0, microsecond=0))


def first_day_of_week(ts_ms: int, tz: tzinfo | None = None, first_weekday: int = 0) -> int:
    """
    Midnight of the first day of the week containing ts_ms.

    first_weekday follows datetime.weekday(): 0 = Monday ... 6 = Sunday.
    """
    dt = _to_datetime(ts_ms, tz).replace(hour=0, minute=0, second=0, microsecond=0)
    back = (dt.weekday() - (first_weekday % 7)) % 7
    return _to_ms(dt - timedelta(days=back))


def day_window(now_ms: int, tz: tzinfo | None = None) -> tuple[int, int]:
    start = start_of_day(now_ms, tz)
    return start, start + DAY_MS


def week_window(now_ms: int, tz: tzinfo | None = None, first_weekday: int = 0) -> tuple[int, int]:
    start = first_day_of_week(now_ms, tz, first_weekday)
    return start, start + 7 * DAY_MS
