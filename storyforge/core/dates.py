"""Calendar-day helpers; days are stored as ISO strings (YYYY-MM-DD)."""

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def local_today(timezone: str) -> date:
    try:
        tz = ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError):
        tz = ZoneInfo("UTC")
    return datetime.now(tz).date()


def day_key(d: date) -> str:
    return d.isoformat()


def previous_day_key(d: date) -> str:
    return (d - timedelta(days=1)).isoformat()


def is_valid_timezone(name: str) -> bool:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True
