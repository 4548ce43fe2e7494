from datetime import date, datetime, timedelta
from typing import Iterator
from zoneinfo import ZoneInfo

from ..config import get_settings


def today() -> date:
    """Current calendar date in the configured lodging time zone."""
    return datetime.now(ZoneInfo(get_settings().timezone)).date()


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every date from start to end, both inclusive."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)
