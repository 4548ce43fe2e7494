from datetime import date
from decimal import Decimal
from typing import Protocol

from ..models import Host
from ..utils.time import iter_days


class Stay(Protocol):
    start_date: date
    end_date: date


def overlaps(a: Stay, b: Stay) -> bool:
    """
    Inclusive overlap: a stay ending on day X conflicts with one starting on day X.
    Used by reservation validation.
    """
    return a.start_date <= b.end_date and a.end_date >= b.start_date


def disjoint(a: Stay, b: Stay) -> bool:
    """Strict disjointness used by update conflict detection: the stays share no day."""
    return a.start_date > b.end_date or a.end_date < b.start_date


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def calculate_total(start_date: date, end_date: date, host: Host) -> Decimal:
    """Sum the host's nightly rate for every day in [start_date, end_date], inclusive."""
    total = Decimal("0")
    for day in iter_days(start_date, end_date):
        total += host.weekend_rate if is_weekend(day) else host.standard_rate
    return total
