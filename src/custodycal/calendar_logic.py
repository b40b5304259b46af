from datetime import date, timedelta
from typing import Iterator, List, Mapping, Optional, Tuple

from dateutil.relativedelta import relativedelta

from .engine import evaluate_custody
from .facts import CalendarFacts, DEFAULT_FACTS
from .models import CustodyResult

Schedule = List[Tuple[date, CustodyResult]]


def iter_days(start: date, end: date) -> Iterator[date]:
    """All days from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def generate_schedule(
    start: date,
    end: date,
    options: Optional[Mapping] = None,
    facts: CalendarFacts = DEFAULT_FACTS,
) -> Schedule:
    """Evaluate every day of the range. Days do not depend on each other."""
    return [(d, evaluate_custody(d, options, facts)) for d in iter_days(start, end)]


def month_range(year: int, month: int) -> Tuple[date, date]:
    first = date(year, month, 1)
    return first, first + relativedelta(months=1) - timedelta(days=1)


def feed_window(today: date, months: int = 12) -> Tuple[date, date]:
    """
    Rolling window for the feed: from the 1st of the current month up to
    the last day before the same month `months` later.
    """
    start = today.replace(day=1)
    return start, start + relativedelta(months=months) - timedelta(days=1)


def days_with(schedule: Schedule, parent: str) -> List[date]:
    return [d for d, result in schedule if result.parent == parent]


def exchange_days(schedule: Schedule) -> Schedule:
    return [(d, result) for d, result in schedule if result.events]
