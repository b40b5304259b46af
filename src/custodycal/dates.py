# src/custodycal/dates.py
import calendar
from datetime import date, timedelta
from typing import Optional

from .facts import CalendarFacts, DEFAULT_FACTS, REGULAR_PICKUP, MINIMUM_DAY_PICKUP
from .models import ODD, EVEN

FRIDAY = 4


def is_instruction_day(d: date, facts: CalendarFacts = DEFAULT_FACTS) -> bool:
    """School day with students: a weekday inside a school year that is not a day off."""
    if d.weekday() >= 5:
        return False
    in_session = any(
        start <= d and (end is None or d <= end)
        for start, end in facts.instruction_windows
    )
    if not in_session:
        return False
    return d not in facts.no_instruction_days


def is_minimum_day(d: date, facts: CalendarFacts = DEFAULT_FACTS) -> bool:
    return d in facts.minimum_days


def weekend_friday(d: date) -> date:
    """Friday that begins the weekend `d` belongs to (Mon-Thu -> previous Friday)."""
    return d - timedelta(days=(d.weekday() - FRIDAY) % 7)


def weekend_parity(d: date, facts: CalendarFacts = DEFAULT_FACTS) -> str:
    """
    'odd' (Mother) or 'even' (Father).

    Counts whole weeks between the anchor Friday and the Friday of `d`'s
    weekend. Week 0 is odd, so the anchor weekend itself is Mother's and
    the label flips every 7 days.
    """
    diff_days = (weekend_friday(d) - facts.weekend_anchor.date()).days
    weeks = diff_days // 7
    return ODD if weeks % 2 == 0 else EVEN


def year_parity(year: int) -> str:
    return EVEN if year % 2 == 0 else ODD


def nth_weekday_of_month(year: int, month: int, weekday: int, n: int) -> Optional[int]:
    """Day of month of the n-th `weekday` (0=Monday ... 6=Sunday), or None."""
    count = 0
    for day in range(1, calendar.monthrange(year, month)[1] + 1):
        if date(year, month, day).weekday() == weekday:
            count += 1
            if count == n:
                return day
    return None


def fifth_friday(year: int, month: int) -> Optional[int]:
    return nth_weekday_of_month(year, month, FRIDAY, 5)


def has_fifth_weekend(year: int, month: int) -> bool:
    return fifth_friday(year, month) is not None


def is_fifth_weekend(d: date) -> bool:
    """Fri/Sat/Sun of the weekend that starts on a month's fifth Friday."""
    if d.weekday() not in (4, 5, 6):
        return False
    friday = weekend_friday(d)
    return fifth_friday(friday.year, friday.month) == friday.day


def pickup_time(d: date, facts: CalendarFacts = DEFAULT_FACTS) -> str:
    if is_minimum_day(d, facts):
        return MINIMUM_DAY_PICKUP
    return REGULAR_PICKUP
