# src/custodycal/facts.py
"""
Static calendar tables for the custody order.

Everything in here is data: the school calendar, the weekend anchor,
the exchange constants and the hand-authored break schedules. The
tables are built once into ``DEFAULT_FACTS`` and never mutated.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Tuple

from .models import (
    MOTHER, FATHER, DROP, PICK, RECEIVE,
    EventTemplate, ScheduledDay,
)

# === Exchange constants ===
REGULAR_PICKUP = "2:15 PM (Child A) / 2:50 PM (Child B)"
MINIMUM_DAY_PICKUP = "1:10 PM (Child A) / 1:25 PM (Child B)"
SCHOOL_DROP_TIME = "8:20 AM"
CURBSIDE_TIME = "9:00 AM"
WINTER_EXCHANGE_TIME = "11:00 AM"
MID_BREAK_TIME = "12:00 PM"
SUMMER_EXCHANGE_TIME = "4:00 PM"

TITLE_DROP = "YOU DROP OFF"
TITLE_PICK = "YOU PICK UP"
TITLE_RECEIVE = "HE DROPS OFF"

SCHOOL = "School"
MOTHER_CURBSIDE = "Your Home (Curbside)"
FATHER_CURBSIDE = "His House (Curbside)"
SUMMER_TO_FATHER = "Camp or His House (Curbside)"
SUMMER_TO_MOTHER = "Camp or Your Home (Curbside)"

WINTER = 'winter'
SPRING = 'spring'
THANKSGIVING = 'thanksgiving'

ScheduleTable = Mapping[Tuple[int, str], Tuple[ScheduledDay, ...]]


@dataclass(frozen=True)
class CalendarFacts:
    instruction_windows: Tuple[Tuple[date, Optional[date]], ...]
    no_instruction_days: FrozenSet[date]
    minimum_days: FrozenSet[date]
    weekend_anchor: datetime
    summer_start: date
    summer_end: date
    summer_weeks: int = 8
    mothers_birthday: Tuple[int, int] = (10, 2)
    fathers_birthday: Tuple[int, int] = (12, 31)
    fixed_schedules: ScheduleTable = field(default_factory=lambda: MappingProxyType({}))
    holiday_schedules: ScheduleTable = field(default_factory=lambda: MappingProxyType({}))


def _days(first: date, last: date):
    n = (last - first).days
    return [first + timedelta(days=i) for i in range(n + 1)]


def _weekdays(first: date, last: date):
    return [d for d in _days(first, last) if d.weekday() < 5]


_NO_INSTRUCTION = frozenset(
    # Winter break 2025/26, Jan 5 = PD day
    _weekdays(date(2025, 12, 22), date(2026, 1, 2)) + [date(2026, 1, 5)]
    + [
        date(2026, 1, 19),   # MLK Day
        date(2026, 2, 16),   # Presidents Day
    ]
    # Spring break
    + [date(2026, 4, 3)] + _weekdays(date(2026, 4, 6), date(2026, 4, 10))
    + [
        date(2026, 5, 25),   # Memorial Day
        date(2026, 5, 29),
        date(2026, 9, 7),    # Labor Day
        date(2026, 11, 11),  # Veterans Day
    ]
    + _weekdays(date(2026, 11, 23), date(2026, 11, 27))
    + _weekdays(date(2026, 12, 21), date(2026, 12, 31))
)

_MINIMUM_DAYS = frozenset([
    date(2025, 11, 10), date(2025, 11, 11), date(2025, 11, 13), date(2025, 11, 14),
    date(2026, 3, 9), date(2026, 3, 10), date(2026, 3, 12), date(2026, 3, 13),
    date(2026, 5, 28),
])


def _pick_at_school():
    return EventTemplate(PICK, TITLE_PICK, SCHOOL)


def _drop_at_school():
    return EventTemplate(DROP, TITLE_DROP, SCHOOL, SCHOOL_DROP_TIME)


def _drop_at_his(time):
    return EventTemplate(DROP, TITLE_DROP, FATHER_CURBSIDE, time)


def _received_at_home(time):
    return EventTemplate(RECEIVE, TITLE_RECEIVE, MOTHER_CURBSIDE, time)


def _day(start, parent, note, rule, *events, end=None):
    return ScheduledDay(start, end or start, parent, note, rule, tuple(events))


WINTER_BREAK_2025 = (
    _day(date(2025, 12, 18), MOTHER, 'Winter Break Starts', 'winter_break_2025_start',
         _pick_at_school()),
    _day(date(2025, 12, 19), MOTHER, 'Winter Break Custody', 'winter_break_2025_day2',
         _drop_at_school(), _pick_at_school()),
    _day(date(2025, 12, 20), MOTHER, 'Winter Break', 'winter_break_2025_mother_1st',
         end=date(2025, 12, 21)),
    _day(date(2025, 12, 22), MOTHER, 'Mid-Break Exchange', 'winter_break_2025_exchange_1',
         _drop_at_his(WINTER_EXCHANGE_TIME)),
    _day(date(2025, 12, 23), FATHER, 'Winter Break', 'winter_break_2025_father',
         end=date(2025, 12, 24)),
    _day(date(2025, 12, 25), MOTHER, 'Christmas', 'winter_break_2025_christmas',
         _received_at_home(WINTER_EXCHANGE_TIME)),
    _day(date(2025, 12, 26), MOTHER, 'Winter Break', 'winter_break_2025_mother_2nd',
         end=date(2025, 12, 28)),
    _day(date(2025, 12, 29), MOTHER, 'Mid-Break Exchange', 'winter_break_2025_exchange_2',
         _drop_at_his(WINTER_EXCHANGE_TIME)),
    # Dec 31 is also the father's birthday
    _day(date(2025, 12, 30), FATHER, 'Winter Break', 'winter_break_2025_father_nye',
         end=date(2025, 12, 31)),
    _day(date(2026, 1, 1), FATHER, 'Winter Break', 'winter_break_2026_new_year'),
    _day(date(2026, 1, 2), MOTHER, 'Exchange', 'winter_break_2026_exchange_3',
         _received_at_home(WINTER_EXCHANGE_TIME)),
    _day(date(2026, 1, 3), MOTHER, 'Winter Break', 'winter_break_2026_mother_final',
         end=date(2026, 1, 4)),
    # Jan 5 is a PD day: holiday extension through Monday
    _day(date(2026, 1, 5), MOTHER, 'Winter Break Holiday Extension (PD Day - Keep Until Tue)',
         'winter_break_2026_monday_extension'),
    _day(date(2026, 1, 6), MOTHER, 'Return from Winter Break', 'winter_break_2026_return',
         _drop_at_school()),
)

SPRING_BREAK_2026 = (
    _day(date(2026, 4, 2), MOTHER, 'Spring Break Starts', 'spring_break_2026_start',
         _pick_at_school()),
    _day(date(2026, 4, 3), MOTHER, 'Cesar Chavez Day (No School)', 'spring_break_2026_cesar_chavez'),
    _day(date(2026, 4, 4), MOTHER, 'Spring Break', 'spring_break_2026_mother_half',
         end=date(2026, 4, 7)),
    _day(date(2026, 4, 8), MOTHER, 'Mid-Break Exchange', 'spring_break_2026_exchange',
         _drop_at_his(MID_BREAK_TIME)),
    _day(date(2026, 4, 9), FATHER, 'Spring Break', 'spring_break_2026_father_half',
         end=date(2026, 4, 12)),
)

THANKSGIVING_2026 = (
    _day(date(2026, 11, 20), MOTHER, 'TG Break Starts', 'thanksgiving_2026_start',
         _pick_at_school()),
    _day(date(2026, 11, 21), MOTHER, 'Thanksgiving Break', 'thanksgiving_2026_mother_half',
         end=date(2026, 11, 24)),
    _day(date(2026, 11, 25), MOTHER, 'Mid-Break Exchange', 'thanksgiving_2026_exchange',
         _drop_at_his(MID_BREAK_TIME)),
    _day(date(2026, 11, 26), FATHER, 'Thanksgiving Break', 'thanksgiving_2026_father_half',
         end=date(2026, 11, 27)),
)


DEFAULT_FACTS = CalendarFacts(
    instruction_windows=(
        (date(2025, 8, 11), date(2026, 5, 28)),
        (date(2026, 8, 10), None),
    ),
    no_instruction_days=_NO_INSTRUCTION,
    minimum_days=_MINIMUM_DAYS,
    weekend_anchor=datetime(2025, 12, 12, 12, 0),
    summer_start=date(2026, 5, 29),
    summer_end=date(2026, 7, 24),
    fixed_schedules=MappingProxyType({
        (2025, WINTER): WINTER_BREAK_2025,
    }),
    # Winter breaks after the fixed year go here as (year, WINTER) once the dates are known
    holiday_schedules=MappingProxyType({
        (2026, SPRING): SPRING_BREAK_2026,
        (2026, THANKSGIVING): THANKSGIVING_2026,
    }),
)
