# src/custodycal/rules.py
"""
Precedence levels of the custody order.

Every level is a function ``level_N(d, facts) -> CustodyResult | None``.
Levels 0, 2, 3 and 4 are driven by an ordered table of
``(predicate, action)`` pairs: the first predicate that holds decides the
level's answer, even when its action returns None (a deliberate
"defer to the next level"). Level 1 is a lookup in the fixed schedules.
"""
from datetime import date, timedelta
from functools import partial
from typing import Callable, Optional, Sequence, Tuple

from .dates import (
    FRIDAY, is_instruction_day, is_fifth_weekend, nth_weekday_of_month,
    pickup_time, weekend_parity, year_parity,
)
from .facts import (
    CalendarFacts, WINTER, SPRING, THANKSGIVING,
    SCHOOL, SCHOOL_DROP_TIME, CURBSIDE_TIME, SUMMER_EXCHANGE_TIME,
    FATHER_CURBSIDE, MOTHER_CURBSIDE, SUMMER_TO_FATHER, SUMMER_TO_MOTHER,
    TITLE_DROP, TITLE_PICK, TITLE_RECEIVE,
)
from .models import (
    MOTHER, FATHER, ODD, DROP, PICK, RECEIVE,
    CustodyResult, ExchangeEvent, ScheduledDay,
)

Predicate = Callable[[date, CalendarFacts], bool]
Action = Callable[[date, CalendarFacts], Optional[CustodyResult]]
Rule = Tuple[Predicate, Action]

SUNDAY = 6
_DAY_NAMES = ['monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday']


def first_match(rules: Sequence[Rule], d: date, facts: CalendarFacts) -> Optional[CustodyResult]:
    for matches, action in rules:
        if matches(d, facts):
            return action(d, facts)
    return None


# === shared event builders ===

def _drop_school_or_curbside(d, facts):
    if is_instruction_day(d, facts):
        return (ExchangeEvent(DROP, TITLE_DROP, SCHOOL_DROP_TIME, SCHOOL),)
    return (ExchangeEvent(DROP, TITLE_DROP, CURBSIDE_TIME, FATHER_CURBSIDE),)


def _drop_and_pick_at_school(d, facts):
    if not is_instruction_day(d, facts):
        return ()
    return (
        ExchangeEvent(DROP, TITLE_DROP, SCHOOL_DROP_TIME, SCHOOL),
        ExchangeEvent(PICK, TITLE_PICK, pickup_time(d, facts), SCHOOL),
    )


def _weekend_owner(d, facts):
    if is_fifth_weekend(d) or weekend_parity(d, facts) == ODD:
        return MOTHER
    return FATHER


# ============================================================================
# Level 0: super-overrides
# ============================================================================

def _mothers_day(year):
    return date(year, 5, nth_weekday_of_month(year, 5, SUNDAY, 2))


def _fathers_day(year):
    return date(year, 6, nth_weekday_of_month(year, 6, SUNDAY, 3))


def _is_mothers_day(d, facts):
    return d.month == 5 and d == _mothers_day(d.year)


def _is_day_after_mothers_day(d, facts):
    prev = d - timedelta(days=1)
    return prev.month == 5 and prev == _mothers_day(prev.year)


def _is_fathers_day(d, facts):
    return d.month == 6 and d == _fathers_day(d.year)


def _is_mothers_birthday(d, facts):
    return (d.month, d.day) == facts.mothers_birthday


def _is_day_after_mothers_birthday(d, facts):
    prev = d - timedelta(days=1)
    return (prev.month, prev.day) == facts.mothers_birthday


def _is_fathers_birthday(d, facts):
    return (d.month, d.day) == facts.fathers_birthday


def _return_after_mothers_occasion(d, facts, rule_prefix, return_note):
    # An odd weekend means the children would be with Mother anyway
    if weekend_parity(d, facts) == ODD:
        return CustodyResult(MOTHER, (), 'My Weekend (Cont.)', 0,
                             f'{rule_prefix}_weekend_continuation')
    return CustodyResult(MOTHER, _drop_school_or_curbside(d, facts), return_note, 0,
                         f'{rule_prefix}_return')


def _mothers_day_result(d, facts):
    events = (ExchangeEvent(RECEIVE, TITLE_RECEIVE, CURBSIDE_TIME, MOTHER_CURBSIDE),)
    return CustodyResult(MOTHER, events, "Mother's Day", 0, 'mothers_day')


def _fathers_day_result(d, facts):
    return CustodyResult(FATHER, (), "Father's Day", 0, 'fathers_day')


def _mothers_birthday_result(d, facts):
    if is_instruction_day(d, facts):
        events = _drop_and_pick_at_school(d, facts)
    else:
        events = (ExchangeEvent(RECEIVE, TITLE_RECEIVE, CURBSIDE_TIME, MOTHER_CURBSIDE),)
    return CustodyResult(MOTHER, events, 'Your Birthday', 0, 'mother_birthday')


def _defer(d, facts):
    # Father's birthday falls inside the fixed winter break (Level 1)
    return None


LEVEL_0_RULES: Sequence[Rule] = (
    (_is_mothers_day, _mothers_day_result),
    (_is_day_after_mothers_day,
     partial(_return_after_mothers_occasion, rule_prefix='mothers_day',
             return_note="Return from Mother's Day")),
    (_is_fathers_day, _fathers_day_result),
    (_is_mothers_birthday, _mothers_birthday_result),
    (_is_day_after_mothers_birthday,
     partial(_return_after_mothers_occasion, rule_prefix='mother_birthday',
             return_note='Return from Birthday')),
    (_is_fathers_birthday, _defer),
)


def level_0(d: date, facts: CalendarFacts) -> Optional[CustodyResult]:
    return first_match(LEVEL_0_RULES, d, facts)


# ============================================================================
# Level 1: fixed one-time dates
# ============================================================================

def _find_entry(schedule: Sequence[ScheduledDay], d: date) -> Optional[ScheduledDay]:
    for entry in schedule:
        if entry.covers(d):
            return entry
    return None


def _from_schedule(entry: ScheduledDay, d: date, facts: CalendarFacts, level: int) -> CustodyResult:
    events = tuple(
        ExchangeEvent(t.kind, t.title, t.time or pickup_time(d, facts), t.location)
        for t in entry.events
    )
    return CustodyResult(entry.parent, events, entry.note, level, entry.rule)


def level_1(d: date, facts: CalendarFacts) -> Optional[CustodyResult]:
    for key in sorted(facts.fixed_schedules):
        entry = _find_entry(facts.fixed_schedules[key], d)
        if entry is not None:
            return _from_schedule(entry, d, facts, 1)
    return None


# ============================================================================
# Level 2: recurring holiday overrides
# ============================================================================

def _holiday_entry(d, facts, kind, after=None):
    # A break may start in December and run into the next year
    for year in (d.year, d.year - 1):
        if after is not None and year <= after:
            continue
        schedule = facts.holiday_schedules.get((year, kind))
        if schedule:
            entry = _find_entry(schedule, d)
            if entry is not None:
                return entry
    return None


def _last_fixed_winter_year(facts):
    years = [year for year, kind in facts.fixed_schedules if kind == WINTER]
    return max(years) if years else None


def _is_halloween(d, facts):
    return d.month == 10 and d.day == 31


def _halloween(d, facts):
    if year_parity(d.year) == ODD:
        return CustodyResult(MOTHER, (), 'Halloween (Odd Year)', 2, 'halloween_mother')
    return CustodyResult(FATHER, (), 'Halloween (Even Year)', 2, 'halloween_father')


def _in_break(d, facts, kind):
    return _holiday_entry(d, facts, kind) is not None


def _break_result(d, facts, kind):
    return _from_schedule(_holiday_entry(d, facts, kind), d, facts, 2)


def _later_winter_entry(d, facts):
    # only winters after the hand-authored Level 1 break
    return _holiday_entry(d, facts, WINTER, after=_last_fixed_winter_year(facts))


def _in_later_winter_break(d, facts):
    return _later_winter_entry(d, facts) is not None


def _later_winter_break(d, facts):
    return _from_schedule(_later_winter_entry(d, facts), d, facts, 2)


LEVEL_2_RULES: Sequence[Rule] = (
    (_is_halloween, _halloween),
    (partial(_in_break, kind=SPRING), partial(_break_result, kind=SPRING)),
    (partial(_in_break, kind=THANKSGIVING), partial(_break_result, kind=THANKSGIVING)),
    (_in_later_winter_break, _later_winter_break),
)


def level_2(d: date, facts: CalendarFacts) -> Optional[CustodyResult]:
    return first_match(LEVEL_2_RULES, d, facts)


# ============================================================================
# Level 3: summer rotation
# ============================================================================

def summer_week(d: date, facts: CalendarFacts) -> int:
    return (d - facts.summer_start).days // 7 + 1


def _is_mother_week(week):
    return week % 2 == 1


def post_summer_friday(facts: CalendarFacts) -> date:
    """First Friday at or after the end of the last summer week."""
    end = facts.summer_start + timedelta(weeks=facts.summer_weeks)
    return end + timedelta(days=(FRIDAY - end.weekday()) % 7)


def _after_summer_weeks(d, facts):
    return summer_week(d, facts) > facts.summer_weeks and d >= post_summer_friday(facts)


def _post_summer(d, facts):
    friday = post_summer_friday(facts)
    parent = MOTHER if weekend_parity(friday, facts) == ODD else FATHER
    events = ()
    last_week_parent = MOTHER if _is_mother_week(facts.summer_weeks) else FATHER
    if d == friday and parent != last_week_parent:
        if parent == MOTHER:
            events = (ExchangeEvent(RECEIVE, TITLE_RECEIVE, SUMMER_EXCHANGE_TIME, SUMMER_TO_MOTHER),)
        else:
            events = (ExchangeEvent(DROP, TITLE_DROP, SUMMER_EXCHANGE_TIME, SUMMER_TO_FATHER),)
    return CustodyResult(parent, events, 'Post-Summer (Regular Schedule)', 3,
                         f'summer_end_transition_{parent}')


def _is_summer_transition(d, facts):
    week = summer_week(d, facts)
    return (2 <= week <= facts.summer_weeks
            and d.weekday() == FRIDAY
            and (d - facts.summer_start).days % 7 == 0)


def _summer_transition(d, facts):
    week = summer_week(d, facts)
    prev = week - 1
    if _is_mother_week(prev):
        events = (ExchangeEvent(DROP, TITLE_DROP, SUMMER_EXCHANGE_TIME, SUMMER_TO_FATHER),)
        return CustodyResult(MOTHER, events, f'End Summer Week {prev}', 3,
                             f'summer_week_{prev}_end_mother')
    events = (ExchangeEvent(RECEIVE, TITLE_RECEIVE, SUMMER_EXCHANGE_TIME, SUMMER_TO_MOTHER),)
    return CustodyResult(MOTHER, events, f'Start Summer Week {week}', 3,
                         f'summer_week_{week}_start_mother')


def _within_summer_weeks(d, facts):
    return summer_week(d, facts) <= facts.summer_weeks


def _summer_week_result(d, facts):
    week = summer_week(d, facts)
    parent = MOTHER if _is_mother_week(week) else FATHER
    return CustodyResult(parent, (), f'Summer Week {week}', 3, f'summer_week_{week}_{parent}')


LEVEL_3_RULES: Sequence[Rule] = (
    (_after_summer_weeks, _post_summer),
    (_is_summer_transition, _summer_transition),
    (_within_summer_weeks, _summer_week_result),
)


def level_3(d: date, facts: CalendarFacts) -> Optional[CustodyResult]:
    if not (facts.summer_start <= d <= facts.summer_end):
        return None
    return first_match(LEVEL_3_RULES, d, facts)


# ============================================================================
# Level 4: standard weekly rotation
# ============================================================================

def _weekday_is(*days):
    return lambda d, facts: d.weekday() in days


def _monday(d, facts):
    sunday = d - timedelta(days=1)
    if _weekend_owner(sunday, facts) == MOTHER:
        if not is_instruction_day(d, facts):
            # holiday extension: Mother keeps the children until Tuesday
            return CustodyResult(MOTHER, (), 'Holiday Extension (Keep Until Tue)', 4,
                                 'monday_mother_holiday_extension')
        events = (ExchangeEvent(DROP, TITLE_DROP, SCHOOL_DROP_TIME, SCHOOL),)
        return CustodyResult(MOTHER, events, 'End of Weekend', 4, 'monday_mother_return')
    return CustodyResult(FATHER, (), 'Regular Monday', 4, 'monday_father')


def _tuesday(d, facts):
    monday = d - timedelta(days=1)
    if (not is_instruction_day(monday, facts)
            and _weekend_owner(monday - timedelta(days=1), facts) == MOTHER):
        return CustodyResult(MOTHER, _drop_school_or_curbside(d, facts), 'Return from Holiday', 4,
                             'tuesday_mother_holiday_return')
    return CustodyResult(FATHER, (), 'Regular Tuesday', 4, 'tuesday_father')


def _wednesday(d, facts):
    return CustodyResult(FATHER, (), 'Regular Wednesday', 4, 'wednesday_father')


def _thursday(d, facts):
    events = ()
    if is_instruction_day(d, facts):
        events = (ExchangeEvent(PICK, TITLE_PICK, pickup_time(d, facts), SCHOOL),)
    return CustodyResult(MOTHER, events, 'Thursday Overnight', 4, 'thursday_mother')


def _fifth_weekend_day(d, facts):
    return is_fifth_weekend(d)


def _fifth_weekend(d, facts):
    events = _drop_and_pick_at_school(d, facts) if d.weekday() == FRIDAY else ()
    return CustodyResult(MOTHER, events, '5th Weekend (Mother)', 4,
                         f'{_DAY_NAMES[d.weekday()]}_fifth_weekend')


def _friday(d, facts):
    if weekend_parity(d, facts) == ODD:
        return CustodyResult(MOTHER, _drop_and_pick_at_school(d, facts), 'Weekend Start', 4,
                             'friday_mother_weekend')
    # Father's weekend starts, Mother hands over
    return CustodyResult(FATHER, _drop_school_or_curbside(d, facts), 'End of Your Time', 4,
                         'friday_father_weekend')


def _weekend_day(d, facts):
    name = _DAY_NAMES[d.weekday()]
    if weekend_parity(d, facts) == ODD:
        return CustodyResult(MOTHER, (), 'My Weekend', 4, f'{name}_mother')
    return CustodyResult(FATHER, (), 'His Weekend', 4, f'{name}_father')


def _always(d, facts):
    return True


def _fallback(d, facts):
    return CustodyResult(FATHER, (), 'Fallback', 4, 'fallback')


LEVEL_4_RULES: Sequence[Rule] = (
    (_weekday_is(0), _monday),
    (_weekday_is(1), _tuesday),
    (_weekday_is(2), _wednesday),
    (_weekday_is(3), _thursday),
    (_fifth_weekend_day, _fifth_weekend),
    (_weekday_is(4), _friday),
    (_weekday_is(5, 6), _weekend_day),
    (_always, _fallback),
)


def level_4(d: date, facts: CalendarFacts) -> Optional[CustodyResult]:
    return first_match(LEVEL_4_RULES, d, facts)


LEVELS = (level_0, level_1, level_2, level_3, level_4)
