# src/custodycal/engine.py
import logging
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Mapping, Optional, Union

from .facts import CalendarFacts, DEFAULT_FACTS
from .models import FATHER, CustodyResult
from .rules import LEVELS

ROFR_OPTION = 'check_right_of_first_refusal'
ROFR_FLAG = 'right_of_first_refusal'
ROFR_MESSAGE = 'If absent >24 hours, notify other parent for first refusal'

# the rules look back up to a week for the weekend Friday and the previous day
EARLIEST_DATE = date.min + timedelta(days=14)

DateLike = Union[date, datetime, str]


def normalize_date(value: DateLike) -> date:
    """Strip the time of day; ISO strings (YYYY-MM-DD) are accepted too."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip())
    raise TypeError(f"Cannot evaluate custody for {value!r}")


def _option_enabled(options, name: str) -> bool:
    # anything that is not a mapping with a real True counts as "off"
    if not isinstance(options, Mapping):
        return False
    return options.get(name) is True


def check_right_of_first_refusal(d: date, parent: Optional[str]) -> dict:
    """
    Advisory for the right of first refusal.

    There is no absence data behind this: it always asks the holder to
    notify the other parent if they will be away for more than a day.
    """
    return {'should_check': True, 'message': ROFR_MESSAGE}


def apply_modifiers(result: CustodyResult, d: date, options=None) -> CustodyResult:
    if _option_enabled(options, ROFR_OPTION):
        rofr = check_right_of_first_refusal(d, result.parent)
        if rofr['should_check']:
            result = replace(result, flags={**result.flags, ROFR_FLAG: rofr})
    return result


def evaluate_custody(value: DateLike, options: Optional[Mapping] = None,
                     facts: CalendarFacts = DEFAULT_FACTS) -> CustodyResult:
    """Walk the levels 0..4 and return the first match, with modifiers applied."""
    d = normalize_date(value)
    if d < EARLIEST_DATE:
        raise ValueError(f"Dates before {EARLIEST_DATE.isoformat()} are not supported")
    for level in LEVELS:
        result = level(d, facts)
        if result is not None:
            logging.debug(f"[CustodyCal] {d.isoformat()}: level {result.matched_level} "
                          f"rule {result.matched_rule}")
            return apply_modifiers(result, d, options)

    # Level 4 is total, this is not expected to happen
    logging.warning(f"[CustodyCal] {d.isoformat()}: no rule matched")
    return apply_modifiers(CustodyResult(FATHER, (), 'No rule matched', None, 'fallback'), d, options)
