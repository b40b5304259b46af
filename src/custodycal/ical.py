# src/custodycal/ical.py
"""
iCalendar feed of the custody schedule.

One all-day event for every day the children are with Mother and one
one-hour event for every exchange, over a rolling window that starts on
the first of the current month.
"""
import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Mapping, Optional, Tuple

from icalendar import Calendar, Event, vDuration

from .calendar_logic import feed_window, generate_schedule
from .config import DEFAULTS, load_config
from .engine import ROFR_FLAG
from .facts import CalendarFacts, DEFAULT_FACTS
from .models import MOTHER, CustodyResult, ExchangeEvent

_TIME_RE = re.compile(r'(\d+):(\d+)\s*(AM|PM)', re.IGNORECASE)
DEFAULT_TIME = (9, 0)


def parse_event_time(text: Optional[str]) -> Tuple[int, int]:
    """First 'H:MM AM/PM' in the text as (hours, minutes); 9:00 if there is none."""
    if not text:
        return DEFAULT_TIME
    match = _TIME_RE.search(text)
    if not match:
        return DEFAULT_TIME
    hours, minutes = int(match.group(1)), int(match.group(2))
    meridiem = match.group(3).upper()
    if meridiem == 'PM' and hours != 12:
        hours += 12
    elif meridiem == 'AM' and hours == 12:
        hours = 0
    return hours, minutes


def _audit_line(result: CustodyResult) -> str:
    line = f"Level {result.matched_level}: {result.matched_rule}"
    rofr = result.flags.get(ROFR_FLAG)
    if rofr:
        line += f"\n{rofr['message']}"
    return line


def custody_event(d: date, result: CustodyResult, cfg: dict, stamp: datetime) -> Event:
    event = Event()
    event.add('uid', f"{d:%Y%m%d}-custody@{cfg['uid_domain']}")
    event.add('dtstamp', stamp)
    event.add('dtstart', d)
    event.add('dtend', d + timedelta(days=1))
    event.add('summary', cfg['custody_summary'])
    event.add('description', _audit_line(result))
    event.add('transp', 'TRANSPARENT')
    event.add('status', 'CONFIRMED')
    return event


def exchange_event(d: date, index: int, exchange: ExchangeEvent, result: CustodyResult,
                   cfg: dict, stamp: datetime) -> Event:
    hours, minutes = parse_event_time(exchange.time)
    start = datetime.combine(d, time(hours, minutes))
    event = Event()
    event.add('uid', f"{d:%Y%m%d}-{index}-{exchange.kind}@{cfg['uid_domain']}")
    event.add('dtstamp', stamp)
    event.add('dtstart', start)
    event.add('dtend', start + timedelta(hours=1))
    event.add('summary', exchange.title)
    event.add('location', exchange.location)
    event.add('description',
              f"{exchange.title} at {exchange.time}\nLocation: {exchange.location}\n"
              f"{_audit_line(result)}")
    event.add('status', 'CONFIRMED')
    return event


def build_feed(today: Optional[date] = None, now: Optional[datetime] = None,
               config: Optional[dict] = None, facts: CalendarFacts = DEFAULT_FACTS,
               window: Optional[Tuple[date, date]] = None,
               options: Optional[Mapping] = None) -> Calendar:
    """
    Feed over `window` (start, end inclusive); without one the rolling
    window of `feed_months` from the first of today's month is used.
    """
    cfg = {**DEFAULTS, **config} if config is not None else load_config()
    today = today or date.today()
    stamp = now or datetime.now(timezone.utc)

    cal = Calendar()
    cal.add('prodid', cfg['prodid'])
    cal.add('version', '2.0')
    cal.add('calscale', 'GREGORIAN')
    cal.add('method', 'PUBLISH')
    cal.add('x-wr-calname', cfg['calendar_name'])
    cal.add('x-wr-timezone', cfg['timezone'])
    cal.add('x-wr-caldesc', cfg['calendar_description'])
    cal.add('refresh-interval', vDuration(timedelta(days=1)), parameters={'VALUE': 'DURATION'})
    cal.add('x-published-ttl', vDuration(timedelta(hours=1)))

    start, end = window or feed_window(today, int(cfg.get('feed_months', 12)))
    for d, result in generate_schedule(start, end, options, facts):
        if result.parent == MOTHER:
            cal.add_component(custody_event(d, result, cfg, stamp))
        for i, exchange in enumerate(result.events):
            cal.add_component(exchange_event(d, i, exchange, result, cfg, stamp))
    return cal


def generate_feed(today: Optional[date] = None, now: Optional[datetime] = None,
                  config: Optional[dict] = None, window: Optional[Tuple[date, date]] = None,
                  options: Optional[Mapping] = None) -> bytes:
    return build_feed(today, now, config, window=window, options=options).to_ical()
