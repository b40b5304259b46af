from datetime import date, datetime, timezone
import pytest
from icalendar import Calendar

from custodycal.calendar_logic import days_with, feed_window, generate_schedule
from custodycal.config import DEFAULTS
from custodycal.ical import build_feed, generate_feed, parse_event_time
from custodycal.models import MOTHER

TODAY = date(2026, 1, 15)
NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="module")
def feed():
    return Calendar.from_ical(generate_feed(TODAY, NOW, config={}))


def events(cal):
    return list(cal.walk('VEVENT'))


def is_all_day(ev):
    return not isinstance(ev.decoded('dtstart'), datetime)


@pytest.mark.parametrize("text,expected", [
    ("8:20 AM", (8, 20)),
    ("2:15 PM (Child A) / 2:50 PM (Child B)", (14, 15)),
    ("12:00 PM", (12, 0)),
    ("12:30 AM", (0, 30)),
    ("4:00 pm", (16, 0)),
    ("Camp", (9, 0)),
    ("", (9, 0)),
    (None, (9, 0)),
])
def test_parse_event_time(text, expected):
    assert parse_event_time(text) == expected


def test_calendar_properties(feed):
    assert str(feed['X-WR-CALNAME']) == DEFAULTS['calendar_name']
    assert str(feed['X-WR-TIMEZONE']) == 'America/Los_Angeles'
    assert str(feed['METHOD']) == 'PUBLISH'
    assert str(feed['PRODID']) == DEFAULTS['prodid']
    assert 'REFRESH-INTERVAL' in feed
    assert 'X-PUBLISHED-TTL' in feed


def test_uids_are_unique(feed):
    uids = [str(ev['UID']) for ev in events(feed)]
    assert len(uids) == len(set(uids))


def test_all_day_events_only_for_mother(feed):
    start, end = feed_window(TODAY)
    mother_days = set(days_with(generate_schedule(start, end), MOTHER))
    all_day = [ev for ev in events(feed) if is_all_day(ev)]
    assert {ev.decoded('dtstart') for ev in all_day} == mother_days
    assert all(str(ev['SUMMARY']) == 'Children with Mother' for ev in all_day)
    assert all(str(ev['TRANSP']) == 'TRANSPARENT' for ev in all_day)


def test_exchange_event_details(feed):
    by_uid = {str(ev['UID']): ev for ev in events(feed)}
    ev = by_uid['20260106-0-drop@custodycal.local']
    assert ev.decoded('dtstart') == datetime(2026, 1, 6, 8, 20)
    assert ev.decoded('dtend') == datetime(2026, 1, 6, 9, 20)
    assert str(ev['SUMMARY']) == 'YOU DROP OFF'
    assert str(ev['LOCATION']) == 'School'
    assert 'Level 1: winter_break_2026_return' in str(ev['DESCRIPTION'])


def test_custody_event_audit_line(feed):
    by_uid = {str(ev['UID']): ev for ev in events(feed)}
    ev = by_uid['20260105-custody@custodycal.local']
    assert ev.decoded('dtstart') == date(2026, 1, 5)
    assert ev.decoded('dtend') == date(2026, 1, 6)
    assert str(ev['DESCRIPTION']) == 'Level 1: winter_break_2026_monday_extension'


def test_feed_window_bounds(feed):
    days = {ev.decoded('dtstart') for ev in events(feed) if is_all_day(ev)}
    assert min(days) >= date(2026, 1, 1)
    assert max(days) <= date(2026, 12, 31)


def test_config_overrides():
    cal = build_feed(TODAY, NOW, config={'custody_summary': 'Kids with Mom',
                                         'uid_domain': 'example.org', 'feed_months': 1})
    all_day = [ev for ev in events(cal) if is_all_day(ev)]
    assert all(str(ev['SUMMARY']) == 'Kids with Mom' for ev in all_day)
    assert all(str(ev['UID']).endswith('@example.org') for ev in events(cal))
    assert max(ev.decoded('dtstart') for ev in all_day) <= date(2026, 1, 31)


def test_feed_is_deterministic_for_fixed_stamp():
    assert generate_feed(TODAY, NOW, config={}) == generate_feed(TODAY, NOW, config={})


def test_explicit_window_and_first_refusal_note():
    cal = build_feed(TODAY, NOW, config={}, window=(date(2026, 3, 2), date(2026, 3, 8)),
                     options={'check_right_of_first_refusal': True})
    days = {ev.decoded('dtstart') for ev in events(cal)}
    days = {d.date() if isinstance(d, datetime) else d for d in days}
    assert min(days) >= date(2026, 3, 2)
    assert max(days) <= date(2026, 3, 8)
    all_day = [ev for ev in events(cal) if is_all_day(ev)]
    assert all('notify other parent' in str(ev['DESCRIPTION']) for ev in all_day)
