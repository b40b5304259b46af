from datetime import date

from custodycal.calendar_logic import generate_schedule
from custodycal.models import MOTHER, FATHER, CustodyResult, ExchangeEvent
from custodycal.statistics import summarize_custody, count_by_weekday, count_by_level

DROP = ExchangeEvent('drop', 'YOU DROP OFF', '8:20 AM', 'School')


def test_summarize_custody_manual():
    schedule = [
        (date(2026, 3, 2), CustodyResult(MOTHER, (DROP,), matched_level=4)),
        (date(2026, 3, 3), CustodyResult(FATHER, matched_level=4)),
        (date(2026, 3, 4), CustodyResult(FATHER, matched_level=4)),
        (date(2026, 3, 5), CustodyResult(MOTHER, (DROP, DROP), matched_level=4)),
    ]
    stats = summarize_custody(schedule)
    assert stats['total'] == 4
    assert stats['mother'] == 2
    assert stats['father'] == 2
    assert stats['exchanges'] == 3
    assert stats['mother_pct'] == 50.0
    assert stats['father_pct'] == 50.0


def test_summarize_empty():
    stats = summarize_custody([])
    assert stats['total'] == 0
    assert stats['mother_pct'] == 0.0
    assert stats['father_pct'] == 0.0


def test_summarize_real_month():
    stats = summarize_custody(generate_schedule(date(2025, 12, 1), date(2025, 12, 31)))
    assert stats['total'] == 31
    assert stats['mother'] + stats['father'] == 31
    assert stats['exchanges'] > 0


def test_count_by_weekday():
    schedule = generate_schedule(date(2026, 3, 2), date(2026, 3, 8))
    counts = count_by_weekday(schedule)
    assert counts[2] == {MOTHER: 0, FATHER: 1}   # Wednesday
    assert counts[3] == {MOTHER: 1, FATHER: 0}   # Thursday
    assert sum(c[MOTHER] + c[FATHER] for c in counts.values()) == 7


def test_count_by_level():
    schedule = generate_schedule(date(2025, 12, 15), date(2025, 12, 21))
    levels = count_by_level(schedule)
    # Dec 18-21 are fixed winter break days
    assert levels == {1: 4, 4: 3}
