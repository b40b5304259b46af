from collections import Counter
from datetime import date
from typing import Dict, List, Tuple

from custodycal.calendar_logic import days_with
from custodycal.models import MOTHER, FATHER, CustodyResult

Schedule = List[Tuple[date, CustodyResult]]


def summarize_custody(schedule: Schedule) -> Dict[str, float]:
    """
    Overall parenting-time summary for an evaluated range:
      total       : number of days
      mother      : days with Mother
      father      : days with Father
      exchanges   : number of hand-overs (events)
      mother_pct  : Mother's share in percent
      father_pct  : Father's share in percent
    """
    total = len(schedule)
    mother = len(days_with(schedule, MOTHER))
    father = len(days_with(schedule, FATHER))
    exchanges = sum(len(r.events) for _, r in schedule)
    return {
        'total': total,
        'mother': mother,
        'father': father,
        'exchanges': exchanges,
        'mother_pct': round(mother / total * 100, 1) if total else 0.0,
        'father_pct': round(father / total * 100, 1) if total else 0.0,
    }


def count_by_weekday(schedule: Schedule) -> Dict[int, Dict[str, int]]:
    """0=Monday ... 6=Sunday -> {'mother': n, 'father': m}"""
    counts = {wd: {MOTHER: 0, FATHER: 0} for wd in range(7)}
    for d, result in schedule:
        if result.parent in (MOTHER, FATHER):
            counts[d.weekday()][result.parent] += 1
    return counts


def count_by_level(schedule: Schedule) -> Dict[int, int]:
    """How many days each precedence level decided."""
    levels = Counter(r.matched_level for _, r in schedule)
    return dict(sorted(levels.items(), key=lambda kv: (kv[0] is None, kv[0] or 0)))
