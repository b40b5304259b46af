# src/custodycal/models.py
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Optional, Tuple

MOTHER = 'mother'
FATHER = 'father'

ODD = 'odd'     # Mother's weekend
EVEN = 'even'   # Father's weekend

DROP = 'drop'         # current parent drops the children off
PICK = 'pick'         # next parent picks them up
RECEIVE = 'receive'   # other parent brings them over


@dataclass(frozen=True)
class ExchangeEvent:
    """A single hand-over: who moves the children, when and where."""
    kind: str
    title: str
    time: str
    location: str

    def to_dict(self) -> dict:
        return {
            'type': self.kind,
            'title': self.title,
            'time': self.time,
            'location': self.location,
        }


@dataclass(frozen=True)
class CustodyResult:
    """Outcome of evaluating one calendar day."""
    parent: Optional[str]
    events: Tuple[ExchangeEvent, ...] = ()
    note: str = ''
    matched_level: Optional[int] = None   # 0-4, None only for the evaluator fallback
    matched_rule: Optional[str] = None
    flags: Dict[str, dict] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            'parent': self.parent,
            'events': [e.to_dict() for e in self.events],
            'note': self.note,
            'matchedLevel': self.matched_level,
            'matchedRule': self.matched_rule,
            'flags': dict(self.flags),
        }


@dataclass(frozen=True)
class EventTemplate:
    """Event of a break schedule; time=None means the day's pickup time."""
    kind: str
    title: str
    location: str
    time: Optional[str] = None


@dataclass(frozen=True)
class ScheduledDay:
    """One row of a hand-authored break schedule (start..end inclusive)."""
    start: date
    end: date
    parent: str
    note: str
    rule: str
    events: Tuple[EventTemplate, ...] = ()

    def covers(self, d: date) -> bool:
        return self.start <= d <= self.end
