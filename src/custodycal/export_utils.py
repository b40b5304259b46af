import csv
import os
import tempfile
from datetime import date
from typing import Dict, List, Optional, Tuple

from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from custodycal.calendar_logic import exchange_days
from custodycal.charts import create_share_chart
from custodycal.models import MOTHER, FATHER, CustodyResult
from custodycal.statistics import summarize_custody, count_by_weekday, count_by_level

Schedule = List[Tuple[date, CustodyResult]]

WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
PARENT_LABELS = {MOTHER: 'Mother', FATHER: 'Father', None: '-'}


def format_events(result: CustodyResult) -> List[str]:
    return [f"{e.title} at {e.time} ({e.location})" for e in result.events]


def format_day(d: date, result: CustodyResult, debug: bool = False) -> str:
    """
    Short human-readable description of a day, e.g. for the detail pane:
      2026-01-06 (Tue): Mother - Return from Winter Break
        YOU DROP OFF at 8:20 AM (School)
    With debug=True a line with the deciding level/rule is appended.
    """
    lines = [f"{d.isoformat()} ({WEEKDAYS[d.weekday()]}): "
             f"{PARENT_LABELS.get(result.parent, result.parent)} - {result.note}"]
    lines += [f"  {ev}" for ev in format_events(result)]
    flag = result.flags.get('right_of_first_refusal')
    if flag:
        lines.append(f"  Note: {flag['message']}")
    if debug:
        lines.append(f"  [Level {result.matched_level}: {result.matched_rule}]")
    return "\n".join(lines)


def format_weekday_counts(counts: Dict[int, Dict[str, int]]) -> str:
    return ", ".join(
        f"{WEEKDAYS[wd]} M{c[MOTHER]}/F{c[FATHER]}" for wd, c in sorted(counts.items())
    )


def format_level_counts(levels: Dict[Optional[int], int]) -> str:
    return ", ".join(
        ("fallback" if level is None else f"Level {level}") + f": {n}"
        for level, n in levels.items()
    )


def export_csv(schedule: Schedule, filename: str):
    with open(filename, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(['date', 'weekday', 'parent', 'note', 'events', 'level', 'rule'])
        for d, result in schedule:
            writer.writerow([
                d.isoformat(),
                WEEKDAYS[d.weekday()],
                result.parent or '',
                result.note,
                '; '.join(format_events(result)),
                '' if result.matched_level is None else result.matched_level,
                result.matched_rule or '',
            ])
    return filename


def export_pdf(schedule: Schedule, filename: str, debug: bool = False):
    """Report: summary, every exchange day, and the share chart.
    With debug=True the summary also counts the deciding level."""
    stats = summarize_custody(schedule)
    c = canvas.Canvas(filename, pagesize=letter)
    w, h = letter
    y = h - 50
    c.setFont('Helvetica-Bold', 14)
    c.drawString(50, y, 'Custody Schedule Report')
    y -= 30
    c.setFont('Helvetica', 10)
    if schedule:
        c.drawString(50, y, f"Period: {schedule[0][0].isoformat()} to {schedule[-1][0].isoformat()}")
        y -= 20
    c.drawString(50, y, f"Days: {stats['total']}")
    y -= 15
    c.drawString(50, y, f"Mother: {stats['mother']} ({stats['mother_pct']}%)")
    y -= 15
    c.drawString(50, y, f"Father: {stats['father']} ({stats['father_pct']}%)")
    y -= 15
    c.drawString(50, y, f"Exchanges: {stats['exchanges']}")
    y -= 15
    c.drawString(50, y, f"By weekday: {format_weekday_counts(count_by_weekday(schedule))}")
    y -= 15
    if debug:
        c.drawString(50, y, f"Decided by: {format_level_counts(count_by_level(schedule))}")
        y -= 15
    y -= 10
    for d, result in exchange_days(schedule):
        for line in format_day(d, result, debug).splitlines():
            if y < 100:
                c.showPage()
                c.setFont('Helvetica', 10)
                y = h - 50
            c.drawString(60, y, line)
            y -= 15
    c.showPage()

    fd, png = tempfile.mkstemp(suffix='.png')
    os.close(fd)
    try:
        create_share_chart(stats, png, subtitle='Parenting time')
        size = 250
        c.setFont('Helvetica-Bold', 12)
        c.drawCentredString(w / 2, h - 50, 'Share of days')
        c.drawImage(png, w / 2 - size / 2, h - 80 - size, width=size, height=size)
        c.save()
    finally:
        os.remove(png)
    return filename
