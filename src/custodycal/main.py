# src/custodycal/main.py

import logging
from datetime import date

from .calendar_logic import generate_schedule, month_range
from .config import load_config
from .engine import ROFR_OPTION, evaluate_custody
from .export_utils import format_day, format_level_counts, format_weekday_counts
from .statistics import summarize_custody, count_by_weekday, count_by_level


def input_date(prompt: str) -> date:
    text = input(prompt).strip()
    return date.today() if not text else date.fromisoformat(text)


def show_day(debug: bool, rofr: bool):
    d = input_date("  Date (YYYY-MM-DD) [empty=today]: ")
    result = evaluate_custody(d, {ROFR_OPTION: rofr})
    print(format_day(d, result, debug))


def show_month(debug: bool):
    year = int(input("  Year: "))
    month = int(input("  Month (1-12): "))
    start, end = month_range(year, month)
    schedule = generate_schedule(start, end)
    for d, result in schedule:
        print(format_day(d, result, debug))
    stats = summarize_custody(schedule)
    print(f"\nMother {stats['mother']} days ({stats['mother_pct']}%), "
          f"Father {stats['father']} days ({stats['father_pct']}%), "
          f"{stats['exchanges']} exchanges")
    print(f"By weekday: {format_weekday_counts(count_by_weekday(schedule))}")
    if debug:
        print(f"Decided by: {format_level_counts(count_by_level(schedule))}")


def run_wizard():
    cfg = load_config()
    logging.basicConfig(level=cfg.get('log_level', 'INFO'))
    print("Custody schedule")
    debug = input("Show matched level/rule? (y/n) ").lower() == "y"
    rofr = input("Include right-of-first-refusal reminder? (y/n) ").lower() == "y"

    while True:
        mode = input("\n[1] Single day, [2] Whole month, [q] Quit: ").strip().lower()
        try:
            if mode == "1":
                show_day(debug, rofr)
            elif mode == "2":
                show_month(debug)
            elif mode == "q":
                break
        except ValueError as e:
            logging.error(f"Invalid input: {e}")
            print(f"Invalid input: {e}")


if __name__ == "__main__":
    run_wizard()
