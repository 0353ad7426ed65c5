"""Build the 365-day reading plan and resolve today's readings."""
import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from biblia_ampm.corpus import Canon, default_canon
from biblia_ampm.errors import NotSeeded
from biblia_ampm.models import Assignment, DailyProgress
from biblia_ampm.sequencer import cyclic_reference, cyclic_item, sequence

logger = logging.getLogger(__name__)

PLAN_DAYS = 365


@dataclass
class TodayReading:
    day_of_year: int
    period: str
    assignment: Optional[Assignment]
    progress: Optional[DailyProgress] = None


def build_plan(total_slots: int = PLAN_DAYS, canon: Canon | None = None) -> list[Assignment]:
    """One Assignment per day; each stream is sequenced independently."""
    canon = canon or default_canon()
    old = sequence(canon.old_testament, total_slots)
    new = sequence(canon.new_testament, total_slots)
    psalms_name, psalms_len = canon.psalms.books[0].name, canon.psalms.total_items
    proverbs_name, proverbs_len = canon.proverbs.books[0].name, canon.proverbs.total_items
    return [
        Assignment(
            day_of_year=day,
            old_testament_ref=old[day],
            new_testament_ref=new[day],
            psalms_ref=cyclic_reference(psalms_name, psalms_len, day),
            proverbs_ref=cyclic_reference(proverbs_name, proverbs_len, day),
        )
        for day in range(1, total_slots + 1)
    ]


def store_plan(store, assignments: list[Assignment]) -> int:
    """Upsert every assignment, skipping days whose write fails. Returns the number stored."""
    stored = 0
    for assignment in assignments:
        try:
            store.upsert_assignment(assignment)
        except sqlite3.Error as e:
            logger.warning("Failed to store plan for day %d: %s", assignment.day_of_year, e)
            continue
        stored += 1
        if stored % 50 == 0:
            logger.info("Stored %d days...", stored)
    return stored


def current_period(now: datetime) -> str:
    if 6 <= now.hour < 12:
        return "morning"
    if 18 <= now.hour < 23:
        return "evening"
    return "all"


def plan_day(now, total_slots: int = PLAN_DAYS) -> int:
    """Day of the plan for a date; day 366 of a leap year starts the plan over."""
    return cyclic_item(total_slots, now.timetuple().tm_yday)


def resolve_today(store, now: datetime, user_id: int | None = None) -> TodayReading:
    if store.count_assignments() == 0:
        raise NotSeeded("The reading plan is empty. Run 'seed' first.")
    day = plan_day(now)
    progress = store.get_daily_progress(user_id, now.date()) if user_id is not None else None
    return TodayReading(
        day_of_year=day,
        period=current_period(now),
        assignment=store.get_assignment(day),
        progress=progress,
    )
