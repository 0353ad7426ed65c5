"""Per-user completion tracking for daily readings and weekly catechism questions."""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from biblia_ampm.errors import InvalidPeriod, NotFound, NotSeeded
from biblia_ampm.models import DailyProgress, WeeklyItem, WeeklyProgress
from biblia_ampm.plan import plan_day
from biblia_ampm.rotation import current_item, next_rotation, week_end, week_start

logger = logging.getLogger(__name__)

PERIODS = {"morning": "morning_completed", "evening": "evening_completed"}

NONE, PARTIAL, COMPLETE = "none", "partial", "complete"


@dataclass
class WeeklyRotation:
    item_number: int
    total_items: int
    item: Optional[WeeklyItem]
    week_start: date
    week_end: date
    next_rotation: date
    week_progress: list[WeeklyProgress] = field(default_factory=list)


def daily_state(record: Optional[DailyProgress]) -> str:
    if record is None or not (record.morning_completed or record.evening_completed):
        return NONE
    return COMPLETE if record.is_complete else PARTIAL


def weekly_state(record: Optional[WeeklyProgress]) -> str:
    if record is None or not record.completed:
        return NONE
    return COMPLETE


def mark_daily(store, user_id: int, target: date, period: str, now: datetime) -> DailyProgress:
    """Set the morning or evening flag for ``target``, keeping the other flag as stored."""
    if period not in PERIODS:
        raise InvalidPeriod(f"Period must be 'morning' or 'evening', got {period!r}")
    day = plan_day(target)
    if store.get_assignment(day) is None:
        if store.count_assignments() == 0:
            raise NotSeeded("The reading plan is empty. Run 'seed' first.")
        raise NotFound(f"Reading plan not found for day {day}.")
    existing = store.get_daily_progress(user_id, target)
    if existing and getattr(existing, PERIODS[period]):
        return existing
    record = existing or DailyProgress(user_id=user_id, date=target, day_of_year=day)
    setattr(record, PERIODS[period], True)
    if record.is_complete and record.completed_at is None:
        record.completed_at = now
    saved = store.upsert_daily_progress(record, now)
    logger.info("User %d marked %s reading for %s (%s)", user_id, period, target, daily_state(saved))
    return saved


def _catechism_size(store) -> int:
    total = store.get_weekly_item_count()
    if total == 0:
        raise NotSeeded("The catechism is empty. Run 'seed' first.")
    return total


def resolve_current_weekly_item(store, user_id: int | None, now) -> WeeklyRotation:
    total = _catechism_size(store)
    number = current_item(now, total)
    start = week_start(now)
    end = week_end(now)
    week_progress = []
    if user_id is not None:
        week_progress = store.get_weekly_progress(user_id, number, start, end)
    return WeeklyRotation(
        item_number=number,
        total_items=total,
        item=store.get_weekly_item(number),
        week_start=start,
        week_end=end,
        next_rotation=next_rotation(now),
        week_progress=week_progress,
    )


def mark_weekly(store, user_id: int, target: date, now: datetime) -> WeeklyProgress:
    """Record that the question active during ``target``'s week was studied on ``target``."""
    number = current_item(target, _catechism_size(store))
    if store.get_weekly_item(number) is None:
        raise NotFound(f"Catechism question {number} is missing. Re-run 'seed'.")
    record = WeeklyProgress(
        user_id=user_id, item_number=number, date=target, completed=True, completed_at=now,
    )
    saved = store.upsert_weekly_progress(record, now)
    logger.info("User %d marked catechism question %d on %s", user_id, number, target)
    return saved


def progress_summary(store, user_id: int) -> dict:
    """Fully completed days against all tracked days."""
    records = store.list_daily_progress(user_id)
    total = len(records)
    completed = sum(1 for r in records if r.is_complete)
    percent = round(completed / total * 100) if total else 0
    return {"completed": completed, "total": total, "percent": percent}


def user_history(store, user_id: int) -> dict:
    return {
        "daily": store.list_daily_progress(user_id),
        "weekly": store.list_weekly_progress(user_id),
    }
