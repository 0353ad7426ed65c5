"""Weekly rotation through a cyclic corpus, derived from the calendar alone."""
from datetime import date, datetime, timedelta

from biblia_ampm.errors import NotSeeded

# First Sunday of 2024; weeks are counted from here.
REFERENCE_SUNDAY = date(2024, 1, 7)


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def week_start(value) -> date:
    """Sunday on or before the given date."""
    d = _as_date(value)
    # date.weekday() is 0 for Monday, 6 for Sunday
    return d - timedelta(days=(d.weekday() + 1) % 7)


def week_end(value) -> date:
    return week_start(value) + timedelta(days=6)


def next_rotation(value) -> date:
    return week_start(value) + timedelta(days=7)


def weeks_elapsed(value) -> int:
    """Whole weeks between the reference Sunday and this date's week start."""
    return (week_start(value) - REFERENCE_SUNDAY).days // 7


def current_item(now, total_items: int) -> int:
    """Number (1..total_items) of the item active during the week containing ``now``."""
    if total_items < 1:
        raise NotSeeded("The catechism is empty. Seed it before use.")
    # floor modulo keeps weeks before the reference in range
    return weeks_elapsed(now) % total_items + 1
