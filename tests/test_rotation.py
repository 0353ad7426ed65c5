from datetime import date, datetime, timedelta

import pytest

from biblia_ampm.errors import NotSeeded
from biblia_ampm.rotation import (
    REFERENCE_SUNDAY, current_item, next_rotation, week_end, week_start, weeks_elapsed,
)


def test_reference_is_a_sunday():
    assert REFERENCE_SUNDAY.weekday() == 6


def test_week_start_is_previous_sunday():
    assert week_start(date(2024, 1, 10)) == date(2024, 1, 7)
    assert week_start(date(2024, 1, 13)) == date(2024, 1, 7)
    assert week_start(date(2024, 1, 14)) == date(2024, 1, 14)


def test_week_bounds():
    assert week_end(date(2024, 1, 10)) == date(2024, 1, 13)
    assert next_rotation(date(2024, 1, 10)) == date(2024, 1, 14)


def test_ten_weeks_after_reference():
    d = REFERENCE_SUNDAY + timedelta(weeks=10)
    assert weeks_elapsed(d) == 10
    assert current_item(d, 107) == 11


def test_stable_within_week():
    for offset in range(0, 700, 5):
        now = REFERENCE_SUNDAY + timedelta(days=offset)
        assert current_item(now, 107) == current_item(week_start(now) + timedelta(days=3), 107)


def test_advances_one_per_week():
    for weeks in range(0, 250):
        this_week = current_item(REFERENCE_SUNDAY + timedelta(weeks=weeks), 107)
        following = current_item(REFERENCE_SUNDAY + timedelta(weeks=weeks + 1), 107)
        assert following == this_week % 107 + 1


def test_wraps_after_full_cycle():
    assert current_item(REFERENCE_SUNDAY + timedelta(weeks=107), 107) == 1


def test_dates_before_reference_stay_in_range():
    assert current_item(date(2024, 1, 6), 107) == 107
    for offset in range(1, 500, 3):
        assert 1 <= current_item(REFERENCE_SUNDAY - timedelta(days=offset), 107) <= 107


def test_time_of_day_ignored():
    early = datetime(2024, 3, 20, 0, 1)
    late = datetime(2024, 3, 20, 23, 59)
    assert current_item(early, 107) == current_item(late, 107) == 11


def test_empty_corpus_not_seeded():
    with pytest.raises(NotSeeded):
        current_item(date(2024, 3, 20), 0)
