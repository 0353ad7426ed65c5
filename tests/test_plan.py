import sqlite3
from datetime import date, datetime
from unittest.mock import patch

import pytest

from biblia_ampm.corpus import Corpus, Canon
from biblia_ampm.db import get_connection
from biblia_ampm.errors import NotSeeded
from biblia_ampm.plan import (
    build_plan, current_period, plan_day, resolve_today, store_plan,
)
from biblia_ampm.seed import seed_plan


def test_build_plan_has_365_unique_days():
    plan = build_plan()
    assert [a.day_of_year for a in plan] == list(range(1, 366))


def test_build_plan_first_and_last_days():
    plan = build_plan()
    first, last = plan[0], plan[-1]
    assert first.old_testament_ref == "Gênesis 1; Gênesis 2"
    assert first.new_testament_ref == ""
    assert first.psalms_ref == "Salmos 1"
    assert first.proverbs_ref == "Provérbios 1"
    assert plan[1].new_testament_ref == "Mateus 1"
    assert last.old_testament_ref == "Malaquias 2; Malaquias 3; Malaquias 4"
    assert last.new_testament_ref == "Apocalipse 22"
    assert last.psalms_ref == "Salmos 65"
    assert last.proverbs_ref == "Provérbios 24"


def test_build_plan_consumes_each_testament_once():
    plan = build_plan()
    for attr, total in (("old_testament_ref", 748), ("new_testament_ref", 260)):
        refs = [r for a in plan for r in getattr(a, attr).split("; ") if r]
        assert len(refs) == total
        assert len(set(refs)) == total


def test_build_plan_cycles_restart():
    plan = build_plan()
    assert plan[150].psalms_ref == "Salmos 1"
    assert plan[31].proverbs_ref == "Provérbios 1"


def test_build_plan_is_deterministic():
    assert build_plan() == build_plan()


def test_build_plan_with_custom_canon():
    canon = Canon(
        old_testament=Corpus.from_books("ot", [("A", 3)]),
        new_testament=Corpus.from_books("nt", [("B", 1)]),
        psalms=Corpus.cycle("P", 2),
        proverbs=Corpus.cycle("Q", 1),
    )
    plan = build_plan(3, canon)
    assert [a.old_testament_ref for a in plan] == ["A 1", "A 2", "A 3"]
    assert [a.new_testament_ref for a in plan] == ["", "", "B 1"]
    assert [a.psalms_ref for a in plan] == ["P 1", "P 2", "P 1"]
    assert [a.proverbs_ref for a in plan] == ["Q 1", "Q 1", "Q 1"]


def test_store_plan_upserts(store):
    assert store_plan(store, build_plan()) == 365
    assert store_plan(store, build_plan()) == 365
    assert store.count_assignments() == 365
    assert store.get_assignment(1).psalms_ref == "Salmos 1"


def test_store_plan_continues_after_failed_day(store):
    original = store.upsert_assignment

    def flaky(assignment):
        if assignment.day_of_year == 10:
            raise sqlite3.OperationalError("disk I/O error")
        original(assignment)

    with patch.object(store, "upsert_assignment", side_effect=flaky):
        assert store_plan(store, build_plan()) == 364
    assert store.get_assignment(10) is None
    assert store.get_assignment(11) is not None


@pytest.mark.parametrize("hour,period", [
    (5, "all"), (6, "morning"), (11, "morning"), (12, "all"),
    (18, "evening"), (22, "evening"), (23, "all"),
])
def test_current_period(hour, period):
    assert current_period(datetime(2024, 5, 1, hour)) == period


def test_plan_day():
    assert plan_day(date(2024, 1, 1)) == 1
    assert plan_day(date(2023, 12, 31)) == 365
    assert plan_day(date(2024, 12, 31)) == 1  # leap year day 366


def test_resolve_today_requires_seed(store):
    with pytest.raises(NotSeeded):
        resolve_today(store, datetime(2024, 2, 1, 7))


def test_resolve_today(store):
    seed_plan(store)
    today = resolve_today(store, datetime(2024, 2, 1, 19))
    assert today.day_of_year == 32
    assert today.period == "evening"
    assert today.assignment.proverbs_ref == "Provérbios 1"
    assert today.progress is None


def test_resolve_today_missing_day_is_absent(store):
    seed_plan(store)
    conn = get_connection(store.db_path)
    conn.execute("DELETE FROM reading_plans WHERE day_of_year = 32")
    conn.commit()
    conn.close()
    today = resolve_today(store, datetime(2024, 2, 1, 8))
    assert today.assignment is None
