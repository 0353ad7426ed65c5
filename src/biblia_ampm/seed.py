"""Seed the database with the reading plan and the catechism."""
import logging
import sqlite3

from biblia_ampm.corpus import Canon
from biblia_ampm.importer import CATECHISM_SIZE, load_catechism
from biblia_ampm.plan import PLAN_DAYS, build_plan, store_plan

logger = logging.getLogger(__name__)

DEFAULT_CATECHISM_URL = (
    "https://raw.githubusercontent.com/ReformedWiki/westminster-shorter-catechism/master/data/catechism.json"
)


def is_seeded(store) -> bool:
    """Check whether both the reading plan and the catechism have rows."""
    return store.count_assignments() > 0 and store.get_weekly_item_count() > 0


def seed_plan(store, clear: bool = False, canon: Canon | None = None) -> int:
    """Build the 365-day plan and upsert it. Returns the number of days stored."""
    assignments = build_plan(PLAN_DAYS, canon)
    if clear:
        logger.info("Clearing existing reading plans...")
        store.clear_assignments()
    stored = store_plan(store, assignments)
    if stored < PLAN_DAYS:
        logger.warning("Only %d of %d plan days were stored", stored, PLAN_DAYS)
    return stored


def seed_catechism(store, source: str = DEFAULT_CATECHISM_URL, clear: bool = False,
                   limit: int = CATECHISM_SIZE) -> int:
    """Load questions from a file or URL and upsert them. Returns the number stored."""
    items = load_catechism(source, limit)
    if clear:
        logger.info("Clearing existing catechism questions...")
        store.clear_weekly_items()
    stored = 0
    for item in items:
        try:
            store.upsert_weekly_item(item)
        except sqlite3.Error as e:
            logger.warning("Failed to save question %d: %s", item.number, e)
            continue
        stored += 1
    return stored
