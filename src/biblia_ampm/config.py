"""Runtime configuration: database location, time zone and the wall clock."""
import logging
import os
from datetime import date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from biblia_ampm.db import DEFAULT_DB_PATH
from biblia_ampm.errors import InvalidDate, InvalidTimezone

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "America/Sao_Paulo"
TIMEZONE_SETTING = "timezone"


def get_db_path() -> str:
    return os.environ.get("BIBLIA_DB") or DEFAULT_DB_PATH


def get_log_level() -> str:
    return os.environ.get("BIBLIA_LOG_LEVEL", "WARNING").upper()


def get_timezone_name(store=None) -> str:
    """TZ environment variable, then the stored setting, then the default."""
    tz = os.environ.get("TZ")
    if not tz and store is not None:
        tz = store.get_setting(TIMEZONE_SETTING)
    return tz or DEFAULT_TIMEZONE


def get_zone(tz_name: str):
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown time zone %r, falling back to UTC", tz_name)
        return ZoneInfo("UTC")


def local_now(tz_name: str) -> datetime:
    return datetime.now(get_zone(tz_name))


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD string."""
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (AttributeError, ValueError) as e:
        raise InvalidDate(f"Invalid date {value!r}. Use YYYY-MM-DD.") from e


def set_timezone(store, tz_name: str) -> str:
    """Validate and store the time zone used when TZ is not set."""
    tz_name = tz_name.strip()
    try:
        ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidTimezone(f"Unknown time zone {tz_name!r}") from e
    store.set_setting(TIMEZONE_SETTING, tz_name)
    return get_timezone_name(store)
