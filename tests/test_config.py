from datetime import date

import pytest

from biblia_ampm.config import (
    DEFAULT_TIMEZONE, get_db_path, get_log_level, get_timezone_name, local_now, parse_date,
    set_timezone,
)
from biblia_ampm.db import DEFAULT_DB_PATH
from biblia_ampm.errors import InvalidDate, InvalidTimezone


def test_db_path_default(monkeypatch):
    monkeypatch.delenv("BIBLIA_DB", raising=False)
    assert get_db_path() == DEFAULT_DB_PATH


def test_db_path_from_env(monkeypatch, tmp_db):
    monkeypatch.setenv("BIBLIA_DB", tmp_db)
    assert get_db_path() == tmp_db


def test_log_level(monkeypatch):
    monkeypatch.delenv("BIBLIA_LOG_LEVEL", raising=False)
    assert get_log_level() == "WARNING"
    monkeypatch.setenv("BIBLIA_LOG_LEVEL", "debug")
    assert get_log_level() == "DEBUG"


def test_timezone_precedence(monkeypatch, store):
    monkeypatch.delenv("TZ", raising=False)
    assert get_timezone_name() == DEFAULT_TIMEZONE
    assert get_timezone_name(store) == DEFAULT_TIMEZONE
    store.set_setting("timezone", "Europe/Lisbon")
    assert get_timezone_name(store) == "Europe/Lisbon"
    monkeypatch.setenv("TZ", "UTC")
    assert get_timezone_name(store) == "UTC"


def test_local_now_is_aware():
    now = local_now("America/Sao_Paulo")
    assert now.tzinfo is not None
    assert str(now.tzinfo) == "America/Sao_Paulo"


def test_local_now_unknown_zone_falls_back_to_utc():
    now = local_now("Nowhere/Atlantis")
    assert str(now.tzinfo) == "UTC"


def test_parse_date():
    assert parse_date("2024-03-17") == date(2024, 3, 17)
    assert parse_date(" 2024-03-17 ") == date(2024, 3, 17)


@pytest.mark.parametrize("value", ["17/03/2024", "2024-13-01", "", "yesterday", None])
def test_parse_date_invalid(value):
    with pytest.raises(InvalidDate):
        parse_date(value)


def test_set_timezone_stores_setting(monkeypatch, store):
    monkeypatch.delenv("TZ", raising=False)
    assert set_timezone(store, " Europe/Lisbon ") == "Europe/Lisbon"
    assert store.get_setting("timezone") == "Europe/Lisbon"


def test_set_timezone_rejects_unknown_zone(store):
    with pytest.raises(InvalidTimezone):
        set_timezone(store, "Nowhere/Atlantis")
    assert store.get_setting("timezone") is None
