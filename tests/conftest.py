import json
import pytest

from biblia_ampm.db import init_db
from biblia_ampm.repository import SQLiteStore


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_biblia.db")
    return db_path


@pytest.fixture
def store(tmp_db):
    init_db(tmp_db)
    return SQLiteStore(tmp_db)


@pytest.fixture
def catechism_file(tmp_path):
    """Write a small catechism JSON file and return its path."""
    def _write(numbers=(1, 2, 3), name="catechism.json"):
        data = [
            {"number": n, "q": f"  Question {n}?  ", "a": f"Answer {n}."}
            for n in numbers
        ]
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)
    return _write
