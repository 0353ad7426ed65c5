"""SQLite-backed storage for the plan, catechism, users and progress."""
import sqlite3
from datetime import date, datetime
from typing import Optional

from biblia_ampm.db import get_connection
from biblia_ampm.models import Assignment, DailyProgress, User, WeeklyItem, WeeklyProgress


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _daily_from_row(row: sqlite3.Row) -> DailyProgress:
    return DailyProgress(
        user_id=row["user_id"],
        date=date.fromisoformat(row["date"]),
        day_of_year=row["day_of_year"],
        morning_completed=bool(row["morning_completed"]),
        evening_completed=bool(row["evening_completed"]),
        completed_at=_parse_timestamp(row["completed_at"]),
    )


def _weekly_from_row(row: sqlite3.Row) -> WeeklyProgress:
    return WeeklyProgress(
        user_id=row["user_id"],
        item_number=row["question_number"],
        date=date.fromisoformat(row["date"]),
        completed=bool(row["completed"]),
        completed_at=_parse_timestamp(row["completed_at"]),
    )


def _assignment_from_row(row: sqlite3.Row) -> Assignment:
    return Assignment(
        day_of_year=row["day_of_year"],
        old_testament_ref=row["old_testament_ref"],
        new_testament_ref=row["new_testament_ref"],
        psalms_ref=row["psalms_ref"],
        proverbs_ref=row["proverbs_ref"],
    )


class SQLiteStore:
    """Persistence for every table in db.SCHEMA.

    Each method opens and closes its own connection. Progress upserts merge
    with the stored row inside the INSERT ... ON CONFLICT statement, so a
    flag that is already set is never cleared by a concurrent writer.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        return get_connection(self.db_path)

    # --- reading plan ---

    def get_assignment(self, day_of_year: int) -> Optional[Assignment]:
        conn = self._connect()
        row = conn.execute(
            "SELECT * FROM reading_plans WHERE day_of_year = ?", (day_of_year,)
        ).fetchone()
        conn.close()
        return _assignment_from_row(row) if row else None

    def list_assignments(self) -> list[Assignment]:
        conn = self._connect()
        rows = conn.execute("SELECT * FROM reading_plans ORDER BY day_of_year").fetchall()
        conn.close()
        return [_assignment_from_row(r) for r in rows]

    def upsert_assignment(self, assignment: Assignment) -> None:
        conn = self._connect()
        conn.execute(
            """INSERT INTO reading_plans
            (day_of_year, old_testament_ref, new_testament_ref, psalms_ref, proverbs_ref)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(day_of_year) DO UPDATE SET
                old_testament_ref = excluded.old_testament_ref,
                new_testament_ref = excluded.new_testament_ref,
                psalms_ref = excluded.psalms_ref,
                proverbs_ref = excluded.proverbs_ref""",
            (
                assignment.day_of_year,
                assignment.old_testament_ref,
                assignment.new_testament_ref,
                assignment.psalms_ref,
                assignment.proverbs_ref,
            ),
        )
        conn.commit()
        conn.close()

    def count_assignments(self) -> int:
        conn = self._connect()
        count = conn.execute("SELECT COUNT(*) FROM reading_plans").fetchone()[0]
        conn.close()
        return count

    def clear_assignments(self) -> None:
        conn = self._connect()
        conn.execute("DELETE FROM reading_plans")
        conn.commit()
        conn.close()

    # --- catechism ---

    def get_weekly_item_count(self) -> int:
        conn = self._connect()
        count = conn.execute("SELECT COUNT(*) FROM catechism_questions").fetchone()[0]
        conn.close()
        return count

    def get_weekly_item(self, number: int) -> Optional[WeeklyItem]:
        conn = self._connect()
        row = conn.execute(
            "SELECT * FROM catechism_questions WHERE question_number = ?", (number,)
        ).fetchone()
        conn.close()
        if not row:
            return None
        return WeeklyItem(row["question_number"], row["question_text"], row["answer_text"])

    def upsert_weekly_item(self, item: WeeklyItem) -> None:
        conn = self._connect()
        conn.execute(
            """INSERT INTO catechism_questions (question_number, question_text, answer_text)
            VALUES (?, ?, ?)
            ON CONFLICT(question_number) DO UPDATE SET
                question_text = excluded.question_text,
                answer_text = excluded.answer_text""",
            (item.number, item.question, item.answer),
        )
        conn.commit()
        conn.close()

    def clear_weekly_items(self) -> None:
        conn = self._connect()
        conn.execute("DELETE FROM catechism_questions")
        conn.commit()
        conn.close()

    # --- daily progress ---

    def get_daily_progress(self, user_id: int, on: date) -> Optional[DailyProgress]:
        conn = self._connect()
        row = conn.execute(
            "SELECT * FROM user_progress WHERE user_id = ? AND date = ?",
            (user_id, on.isoformat()),
        ).fetchone()
        conn.close()
        return _daily_from_row(row) if row else None

    def upsert_daily_progress(self, record: DailyProgress, now: datetime) -> DailyProgress:
        """Insert or merge a daily record; returns the stored result."""
        completed_at = record.completed_at
        if completed_at is None and record.is_complete:
            completed_at = now
        conn = self._connect()
        conn.execute(
            """INSERT INTO user_progress
            (user_id, date, day_of_year, morning_completed, evening_completed, completed_at)
            VALUES (:user_id, :date, :day, :morning, :evening, :completed_at)
            ON CONFLICT(user_id, date) DO UPDATE SET
                morning_completed = MAX(user_progress.morning_completed, excluded.morning_completed),
                evening_completed = MAX(user_progress.evening_completed, excluded.evening_completed),
                completed_at = CASE
                    WHEN MAX(user_progress.morning_completed, excluded.morning_completed) = 1
                     AND MAX(user_progress.evening_completed, excluded.evening_completed) = 1
                    THEN COALESCE(user_progress.completed_at, excluded.completed_at, :now)
                    ELSE NULL
                END""",
            {
                "user_id": record.user_id,
                "date": record.date.isoformat(),
                "day": record.day_of_year,
                "morning": int(record.morning_completed),
                "evening": int(record.evening_completed),
                "completed_at": completed_at.isoformat() if completed_at else None,
                "now": now.isoformat(),
            },
        )
        conn.commit()
        row = conn.execute(
            "SELECT * FROM user_progress WHERE user_id = ? AND date = ?",
            (record.user_id, record.date.isoformat()),
        ).fetchone()
        conn.close()
        return _daily_from_row(row)

    def list_daily_progress(self, user_id: int) -> list[DailyProgress]:
        conn = self._connect()
        rows = conn.execute(
            "SELECT * FROM user_progress WHERE user_id = ? ORDER BY date DESC", (user_id,)
        ).fetchall()
        conn.close()
        return [_daily_from_row(r) for r in rows]

    # --- weekly progress ---

    def get_weekly_progress(
        self, user_id: int, item_number: int, start: date, end: date
    ) -> list[WeeklyProgress]:
        conn = self._connect()
        rows = conn.execute(
            """SELECT * FROM catechism_progress
            WHERE user_id = ? AND question_number = ? AND date >= ? AND date <= ?
            ORDER BY date""",
            (user_id, item_number, start.isoformat(), end.isoformat()),
        ).fetchall()
        conn.close()
        return [_weekly_from_row(r) for r in rows]

    def upsert_weekly_progress(self, record: WeeklyProgress, now: datetime) -> WeeklyProgress:
        completed_at = record.completed_at
        if completed_at is None and record.completed:
            completed_at = now
        conn = self._connect()
        conn.execute(
            """INSERT INTO catechism_progress (user_id, question_number, date, completed, completed_at)
            VALUES (:user_id, :number, :date, :completed, :completed_at)
            ON CONFLICT(user_id, question_number, date) DO UPDATE SET
                completed = MAX(catechism_progress.completed, excluded.completed),
                completed_at = CASE
                    WHEN MAX(catechism_progress.completed, excluded.completed) = 1
                    THEN COALESCE(catechism_progress.completed_at, excluded.completed_at, :now)
                    ELSE NULL
                END""",
            {
                "user_id": record.user_id,
                "number": record.item_number,
                "date": record.date.isoformat(),
                "completed": int(record.completed),
                "completed_at": completed_at.isoformat() if completed_at else None,
                "now": now.isoformat(),
            },
        )
        conn.commit()
        row = conn.execute(
            """SELECT * FROM catechism_progress
            WHERE user_id = ? AND question_number = ? AND date = ?""",
            (record.user_id, record.item_number, record.date.isoformat()),
        ).fetchone()
        conn.close()
        return _weekly_from_row(row)

    def list_weekly_progress(self, user_id: int) -> list[WeeklyProgress]:
        conn = self._connect()
        rows = conn.execute(
            "SELECT * FROM catechism_progress WHERE user_id = ? ORDER BY date DESC", (user_id,)
        ).fetchall()
        conn.close()
        return [_weekly_from_row(r) for r in rows]

    # --- users and settings ---

    def get_or_create_user(self, name: str) -> User:
        conn = self._connect()
        conn.execute("INSERT OR IGNORE INTO users (name) VALUES (?)", (name,))
        conn.commit()
        row = conn.execute("SELECT id, name FROM users WHERE name = ?", (name,)).fetchone()
        conn.close()
        return User(row["id"], row["name"])

    def get_setting(self, key: str, default: str = None) -> str | None:
        conn = self._connect()
        row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
        conn.close()
        return row["value"] if row else default

    def set_setting(self, key: str, value: str) -> None:
        conn = self._connect()
        conn.execute(
            "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
            (key, value, value),
        )
        conn.commit()
        conn.close()
