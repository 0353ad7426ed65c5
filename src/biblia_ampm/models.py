"""Data classes for the reading plan and progress domain model."""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass
class Assignment:
    day_of_year: int
    old_testament_ref: str = ""
    new_testament_ref: str = ""
    psalms_ref: str = ""
    proverbs_ref: str = ""


@dataclass
class WeeklyItem:
    number: int
    question: str
    answer: str


@dataclass
class User:
    id: int
    name: str


@dataclass
class DailyProgress:
    user_id: int
    date: date
    day_of_year: int
    morning_completed: bool = False
    evening_completed: bool = False
    completed_at: Optional[datetime] = None

    @property
    def is_complete(self) -> bool:
        return self.morning_completed and self.evening_completed


@dataclass
class WeeklyProgress:
    user_id: int
    item_number: int
    date: date
    completed: bool = False
    completed_at: Optional[datetime] = None
