"""Monthly calendar: earned-by-date map and per-day completion rings."""

import calendar as _calendar
import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable

from versescribe.core.config import get_settings
from versescribe.core.dates import parse_year_month, year_month_of
from versescribe.models.records import DailyCredits


class RingColor(str, Enum):
    NONE = "none"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True)
class CalendarDay:
    date: date
    earned: int
    percentage: int
    ring: RingColor


def month_bounds(year_month: str) -> tuple[date, date]:
    """Half-open [first day, first day of next month)."""
    year, month = parse_year_month(year_month)
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start, end


def earned_by_date(rows: Iterable[DailyCredits]) -> dict[str, int]:
    """Only days with a row appear; absent days count as 0."""
    return {r.date.isoformat(): r.earned for r in rows}


def completion_percentage(earned: int, daily_limit: int | None = None) -> int:
    limit = daily_limit if daily_limit is not None else get_settings().daily_limit
    pct = math.floor(earned / limit * 100 + 0.5)
    return max(0, min(100, pct))


def ring_color(percentage: int) -> RingColor:
    if percentage <= 0:
        return RingColor.NONE
    if percentage >= 100:
        return RingColor.COMPLETED
    return RingColor.IN_PROGRESS


def build_month(rows: Iterable[DailyCredits], year_month: str, daily_limit: int | None = None) -> list[CalendarDay]:
    """One entry per day of the month, in order."""
    earned = earned_by_date(rows)
    year, month = parse_year_month(year_month)
    days = []
    for day in range(1, _calendar.monthrange(year, month)[1] + 1):
        d = date(year, month, day)
        amount = earned.get(d.isoformat(), 0)
        pct = completion_percentage(amount, daily_limit)
        days.append(CalendarDay(date=d, earned=amount, percentage=pct, ring=ring_color(pct)))
    return days


def should_refresh(displayed_month: str, today: date, month_changed: bool = False, transcription_completed: bool = False) -> bool:
    """Re-query on month navigation, or after a transcription when today's month is on screen."""
    if month_changed:
        return True
    return transcription_completed and displayed_month == year_month_of(today)
