from datetime import date

import pytest

from versescribe.core.exceptions import BadRequestError
from versescribe.models.records import DailyCredits
from versescribe.services.calendar import (
    RingColor,
    build_month,
    completion_percentage,
    earned_by_date,
    month_bounds,
    ring_color,
    should_refresh,
)

ROWS = [
    DailyCredits(date=date(2026, 1, 5), earned=50),
    DailyCredits(date=date(2026, 1, 31), earned=300),
]


def test_earned_by_date_has_only_recorded_days():
    assert earned_by_date(ROWS) == {"2026-01-05": 50, "2026-01-31": 300}


def test_full_day_is_completed():
    pct = completion_percentage(300)
    assert pct == 100
    assert ring_color(pct) is RingColor.COMPLETED


def test_percentages_and_colors():
    assert completion_percentage(0) == 0
    assert ring_color(0) is RingColor.NONE
    assert completion_percentage(50) == 17
    assert ring_color(17) is RingColor.IN_PROGRESS
    # half rounds up
    assert completion_percentage(1, daily_limit=8) == 13


def test_percentage_is_clamped():
    assert completion_percentage(450) == 100


def test_month_bounds_are_half_open():
    assert month_bounds("2026-01") == (date(2026, 1, 1), date(2026, 2, 1))
    assert month_bounds("2026-02") == (date(2026, 2, 1), date(2026, 3, 1))
    assert month_bounds("2025-12") == (date(2025, 12, 1), date(2026, 1, 1))


@pytest.mark.parametrize("bad", ["2026", "2026-13", "26-01", "january"])
def test_month_bounds_rejects_bad_input(bad):
    with pytest.raises(BadRequestError):
        month_bounds(bad)


def test_build_month_is_dense():
    days = build_month(ROWS, "2026-01")
    assert len(days) == 31
    assert days[0].earned == 0 and days[0].ring is RingColor.NONE
    assert days[4].earned == 50 and days[4].ring is RingColor.IN_PROGRESS
    assert days[30].percentage == 100 and days[30].ring is RingColor.COMPLETED
    assert len(build_month([], "2028-02")) == 29


def test_should_refresh():
    today = date(2026, 1, 20)
    assert should_refresh("2025-12", today, month_changed=True)
    assert should_refresh("2026-01", today, transcription_completed=True)
    assert not should_refresh("2025-12", today, transcription_completed=True)
    assert not should_refresh("2026-01", today)
