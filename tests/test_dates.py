from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from versescribe.core.dates import (
    local_today,
    parse_local_date,
    parse_year_month,
    resolve_local_date,
    year_month_of,
)
from versescribe.core.exceptions import BadRequestError


def test_client_date_wins():
    assert resolve_local_date("2026-03-09") == date(2026, 3, 9)
    assert resolve_local_date(date(2026, 3, 9)) == date(2026, 3, 9)


def test_configured_timezone():
    assert local_today("Asia/Seoul") == datetime.now(ZoneInfo("Asia/Seoul")).date()


def test_unknown_timezone():
    with pytest.raises(BadRequestError):
        local_today("Mars/Olympus")


def test_bad_date():
    with pytest.raises(BadRequestError):
        parse_local_date("2026/03/09")


@pytest.mark.parametrize("value,expected", [("2026-01", (2026, 1)), ("1999-12", (1999, 12))])
def test_year_month(value, expected):
    assert parse_year_month(value) == expected


@pytest.mark.parametrize("value", ["2026-00", "2026-13", "26-01", "2026", "january"])
def test_bad_year_month(value):
    with pytest.raises(BadRequestError):
        parse_year_month(value)


def test_year_month_of():
    assert year_month_of(date(2026, 2, 28)) == "2026-02"
