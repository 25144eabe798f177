"""Local calendar day helpers.

Credits and calendar cells are attributed to the user's local day. A date sent
by the client wins; otherwise the configured timezone (or the host's local
time) decides. UTC truncation is never used.
"""

from datetime import date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from versescribe.core.config import get_settings
from versescribe.core.exceptions import BadRequestError


def local_today(tz_name: str | None = None) -> date:
    tz_name = tz_name if tz_name is not None else get_settings().timezone
    if not tz_name:
        return datetime.now().astimezone().date()
    try:
        return datetime.now(ZoneInfo(tz_name)).date()
    except ZoneInfoNotFoundError as e:
        raise BadRequestError(f"Unknown timezone: {tz_name}") from e


def parse_local_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise BadRequestError("Date must be YYYY-MM-DD", details={"value": value}) from e


def resolve_local_date(value: str | date | None) -> date:
    if value is None or value == "":
        return local_today()
    if isinstance(value, date):
        return value
    return parse_local_date(value)


def parse_year_month(value: str) -> tuple[int, int]:
    """'2026-01' -> (2026, 1)."""
    try:
        year_s, month_s = value.split("-")
        year, month = int(year_s), int(month_s)
    except (AttributeError, ValueError) as e:
        raise BadRequestError("Month must be YYYY-MM", details={"value": value}) from e
    if len(year_s) != 4 or not 1 <= month <= 12:
        raise BadRequestError("Month must be YYYY-MM", details={"value": value})
    return year, month


def year_month_of(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"
