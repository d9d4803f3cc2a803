"""Month/date validation utilities."""
import calendar
import re
from datetime import date
from typing import List

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"
DATE_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])$"

_MONTH_RE = re.compile(MONTH_PATTERN)
_DATE_RE = re.compile(DATE_PATTERN)


class BillingError(ValueError):
    """Custom exception for invalid billing inputs."""
    pass


def validate_month(month: str) -> str:
    """
    Validate a `YYYY-MM` month string.

    Raises BillingError for anything else, including month 00 and 13.
    """
    if not isinstance(month, str) or not _MONTH_RE.match(month):
        raise BillingError(f"Invalid month '{month}'. Use YYYY-MM")
    return month


def validate_date(value: str) -> str:
    """Validate a `YYYY-MM-DD` date string that exists on the calendar."""
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise BillingError(f"Invalid date '{value}'. Use YYYY-MM-DD")
    try:
        date.fromisoformat(value)
    except ValueError:
        raise BillingError(f"Invalid date '{value}'. Use YYYY-MM-DD")
    return value


def in_month(value: str, month: str) -> bool:
    """True when an ISO date string falls inside `month`."""
    return isinstance(value, str) and value.startswith(f"{month}-")


def month_regex(month: str) -> str:
    """Mongo `$regex` matching every date of a validated month."""
    return f"^{re.escape(validate_month(month))}-"


def dates_in_month(month: str) -> List[str]:
    """All ISO dates of a month, in order."""
    year, mon = (int(part) for part in validate_month(month).split("-"))
    _, days = calendar.monthrange(year, mon)
    return [date(year, mon, day).isoformat() for day in range(1, days + 1)]


def is_past_month(month: str, today: date | None = None) -> bool:
    today = today or date.today()
    return validate_month(month) < today.strftime("%Y-%m")
