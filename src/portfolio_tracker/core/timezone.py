"""Date helpers for trade dates in the deployment's local timezone."""

from datetime import date, datetime, time
from typing import Union

import pytz
from dateutil import parser as date_parser

from portfolio_tracker.core.exceptions import ValidationError

DEFAULT_TZ_NAME = "America/Argentina/Buenos_Aires"


def now_in(tz_name: str = DEFAULT_TZ_NAME) -> datetime:
    """Return the current time in the given timezone."""
    return datetime.now(pytz.timezone(tz_name))


def today_in(tz_name: str = DEFAULT_TZ_NAME) -> date:
    """Return today's calendar date in the given timezone."""
    return now_in(tz_name).date()


def parse_trade_date(value: Union[str, date, datetime]) -> Union[date, datetime]:
    """
    Normalize a trade date.

    Accepts date/datetime objects or strings such as "2024-03-15",
    "15 Mar 2024" or "2024-03-15 15:30". A string that carries a time of day
    comes back as a datetime so same-day trades can be ordered; otherwise a
    calendar date is returned. Aware datetimes keep their own wall clock.
    """
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Invalid trade date: {value!r}")
    try:
        parsed = date_parser.parse(value.strip())
    except (ValueError, OverflowError) as exc:
        raise ValidationError(f"Invalid trade date: {value!r}") from exc
    if parsed.time() == time.min and parsed.tzinfo is None:
        return parsed.date()
    return parsed


def parse_trade_time(value: Union[str, time]) -> time:
    """Normalize a time of day such as "15:30" or "3:30 PM"."""
    if isinstance(value, time):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Invalid trade time: {value!r}")
    try:
        return date_parser.parse(value.strip()).time()
    except (ValueError, OverflowError) as exc:
        raise ValidationError(f"Invalid trade time: {value!r}") from exc
