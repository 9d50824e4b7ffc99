"""Core utilities and shared functionality."""

from portfolio_tracker.core.timezone import (
    now_in,
    today_in,
    parse_trade_date,
    parse_trade_time,
    DEFAULT_TZ_NAME,
)
from portfolio_tracker.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    InsufficientSharesError,
)

__all__ = [
    "now_in",
    "today_in",
    "parse_trade_date",
    "parse_trade_time",
    "DEFAULT_TZ_NAME",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "InsufficientSharesError",
]
