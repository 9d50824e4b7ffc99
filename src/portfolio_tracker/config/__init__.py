"""Configuration: settings and logging."""

from portfolio_tracker.config.settings import Settings, get_default_data_dir
from portfolio_tracker.config.logging_config import setup_logging

__all__ = [
    "Settings",
    "get_default_data_dir",
    "setup_logging",
]
