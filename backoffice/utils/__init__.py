"""Utility helpers for reusable functionality."""

from .datetime import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    format_display_date,
    get_app_timezone,
    now_in_app_naive_datetime,
    now_in_app_timezone,
    start_of_day,
)

__all__ = [
    "ensure_app_naive_datetime",
    "ensure_app_timezone",
    "format_display_date",
    "get_app_timezone",
    "now_in_app_naive_datetime",
    "now_in_app_timezone",
    "start_of_day",
]
