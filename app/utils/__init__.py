"""Utility helpers for reusable functionality."""

from .datetime import (
    ensure_app_timezone,
    ensure_utc_naive_datetime,
    get_app_timezone,
    parse_iso_datetime,
    utc_now,
)

__all__ = [
    "ensure_app_timezone",
    "ensure_utc_naive_datetime",
    "get_app_timezone",
    "parse_iso_datetime",
    "utc_now",
]
