"""Run metadata timestamps and display formatting for instants."""

from __future__ import annotations

from datetime import datetime, timezone

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def utc_timestamp_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds")


def generate_run_id() -> str:
    now = datetime.now(tz=timezone.utc)
    return now.strftime("run-%Y%m%dT%H%M%S%fZ")


def format_display_date(value: datetime) -> str:
    """``DD Month YYYY`` with English month names regardless of host locale."""
    return f"{value.day:02d} {MONTH_NAMES[value.month - 1]} {value.year:04d}"


def format_display_datetime(value: datetime) -> str:
    """``DD Month YYYY H:mm``; the hour is not zero-padded."""
    return f"{format_display_date(value)} {value.hour}:{value.minute:02d}"
