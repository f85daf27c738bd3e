"""Locale-keyed date and date+time parsing for reversal requests.

US customers write dates month-first and European customers day-first, so the
literal ``2/1/2020`` is 1 February in one locale and 2 January in the other.
The customer location alone selects the format; nothing is auto-detected.

Parsed values are naive datetimes in the host-local frame. No timezone
conversion is applied, and every comparison in the pipeline is between values
produced the same way.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from reversals.common.constants import EUROPE_DATE_FORMAT, TIME_FORMAT, US_DATE_FORMAT
from reversals.common.errors import InvalidDateFormat
from reversals.common.models import CustomerLocation

_DATE_SHAPE_RE = re.compile(r"[0-9]{1,2}/[0-9]{1,2}/[0-9]{4}")
_DATETIME_SHAPE_RE = re.compile(r"[0-9]{1,2}/[0-9]{1,2}/[0-9]{4} [0-9]{1,2}:[0-9]{1,2}")


@dataclass(frozen=True)
class DateFormat:
    location: CustomerLocation
    pattern: str
    strptime_date: str

    @property
    def datetime_pattern(self) -> str:
        return f"{self.pattern} {TIME_FORMAT}"

    @property
    def strptime_datetime(self) -> str:
        return f"{self.strptime_date} %H:%M"


DATE_FORMATS: dict[CustomerLocation, DateFormat] = {
    CustomerLocation.US: DateFormat(CustomerLocation.US, US_DATE_FORMAT, "%m/%d/%Y"),
    CustomerLocation.EUROPE: DateFormat(CustomerLocation.EUROPE, EUROPE_DATE_FORMAT, "%d/%m/%Y"),
}


@dataclass(frozen=True)
class ParseOutcome:
    value: datetime | None = None
    error: InvalidDateFormat | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def date_format_for(location: CustomerLocation) -> DateFormat | None:
    try:
        return DATE_FORMATS.get(CustomerLocation(location))
    except ValueError:
        return None


def _strptime(text: object, location: CustomerLocation, *, with_time: bool) -> datetime:
    date_format = date_format_for(location)
    if date_format is None:
        raise InvalidDateFormat(text, location, None)

    pattern = date_format.datetime_pattern if with_time else date_format.pattern
    strptime_format = date_format.strptime_datetime if with_time else date_format.strptime_date
    # strptime tolerates padding spaces, so check the shape before it sees the text.
    shape = _DATETIME_SHAPE_RE if with_time else _DATE_SHAPE_RE
    if not isinstance(text, str) or not shape.fullmatch(text):
        raise InvalidDateFormat(text, date_format.location.value, pattern)
    try:
        return datetime.strptime(text, strptime_format)
    except ValueError:
        raise InvalidDateFormat(text, date_format.location.value, pattern) from None


def parse_date(text: str, location: CustomerLocation) -> datetime:
    """Parse a locale date (no time) into midnight of that calendar day."""
    return _strptime(text, location, with_time=False)


def parse_datetime(text: str, location: CustomerLocation) -> datetime:
    """Parse ``<locale date> H:mm`` into an instant."""
    return _strptime(text, location, with_time=True)


def combine_date_time(date_text: str, time_text: str) -> str:
    return f"{date_text} {time_text}"


def try_parse_date(text: str, location: CustomerLocation) -> ParseOutcome:
    try:
        return ParseOutcome(value=parse_date(text, location))
    except InvalidDateFormat as exc:
        return ParseOutcome(error=exc)


def try_parse_datetime(text: str, location: CustomerLocation) -> ParseOutcome:
    try:
        return ParseOutcome(value=parse_datetime(text, location))
    except InvalidDateFormat as exc:
        return ParseOutcome(error=exc)
