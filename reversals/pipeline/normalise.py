"""Normalise raw reversal requests into typed instants."""

from __future__ import annotations

from dataclasses import dataclass

from reversals.common.datetime_formats import combine_date_time, try_parse_date, try_parse_datetime
from reversals.common.errors import InvalidDateFormat
from reversals.common.models import NormalizedRequest, RawRequest


@dataclass(frozen=True)
class NormaliseOutcome:
    request: NormalizedRequest | None = None
    error: InvalidDateFormat | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def normalise_request(raw: RawRequest) -> NormaliseOutcome:
    """Parse every date of ``raw`` with its own location; the first bad field wins."""
    location = raw.customer_location
    sign_up, investment, refund_request = outcomes = (
        try_parse_date(raw.sign_up_date, location),
        try_parse_datetime(combine_date_time(raw.investment_date, raw.investment_time), location),
        try_parse_datetime(combine_date_time(raw.refund_request_date, raw.refund_request_time), location),
    )
    for outcome in outcomes:
        if not outcome.ok:
            return NormaliseOutcome(error=outcome.error)

    return NormaliseOutcome(
        request=NormalizedRequest(
            name=raw.name,
            customer_location=location,
            request_source=raw.request_source,
            sign_up_date=sign_up.value,
            investment_instant=investment.value,
            refund_request_instant=refund_request.value,
        )
    )
