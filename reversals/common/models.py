"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from reversals.common.errors import InvalidRecordError


class CustomerLocation(str, Enum):
    US = "US"
    EUROPE = "Europe"


class RequestSource(str, Enum):
    PHONE = "phone"
    WEB = "web app"


_REQUEST_SOURCE_ALIASES = {
    "phone": RequestSource.PHONE,
    "web app": RequestSource.WEB,
    "web": RequestSource.WEB,
}

RAW_FIELD_NAMES = {
    "name": "name",
    "customer_location": "customerLocation",
    "sign_up_date": "signUpDate",
    "request_source": "requestSource",
    "investment_date": "investmentDate",
    "investment_time": "investmentTime",
    "refund_request_date": "refundRequestDate",
    "refund_request_time": "refundRequestTime",
}


def resolve_customer_location(value: object) -> CustomerLocation:
    try:
        return CustomerLocation(value)
    except ValueError:
        raise InvalidRecordError(f"Unknown customer location: {value!r}") from None


def resolve_request_source(value: str) -> RequestSource | None:
    """Map a raw channel tag to a known source, or None when unrecognised."""
    return _REQUEST_SOURCE_ALIASES.get(value)


@dataclass(frozen=True)
class RawRequest:
    name: str
    customer_location: CustomerLocation
    sign_up_date: str
    request_source: str
    investment_date: str
    investment_time: str
    refund_request_date: str
    refund_request_time: str

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> RawRequest:
        if not isinstance(payload, dict):
            raise InvalidRecordError(f"Reversal request must be an object, got {type(payload).__name__}")
        missing = sorted(key for key in RAW_FIELD_NAMES.values() if key not in payload)
        if missing:
            raise InvalidRecordError(f"Missing keys in reversal request: {', '.join(missing)}")

        values = {field: payload[key] for field, key in RAW_FIELD_NAMES.items()}
        values["customer_location"] = resolve_customer_location(values["customer_location"])
        values["request_source"] = str(values["request_source"])
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        values = asdict(self)
        values["customer_location"] = self.customer_location.value
        return {RAW_FIELD_NAMES[field]: value for field, value in values.items()}


@dataclass(frozen=True)
class NormalizedRequest:
    name: str
    customer_location: CustomerLocation
    request_source: str
    sign_up_date: datetime
    investment_instant: datetime
    refund_request_instant: datetime


@dataclass(frozen=True)
class EnrichedRequest(NormalizedRequest):
    is_subject_to_new_tos: bool
    is_approved: bool

    @classmethod
    def from_normalized(
        cls,
        request: NormalizedRequest,
        *,
        is_subject_to_new_tos: bool,
        is_approved: bool,
    ) -> EnrichedRequest:
        return cls(
            **{field: getattr(request, field) for field in NormalizedRequest.__dataclass_fields__},
            is_subject_to_new_tos=is_subject_to_new_tos,
            is_approved=is_approved,
        )


@dataclass(frozen=True)
class RecordFailure:
    index: int
    name: str | None
    error_code: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
