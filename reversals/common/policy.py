"""Config-driven refund approval policy."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Mapping

from reversals.common.constants import (
    DEFAULT_DEADLINES_HOURS,
    NEW_TOS_CUT_OFF_DATE,
    NEW_TOS_CUT_OFF_LOCATION,
)
from reversals.common.datetime_formats import parse_date
from reversals.common.models import NormalizedRequest, RequestSource, resolve_request_source


@dataclass(frozen=True)
class RefundPolicy:
    """Terms-of-service cut-off and per-channel refund deadlines.

    ``deadlines_hours`` maps each request source to ``(old_tos, new_tos)``
    hour windows. Build it once per run and share it across all records.
    """

    cut_off: datetime
    deadlines_hours: Mapping[RequestSource, tuple[float, float]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "cut_off": self.cut_off.isoformat(),
            "deadlines_hours": {
                source.value: {"old_tos": old_tos, "new_tos": new_tos}
                for source, (old_tos, new_tos) in sorted(self.deadlines_hours.items(), key=lambda item: item[0].value)
            },
        }


def build_refund_policy(
    *,
    cut_off_date: str = NEW_TOS_CUT_OFF_DATE,
    cut_off_location: str = NEW_TOS_CUT_OFF_LOCATION,
    deadlines_hours: Mapping[str, Mapping[str, float]] | None = None,
) -> RefundPolicy:
    deadlines_cfg = DEFAULT_DEADLINES_HOURS if deadlines_hours is None else deadlines_hours
    deadlines: dict[RequestSource, tuple[float, float]] = {}
    for tag, window in deadlines_cfg.items():
        source = resolve_request_source(tag)
        if source is None:
            continue
        deadlines[source] = (window["old_tos"], window["new_tos"])

    return RefundPolicy(
        cut_off=parse_date(cut_off_date, cut_off_location),
        deadlines_hours=MappingProxyType(deadlines),
    )


DEFAULT_POLICY = build_refund_policy()


def is_subject_to_new_tos(sign_up_date: datetime, policy: RefundPolicy = DEFAULT_POLICY) -> bool:
    # Signing up on the cut-off day itself stays under the old terms.
    return sign_up_date > policy.cut_off


def deadline_hours(
    request_source: str,
    new_tos: bool,
    policy: RefundPolicy = DEFAULT_POLICY,
) -> float | None:
    source = resolve_request_source(request_source)
    if source is None or source not in policy.deadlines_hours:
        return None
    old_tos_hours, new_tos_hours = policy.deadlines_hours[source]
    return new_tos_hours if new_tos else old_tos_hours


def is_refund_approved(
    request: NormalizedRequest,
    new_tos: bool,
    policy: RefundPolicy = DEFAULT_POLICY,
) -> bool:
    hours = deadline_hours(request.request_source, new_tos, policy)
    if hours is None:
        return False
    # Elapsed real time in the host zone, so a DST shift inside the window counts.
    deadline = request.investment_instant.timestamp() + hours * 3600
    return request.refund_request_instant.timestamp() < deadline
