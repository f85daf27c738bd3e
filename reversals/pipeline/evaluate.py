"""Attach terms-of-service and refund approval flags to reversal requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from reversals.common.constants import ON_INVALID_CHOICES, ON_INVALID_FAIL
from reversals.common.errors import InvalidRecordError, StageError
from reversals.common.logging import log_event
from reversals.common.models import (
    EnrichedRequest,
    NormalizedRequest,
    RawRequest,
    RecordFailure,
    resolve_request_source,
)
from reversals.common.policy import DEFAULT_POLICY, RefundPolicy, is_refund_approved, is_subject_to_new_tos
from reversals.pipeline.normalise import normalise_request


@dataclass(frozen=True)
class BatchResult:
    requests: list[EnrichedRequest] = field(default_factory=list)
    failures: list[RecordFailure] = field(default_factory=list)
    rows_in: int = 0


def enrich_request(request: NormalizedRequest, policy: RefundPolicy = DEFAULT_POLICY) -> EnrichedRequest:
    new_tos = is_subject_to_new_tos(request.sign_up_date, policy)
    return EnrichedRequest.from_normalized(
        request,
        is_subject_to_new_tos=new_tos,
        is_approved=is_refund_approved(request, new_tos, policy),
    )


def _record_name(record: RawRequest | dict) -> str | None:
    if isinstance(record, RawRequest):
        return record.name
    if isinstance(record, dict):
        name = record.get("name")
        return None if name is None else str(name)
    return None


def _reject(
    index: int,
    record: RawRequest | dict,
    error: InvalidRecordError,
    *,
    on_invalid: str,
    logger: logging.Logger | None,
    run_id: str | None,
) -> RecordFailure:
    failure = RecordFailure(
        index=index,
        name=_record_name(record),
        error_code=error.error_code,
        message=str(error),
    )
    if logger is not None:
        log_event(
            logger,
            f"invalid reversal request at index {index}: {error}",
            level=logging.WARNING,
            run_id=run_id,
            stage="evaluate",
            event="RECORD_INVALID",
            status="error",
            record_index=index,
            error_code=error.error_code,
        )
    if on_invalid == ON_INVALID_FAIL:
        raise StageError(f"Record {index} ({failure.name}) rejected: {error}") from error
    return failure


def build_enriched_requests(
    raw_records: Iterable[RawRequest | dict],
    policy: RefundPolicy = DEFAULT_POLICY,
    *,
    on_invalid: str = ON_INVALID_FAIL,
    logger: logging.Logger | None = None,
    run_id: str | None = None,
) -> BatchResult:
    """Normalise and evaluate every record, preserving input order.

    With ``on_invalid="fail"`` the first malformed record rejects the batch
    with a ``StageError`` naming its index. With ``"skip"`` malformed records
    are left out of ``requests`` and listed in ``failures``.
    """
    if on_invalid not in ON_INVALID_CHOICES:
        raise ValueError(f"Unknown on_invalid policy: {on_invalid}")

    enriched: list[EnrichedRequest] = []
    failures: list[RecordFailure] = []
    rows_in = 0

    for index, record in enumerate(raw_records):
        rows_in += 1
        try:
            raw = record if isinstance(record, RawRequest) else RawRequest.from_dict(record)
        except InvalidRecordError as exc:
            failures.append(_reject(index, record, exc, on_invalid=on_invalid, logger=logger, run_id=run_id))
            continue

        outcome = normalise_request(raw)
        if not outcome.ok:
            failures.append(
                _reject(index, record, outcome.error, on_invalid=on_invalid, logger=logger, run_id=run_id)
            )
            continue

        normalised = outcome.request
        if logger is not None and resolve_request_source(normalised.request_source) is None:
            log_event(
                logger,
                f"unrecognised request source {normalised.request_source!r} at index {index}; not approved",
                level=logging.WARNING,
                run_id=run_id,
                stage="evaluate",
                event="UNKNOWN_REQUEST_SOURCE",
                status="ok",
                record_index=index,
            )
        enriched.append(enrich_request(normalised, policy))

    return BatchResult(requests=enriched, failures=failures, rows_in=rows_in)
