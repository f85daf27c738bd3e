"""Run report aggregation."""

from __future__ import annotations

from pathlib import Path

from reversals.common.fs import write_json
from reversals.common.policy import RefundPolicy
from reversals.pipeline.evaluate import BatchResult


def summarise_batch(result: BatchResult) -> dict:
    approved = sum(1 for request in result.requests if request.is_approved)
    return {
        "rows_in": result.rows_in,
        "rows_out": len(result.requests),
        "approved": approved,
        "rejected": len(result.requests) - approved,
        "skipped": len(result.failures),
        "subject_to_new_tos": sum(1 for request in result.requests if request.is_subject_to_new_tos),
    }


def write_run_summary(
    data_dir: Path,
    *,
    run_id: str,
    result: BatchResult,
    policy: RefundPolicy,
    on_invalid: str,
) -> Path:
    status = "partial" if result.failures else "success"
    payload = {
        "run_id": run_id,
        "status": status,
        "counts": summarise_batch(result),
        "policy": {**policy.to_dict(), "on_invalid": on_invalid},
        "failures": [failure.to_dict() for failure in result.failures],
    }
    summary_path = data_dir / "out" / "reports" / "run_summary.json"
    write_json(summary_path, payload)
    return summary_path
