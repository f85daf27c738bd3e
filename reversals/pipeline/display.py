"""Display rows, text table and CSV export for evaluated requests."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from reversals.common.constants import DECISIONS_FILENAME
from reversals.common.fs import write_csv
from reversals.common.models import EnrichedRequest
from reversals.common.time_utils import format_display_date, format_display_datetime

DISPLAY_COLUMNS = [
    ("name", "Name"),
    ("customer_location", "Customer Location"),
    ("sign_up_date", "Sign up date"),
    ("investment", "Investment Date and Time"),
    ("refund_request", "Refund Request Date and Time"),
    ("refund_approved", "Refund Request Approved"),
]
DECISION_HEADERS = ["id", *(key for key, _ in DISPLAY_COLUMNS)]


def to_display_row(index: int, request: EnrichedRequest) -> dict:
    return {
        "id": index,
        "name": request.name,
        "customer_location": request.customer_location.value,
        "sign_up_date": format_display_date(request.sign_up_date),
        "investment": format_display_datetime(request.investment_instant),
        "refund_request": format_display_datetime(request.refund_request_instant),
        "refund_approved": "true" if request.is_approved else "false",
    }


def to_display_rows(requests: Iterable[EnrichedRequest]) -> list[dict]:
    return [to_display_row(index, request) for index, request in enumerate(requests)]


def render_table(rows: list[dict]) -> str:
    headers = [title for _, title in DISPLAY_COLUMNS]
    cells = [[str(row[key]) for key, _ in DISPLAY_COLUMNS] for row in rows]
    widths = [max([len(header), *(len(line[i]) for line in cells)]) for i, header in enumerate(headers)]

    def _line(values: list[str]) -> str:
        return " | ".join(value.ljust(width) for value, width in zip(values, widths)).rstrip()

    out = [_line(headers), "-+-".join("-" * width for width in widths)]
    out.extend(_line(line) for line in cells)
    return "\n".join(out) + "\n"


def write_decisions_csv(data_dir: Path, rows: list[dict]) -> Path:
    out_path = data_dir / "out" / DECISIONS_FILENAME
    write_csv(out_path, DECISION_HEADERS, rows)
    return out_path
