"""Load raw reversal request records from JSON."""

from __future__ import annotations

import json
from pathlib import Path

from reversals.common.errors import StageError
from reversals.common.fs import read_json


def load_raw_payloads(path: Path) -> list[dict]:
    """Read a list of request objects, or an object with a ``requests`` list."""
    if not path.exists():
        raise StageError(f"Missing input file: {path}")
    try:
        payload = read_json(path)
    except json.JSONDecodeError as exc:
        raise StageError(f"Input is not valid JSON: {path}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise StageError(f"Cannot read input file: {path}: {exc}") from exc

    if isinstance(payload, dict):
        payload = payload.get("requests")
    if not isinstance(payload, list):
        raise StageError(f"Input must be a list of reversal requests: {path}")
    return payload
