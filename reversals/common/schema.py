"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from reversals.common.constants import ON_INVALID_CHOICES
from reversals.common.errors import ConfigError


def _assert_mapping(obj: object, ctx: str) -> dict:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    return obj


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(str(key) for key in unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_positive_hours(value: object, ctx: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{ctx} must be a positive number of hours, got {value!r}")


def validate_refund_policy_config(cfg: object, *, allow_unknown: bool = False) -> dict:
    cfg = _assert_mapping(cfg, "refund_policy")
    top_required = {"cut_off", "deadlines_hours", "batch"}
    _assert_required_keys(cfg, top_required, "refund_policy")
    _assert_no_unknown_keys(cfg, top_required, "refund_policy", allow_unknown)

    cut_off = _assert_mapping(cfg["cut_off"], "cut_off")
    _assert_required_keys(cut_off, {"date", "location"}, "cut_off")
    if not isinstance(cut_off["date"], str):
        raise ConfigError("cut_off.date must be a quoted string such as \"2/1/2020\"")

    deadlines = _assert_mapping(cfg["deadlines_hours"], "deadlines_hours")
    if not deadlines:
        raise ConfigError("deadlines_hours must be a non-empty mapping")
    for source, window in deadlines.items():
        ctx = f"deadlines_hours.{source}"
        window = _assert_mapping(window, ctx)
        _assert_required_keys(window, {"old_tos", "new_tos"}, ctx)
        _assert_no_unknown_keys(window, {"old_tos", "new_tos"}, ctx, allow_unknown)
        _assert_positive_hours(window["old_tos"], f"{ctx}.old_tos")
        _assert_positive_hours(window["new_tos"], f"{ctx}.new_tos")

    batch = _assert_mapping(cfg["batch"], "batch")
    _assert_required_keys(batch, {"on_invalid"}, "batch")
    if batch["on_invalid"] not in ON_INVALID_CHOICES:
        raise ConfigError(f"batch.on_invalid must be one of {', '.join(ON_INVALID_CHOICES)}")

    return cfg
