"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from reversals.common.errors import ConfigError, InvalidDateFormat
from reversals.common.fs import read_yaml
from reversals.common.models import RequestSource, resolve_request_source
from reversals.common.policy import RefundPolicy, build_refund_policy
from reversals.common.schema import validate_refund_policy_config

POLICY_FILENAME = "refund_policy.yml"


@dataclass(frozen=True)
class ConfigBundle:
    policy: RefundPolicy
    on_invalid: str


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _read_config_yaml(path: Path):
    try:
        return read_yaml(path)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Missing config file: {path}")
    base = _read_config_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = _read_config_yaml(overlay_path)
    if overlay is None:
        return base
    if not isinstance(overlay, dict):
        raise ConfigError(f"Overlay config must be a mapping: {overlay_path}")
    return _deep_merge(base, overlay)


def load_policy_config(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> ConfigBundle:
    overlay_path = overlay_config_dir / POLICY_FILENAME if overlay_config_dir is not None else None
    cfg = validate_refund_policy_config(
        _load_yaml_with_overlay(config_dir / POLICY_FILENAME, overlay_path),
        allow_unknown=allow_unknown,
    )

    unknown_sources = sorted(str(tag) for tag in cfg["deadlines_hours"] if resolve_request_source(str(tag)) is None)
    if unknown_sources:
        raise ConfigError(f"Unknown request sources in deadlines_hours: {', '.join(unknown_sources)}")

    seen: dict[RequestSource, str] = {}
    for tag in cfg["deadlines_hours"]:
        source = resolve_request_source(str(tag))
        if source in seen:
            raise ConfigError(f"deadlines_hours lists {source.value!r} twice: {seen[source]!r} and {tag!r}")
        seen[source] = str(tag)

    try:
        policy = build_refund_policy(
            cut_off_date=cfg["cut_off"]["date"],
            cut_off_location=cfg["cut_off"]["location"],
            deadlines_hours=cfg["deadlines_hours"],
        )
    except InvalidDateFormat as exc:
        raise ConfigError(f"Invalid cut_off: {exc}") from exc

    return ConfigBundle(policy=policy, on_invalid=cfg["batch"]["on_invalid"])
