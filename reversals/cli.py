"""CLI entrypoint for the reversal refund eligibility pipeline."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from reversals.common.config_loader import load_policy_config
from reversals.common.constants import (
    COMMANDS,
    EXIT_HARD_FAIL,
    EXIT_PARTIAL,
    EXIT_SUCCESS,
    ON_INVALID_CHOICES,
)
from reversals.common.errors import PipelineError
from reversals.common.logging import build_logger, close_logger, log_event
from reversals.common.time_utils import generate_run_id
from reversals.pipeline.display import render_table, to_display_rows, write_decisions_csv
from reversals.pipeline.evaluate import build_enriched_requests
from reversals.pipeline.load import load_raw_payloads
from reversals.pipeline.reports import write_run_summary


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=COMMANDS)
    parser.add_argument("--input", default="data/reversal_requests.json")
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--data-dir", default="./data")
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--on-invalid", default=None, choices=ON_INVALID_CHOICES)
    return parser.parse_args(argv)


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    data_dir = Path(args.data_dir)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None

    logger = build_logger(
        run_id,
        data_dir=data_dir if args.command == "export" else None,
        level=args.log_level,
    )
    try:
        return _run(args, run_id, data_dir, overlay_config_dir, logger)
    finally:
        close_logger(logger)


def _log_failure(logger: logging.Logger, args: argparse.Namespace, run_id: str, message: str, error_code: str) -> None:
    log_event(
        logger,
        message,
        level=logging.ERROR,
        run_id=run_id,
        stage=args.command,
        event="STAGE_FAIL",
        status="error",
        error_code=error_code,
    )


def _run(
    args: argparse.Namespace,
    run_id: str,
    data_dir: Path,
    overlay_config_dir: Path | None,
    logger: logging.Logger,
) -> int:
    started = time.monotonic()
    log_event(logger, "stage start", run_id=run_id, stage=args.command, event="STAGE_START", status="ok")
    try:
        bundle = load_policy_config(Path(args.config_dir), overlay_config_dir=overlay_config_dir)
        on_invalid = args.on_invalid or bundle.on_invalid
        payloads = load_raw_payloads(Path(args.input))
        result = build_enriched_requests(
            payloads,
            bundle.policy,
            on_invalid=on_invalid,
            logger=logger,
            run_id=run_id,
        )

        rows = to_display_rows(result.requests)
        if args.command == "evaluate":
            sys.stdout.write(render_table(rows))
        else:
            write_decisions_csv(data_dir, rows)
            write_run_summary(data_dir, run_id=run_id, result=result, policy=bundle.policy, on_invalid=on_invalid)
    except PipelineError as exc:
        _log_failure(logger, args, run_id, f"{args.command} failed: {exc}", exc.error_code)
        return EXIT_HARD_FAIL
    except Exception as exc:
        _log_failure(logger, args, run_id, f"unexpected failure in {args.command}: {exc!r}", "UNEXPECTED_ERROR")
        return EXIT_HARD_FAIL

    log_event(
        logger,
        "stage end",
        run_id=run_id,
        stage=args.command,
        event="STAGE_END",
        status="partial" if result.failures else "ok",
        rows_in=result.rows_in,
        rows_out=len(result.requests),
        duration_ms=round((time.monotonic() - started) * 1000, 3),
    )
    return EXIT_PARTIAL if result.failures else EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    try:
        return run_command(args)
    except PipelineError:
        return EXIT_HARD_FAIL
    except Exception:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
