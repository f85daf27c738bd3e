import json
import logging
from datetime import datetime
from pathlib import Path

from reversals.common.fs import read_json, write_json
from reversals.common.logging import JsonLineFormatter, build_logger, close_logger, log_event
from reversals.common.time_utils import format_display_date, format_display_datetime, generate_run_id


def test_generate_run_id_prefix():
    assert generate_run_id().startswith("run-")


def test_format_display_date_pads_day_and_uses_english_month():
    assert format_display_date(datetime(2020, 1, 2)) == "02 January 2020"
    assert format_display_date(datetime(2021, 12, 25, 8, 30)) == "25 December 2021"


def test_format_display_datetime_does_not_pad_hour():
    assert format_display_datetime(datetime(2021, 2, 2, 5, 0)) == "02 February 2021 5:00"
    assert format_display_datetime(datetime(2021, 2, 1, 23, 7)) == "01 February 2021 23:07"


def test_write_json_is_sorted_and_round_trips(tmp_path: Path):
    path = tmp_path / "nested" / "payload.json"
    write_json(path, {"b": 1, "a": [1, 2]})
    assert path.read_text(encoding="utf-8").index('"a"') < path.read_text(encoding="utf-8").index('"b"')
    assert read_json(path) == {"a": [1, 2], "b": 1}


def test_json_line_formatter_emits_stable_fields():
    record = logging.LogRecord("reversals.test", logging.WARNING, __file__, 1, "record %s bad", (3,), None)
    record.event = "RECORD_INVALID"
    record.record_index = 3

    payload = json.loads(JsonLineFormatter().format(record))

    assert payload["message"] == "record 3 bad"
    assert payload["level"] == "WARNING"
    assert payload["event"] == "RECORD_INVALID"
    assert payload["record_index"] == 3
    assert payload["run_id"] is None
    assert "timestamp" in payload


def test_build_logger_writes_jsonl_file(tmp_path: Path):
    logger = build_logger("run-log-test", data_dir=tmp_path)
    log_event(logger, "stage start", run_id="run-log-test", stage="export", event="STAGE_START", status="ok")
    close_logger(logger)

    lines = (tmp_path / "run_meta" / "run-log-test.log.jsonl").read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    assert json.loads(lines[0])["event"] == "STAGE_START"
