import json
from pathlib import Path

import pytest

from reversals.cli import main, parse_args, run_command

REPO_ROOT = Path(__file__).resolve().parents[2]
CONFIG_DIR = REPO_ROOT / "config"
SAMPLE_INPUT = REPO_ROOT / "data" / "reversal_requests.json"


def _args(command: str, data_dir: Path, *extra: str):
    return parse_args(
        [
            command,
            "--config-dir",
            str(CONFIG_DIR),
            "--data-dir",
            str(data_dir),
            "--run-id",
            "run-test",
            *extra,
        ]
    )


@pytest.mark.integration
def test_cli_export_generates_expected_artifacts(tmp_path: Path):
    data_dir = tmp_path / "data"
    exit_code = run_command(_args("export", data_dir, "--input", str(SAMPLE_INPUT)))

    assert exit_code == 0
    assert (data_dir / "out" / "reversal_decisions.csv").exists()
    assert (data_dir / "run_meta" / "run-test.log.jsonl").exists()
    summary = json.loads((data_dir / "out" / "reports" / "run_summary.json").read_text(encoding="utf-8"))
    assert summary["status"] == "success"
    assert summary["counts"]["rows_in"] == 6
    assert summary["counts"]["approved"] == 3


@pytest.mark.integration
def test_cli_evaluate_prints_table(tmp_path: Path, capsys):
    exit_code = run_command(_args("evaluate", tmp_path / "data", "--input", str(SAMPLE_INPUT)))

    out = capsys.readouterr().out.splitlines()
    assert exit_code == 0
    assert out[0].startswith("Name")
    assert len(out) == 2 + 6
    assert "Emma Smith" in out[2]
    assert not (tmp_path / "data").exists()


@pytest.mark.integration
def test_cli_invalid_record_fails_batch_unless_skipped(tmp_path: Path):
    records = json.loads(SAMPLE_INPUT.read_text(encoding="utf-8"))
    records[2]["investmentDate"] = "2/30/2021"
    broken_input = tmp_path / "broken.json"
    broken_input.write_text(json.dumps({"requests": records}), encoding="utf-8")

    failed_dir = tmp_path / "failed"
    assert run_command(_args("export", failed_dir, "--input", str(broken_input))) == 20
    assert not (failed_dir / "out" / "reversal_decisions.csv").exists()

    skipped_dir = tmp_path / "skipped"
    assert run_command(_args("export", skipped_dir, "--input", str(broken_input), "--on-invalid", "skip")) == 10
    summary = json.loads((skipped_dir / "out" / "reports" / "run_summary.json").read_text(encoding="utf-8"))
    assert summary["status"] == "partial"
    assert summary["counts"]["rows_out"] == 5
    assert summary["failures"][0]["name"] == "Olivia Davis"


@pytest.mark.integration
def test_cli_missing_input_is_hard_failure(tmp_path: Path):
    assert main(
        [
            "evaluate",
            "--config-dir",
            str(CONFIG_DIR),
            "--input",
            str(tmp_path / "nope.json"),
        ]
    ) == 20


def _evaluate_exit_code(config_dir: Path, input_path: Path) -> int:
    return main(["evaluate", "--config-dir", str(config_dir), "--input", str(input_path)])


@pytest.mark.integration
def test_cli_undecodable_input_is_hard_failure(tmp_path: Path, capsys):
    bad_input = tmp_path / "bad.json"
    bad_input.write_bytes(b'[{"name": "\xff"}]')

    assert _evaluate_exit_code(CONFIG_DIR, bad_input) == 20
    events = [json.loads(line) for line in capsys.readouterr().err.splitlines()]
    assert events[-1]["event"] == "STAGE_FAIL"
    assert events[-1]["error_code"] == "STAGE_ERROR"


@pytest.mark.integration
def test_cli_directory_as_input_is_hard_failure(tmp_path: Path):
    assert _evaluate_exit_code(CONFIG_DIR, tmp_path) == 20


@pytest.mark.integration
def test_cli_broken_config_yaml_is_hard_failure(tmp_path: Path, capsys):
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "refund_policy.yml").write_text("cut_off: [unclosed\n", encoding="utf-8")

    assert _evaluate_exit_code(config_dir, SAMPLE_INPUT) == 20
    events = [json.loads(line) for line in capsys.readouterr().err.splitlines()]
    assert events[-1]["error_code"] == "CONFIG_ERROR"


@pytest.mark.integration
def test_cli_unexpected_error_is_logged_and_hard_failure(tmp_path: Path, capsys, monkeypatch):
    def _explode(*_args, **_kwargs):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr("reversals.cli.write_decisions_csv", _explode)

    exit_code = run_command(_args("export", tmp_path / "data", "--input", str(SAMPLE_INPUT)))

    assert exit_code == 20
    events = [json.loads(line) for line in capsys.readouterr().err.splitlines()]
    assert events[-1]["event"] == "STAGE_FAIL"
    assert events[-1]["error_code"] == "UNEXPECTED_ERROR"
    assert events[-1]["run_id"] == "run-test"
