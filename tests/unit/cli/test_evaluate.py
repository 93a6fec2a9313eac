"""Tests for the bundle evaluation CLI."""

from __future__ import annotations

import json
import math
import os
from pathlib import Path

import pytest

from isovibe.cli import evaluate


NOW_MS = 1_735_801_000_000


def _write_json(path: Path, payload: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")


def _tone(amplitude_counts: float, *, size: int = 256, fmax: float = 400.0, freq_hz: float = 50.0) -> list[int]:
    return [round(amplitude_counts * math.sin(2.0 * math.pi * freq_hz * idx / fmax)) for idx in range(size)]


def _bundle(loud_amplitude: float) -> dict[str, object]:
    return {
        "thresholds": {
            "settings": {
                "machine_overrides": [None],
            }
        },
        "sensors": [
            {
                "id": "S-01",
                "machine_class": "smallMachine",
                "fmax": 400,
                "lor": 256,
                "last_data": {"h": _tone(loud_amplitude), "v": _tone(10.0), "a": _tone(10.0)},
            },
            {
                "id": "S-02",
                "last_seen_ms": NOW_MS - 60 * 60_000,
                "time_interval": 10,
                "last_data": {"h": _tone(10.0)},
            },
            {"id": "S-03"},
        ],
    }


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("ISOVIBE_"):
            monkeypatch.delenv(name)


def test_evaluate_main_writes_report(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    bundle_path = tmp_path / "bundle.json"
    _write_json(bundle_path, _bundle(1000.0))
    output_path = tmp_path / "out" / "report.json"

    exit_code = evaluate.main(
        ["--input", str(bundle_path), "--output", str(output_path), "--now-ms", str(NOW_MS)]
    )

    assert exit_code == 0
    report = json.loads(output_path.read_text(encoding="utf-8"))
    assert report["summary"]["critical"] == 1
    assert report["summary"]["lost"] == 1
    assert report["summary"]["standby"] == 1
    assert report["summary"]["total"] == 3
    sensors = {entry["sensor_id"]: entry for entry in report["sensors"]}
    assert sensors["S-01"]["axes"]["h"]["level"] == "critical"
    assert sensors["S-01"]["axes"]["h"]["thresholds"]["max"] == 4.5
    assert sensors["S-01"]["axes"]["h"]["velocity_rms_mm_s"] > 0.0
    assert sensors["S-02"]["status"] == "lost"
    assert "summary: normal=0" in capsys.readouterr().out


def test_evaluate_main_prints_json_without_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    bundle_path = tmp_path / "bundle.json"
    _write_json(bundle_path, _bundle(10.0))

    exit_code = evaluate.main(["--input", str(bundle_path), "--now-ms", str(NOW_MS)])

    assert exit_code == 0
    report = json.loads(capsys.readouterr().out)
    assert report["summary"]["normal"] == 1


def test_evaluate_main_fails_on_critical_when_requested(tmp_path: Path) -> None:
    bundle_path = tmp_path / "bundle.json"
    _write_json(bundle_path, _bundle(1000.0))

    exit_code = evaluate.main(
        [
            "--input",
            str(bundle_path),
            "--output",
            str(tmp_path / "report.json"),
            "--now-ms",
            str(NOW_MS),
            "--fail-on-critical",
        ]
    )

    assert exit_code == 1


def test_evaluate_main_reports_malformed_bundle(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    bundle_path = tmp_path / "bundle.json"
    _write_json(bundle_path, {"sensors": [{"id": "S-01", "last_data": {"h": [1, "x"]}}]})

    exit_code = evaluate.main(["--input", str(bundle_path)])

    assert exit_code == 2
    assert "last_data.h[1] must be numeric" in capsys.readouterr().err


def test_evaluate_main_reports_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = evaluate.main(["--input", str(tmp_path / "missing.json")])

    assert exit_code == 2
    assert "[ERROR] evaluation failed" in capsys.readouterr().err
