"""CLI entrypoint: classify a JSON bundle of sensors and emit a fleet report."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from isovibe.config import EngineSettings
from isovibe.domain.models import SensorStatus
from isovibe.engine import FleetEvaluation, SensorEvaluation, evaluate_fleet
from isovibe.integration import PayloadError, parse_sensor_reading, parse_threshold_bundle


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EvaluateCliResult:
    """Report produced by one CLI execution."""

    report: dict[str, Any]
    output_path: Path | None
    has_critical: bool


def build_parser() -> argparse.ArgumentParser:
    """Create CLI parser for bundle evaluation."""
    parser = argparse.ArgumentParser(
        prog="isovibe-evaluate",
        description="Classify sensor vibration buffers against layered ISO 10816-3 thresholds.",
    )
    parser.add_argument(
        "--input",
        type=Path,
        required=True,
        help="JSON bundle with `thresholds` settings and a `sensors` list.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Optional path for the JSON report; printed to stdout when omitted.",
    )
    parser.add_argument(
        "--now-ms",
        type=int,
        default=None,
        help="Reference clock (epoch ms) for lost-sensor timeouts. Defaults to current time.",
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="WARNING",
        help="Logging verbosity.",
    )
    parser.add_argument(
        "--fail-on-critical",
        action="store_true",
        help="Return exit code 1 if any sensor is critical.",
    )
    return parser


def run_evaluate_from_args(args: argparse.Namespace) -> EvaluateCliResult:
    """Load the bundle, evaluate every sensor and optionally write the report."""
    settings = EngineSettings.from_env()
    payload = _load_json(args.input)

    thresholds_payload = payload.get("thresholds", {})
    if not isinstance(thresholds_payload, dict):
        raise PayloadError("thresholds must be an object")
    bundle = parse_threshold_bundle(thresholds_payload)

    sensors_payload = payload.get("sensors", [])
    if not isinstance(sensors_payload, list):
        raise PayloadError("sensors must be a list")

    now_ms = args.now_ms if args.now_ms is not None else int(time.time() * 1000)
    readings = []
    for idx, entry in enumerate(sensors_payload):
        if not isinstance(entry, dict):
            raise PayloadError(f"sensors[{idx}] must be an object")
        readings.append(parse_sensor_reading(entry, settings=settings, now_ms=now_ms))

    logger.info("evaluating %d sensors against %d overrides", len(readings), len(bundle.overrides))
    fleet = evaluate_fleet(readings, bundle.overrides, settings=settings, defaults=bundle.defaults)
    report = fleet_to_jsonable(fleet)

    output_path: Path | None = None
    if args.output is not None:
        output_path = args.output.resolve()
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json.dumps(report, indent=2, sort_keys=True), encoding="utf-8")

    return EvaluateCliResult(
        report=report,
        output_path=output_path,
        has_critical=fleet.summary.critical > 0,
    )


def fleet_to_jsonable(fleet: FleetEvaluation) -> dict[str, Any]:
    """JSON-safe view of a fleet evaluation."""
    summary = fleet.summary
    return {
        "summary": {
            **summary.as_dict(),
            "connected_total": summary.connected_total,
            "disconnected_total": summary.disconnected_total,
            "total": summary.total,
        },
        "sensors": [_sensor_to_jsonable(evaluation) for evaluation in fleet.sensors],
    }


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint for bundle evaluation."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    try:
        result = run_evaluate_from_args(args)
    except (OSError, ValueError) as exc:
        print(f"[ERROR] evaluation failed: {exc}", file=sys.stderr)
        return 2

    if result.output_path is None:
        print(json.dumps(result.report, indent=2, sort_keys=True))
    else:
        print(f"report: {result.output_path}")
        counts = ", ".join(f"{status.value}={result.report['summary'][status.value]}" for status in SensorStatus)
        print(f"summary: {counts}")
    if args.fail_on_critical and result.has_critical:
        return 1
    return 0


def _sensor_to_jsonable(evaluation: SensorEvaluation) -> dict[str, Any]:
    return {
        "sensor_id": evaluation.sensor_id,
        "status": evaluation.status.value,
        "temperature_level": (
            evaluation.temperature_level.name.lower() if evaluation.temperature_level is not None else None
        ),
        "axes": {
            axis_eval.axis.value: {
                "level": axis_eval.level.name.lower() if axis_eval.level is not None else None,
                "has_data": axis_eval.stats.has_data,
                "accel_top_peak_g": round(axis_eval.stats.accel_top_peak, 6),
                "velocity_top_peak_mm_s": round(axis_eval.stats.velocity_top_peak, 6),
                "dominant_freq_hz": round(axis_eval.stats.dominant_freq, 6),
                "velocity_rms_mm_s": round(axis_eval.waveform.rms, 6),
                "velocity_peak_mm_s": round(axis_eval.waveform.peak, 6),
                "velocity_peak_to_peak_mm_s": round(axis_eval.waveform.peak_to_peak, 6),
                "thresholds": {
                    "min": axis_eval.thresholds.min,
                    "medium": axis_eval.thresholds.medium,
                    "max": axis_eval.thresholds.max,
                },
            }
            for axis_eval in evaluation.axes
        },
        "reasons": list(evaluation.reasons),
    }


def _load_json(path: Path) -> dict[str, Any]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise PayloadError(f"expected JSON object: {path}")
    return payload


if __name__ == "__main__":
    raise SystemExit(main())
