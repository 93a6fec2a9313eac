"""Dashboard payload normalization into strict engine value types.

Loosely typed sensor records and threshold settings coming from the
dashboard backend are parsed here once. The engine itself only accepts
the resulting dataclasses.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from math import inf, isfinite

import numpy as np

from isovibe.config import EngineSettings
from isovibe.domain.models import Axis, AxisConfig, Connectivity, OperationalMode, ThresholdSet
from isovibe.engine import SensorReading
from isovibe.status.aggregate import connectivity_from_last_seen
from isovibe.thresholds.contracts import (
    Boundary,
    PartialThresholds,
    SensorThresholdContext,
    SystemDefaults,
    ThresholdOverride,
)


logger = logging.getLogger(__name__)


class PayloadError(ValueError):
    """Raised when an upstream payload cannot be parsed into engine types."""


@dataclass(frozen=True, slots=True)
class ThresholdBundle:
    """Organization threshold settings: overrides plus effective defaults."""

    overrides: tuple[ThresholdOverride, ...] = ()
    defaults: SystemDefaults = SystemDefaults()


_AXIS_WARNING_KEYS: dict[Axis, tuple[str, ...]] = {
    Axis.H: ("h_warning", "h_axis_warning", "x_axis_warning"),
    Axis.V: ("v_warning", "v_axis_warning", "y_axis_warning"),
    Axis.A: ("a_warning", "a_axis_warning", "z_axis_warning"),
}


def parse_axis_config(
    payload: Mapping[str, object],
    *,
    settings: EngineSettings | None = None,
) -> AxisConfig:
    """Read `g_scale`, `fmax`, `lor`; missing or non-positive values use settings defaults."""
    active = settings if settings is not None else EngineSettings()
    g_scale = _optional_positive(_pick(payload, "g_scale", "gScale"), field_name="g_scale")
    fmax = _optional_positive(_pick(payload, "fmax", "fMax"), field_name="fmax")
    lor = _optional_positive(_pick(payload, "lor", "LOR"), field_name="lor")
    return AxisConfig(
        g_scale=g_scale if g_scale is not None else active.default_g_scale,
        fmax=fmax if fmax is not None else active.default_fmax,
        lor=int(lor) if lor is not None else active.default_lor,
    )


def parse_sensor_context(payload: Mapping[str, object]) -> SensorThresholdContext:
    """Machine identity and per-sensor threshold fields of one sensor record."""
    return SensorThresholdContext(
        machine_id=_text_or_none(_pick(payload, "machine_id", "machineId")),
        machine_name=_text_or_none(_pick(payload, "machine_name", "machineName", "machine_no")),
        machine_class=_text_or_none(_pick(payload, "machine_class", "machineClass")),
        velocity=PartialThresholds(
            min=_optional_float(_pick(payload, "threshold_min", "thresholdMin"), field_name="threshold_min"),
            medium=_optional_float(
                _pick(payload, "threshold_medium", "thresholdMedium"), field_name="threshold_medium"
            ),
            max=_optional_float(_pick(payload, "threshold_max", "thresholdMax"), field_name="threshold_max"),
        ),
        temperature=PartialThresholds(
            min=_optional_float(_pick(payload, "temperature_min"), field_name="temperature_min"),
            medium=_optional_float(_pick(payload, "temperature_medium"), field_name="temperature_medium"),
            max=_optional_float(_pick(payload, "temperature_max"), field_name="temperature_max"),
        ),
    )


def parse_threshold_override(payload: Mapping[str, object]) -> ThresholdOverride:
    """Normalize one `machine_overrides` entry.

    `*_warning` maps to the min boundary and `*_critical` to the max
    boundary when explicit min/max fields are absent.
    """
    axis_velocity: dict[Axis, PartialThresholds] = {}
    for axis, keys in _AXIS_WARNING_KEYS.items():
        warning = _optional_float(_pick(payload, *keys), field_name=keys[0])
        if warning is not None:
            axis_velocity[axis] = PartialThresholds(min=warning)

    try:
        return ThresholdOverride(
            override_id=_text_or_none(_pick(payload, "id", "override_id")),
            machine_id=_text_or_none(_pick(payload, "machine_id", "machineId")),
            machine_name=_text_or_none(_pick(payload, "machine_name", "machineName")),
            machine_class=_text_or_none(_pick(payload, "machine_class", "machineClass")),
            velocity=_partial_with_prefixes(payload, ("vibration", "velocity")),
            temperature=_partial_with_prefixes(payload, ("temperature",)),
            axis_velocity=axis_velocity,
        )
    except ValueError as exc:
        raise PayloadError(str(exc)) from exc


def parse_threshold_bundle(payload: Mapping[str, object]) -> ThresholdBundle:
    """Accept `{"settings": {...}}` or the settings object itself."""
    settings_obj = payload.get("settings") if "settings" in payload else payload
    if not isinstance(settings_obj, Mapping):
        raise PayloadError("threshold settings must be an object")

    raw_overrides = settings_obj.get("machine_overrides")
    overrides: list[ThresholdOverride] = []
    if raw_overrides is not None:
        if not isinstance(raw_overrides, Sequence) or isinstance(raw_overrides, (str, bytes)):
            raise PayloadError("machine_overrides must be a list")
        for idx, entry in enumerate(raw_overrides):
            if entry is None:
                continue
            if not isinstance(entry, Mapping):
                raise PayloadError(f"machine_overrides[{idx}] must be an object")
            overrides.append(parse_threshold_override(entry))

    base = SystemDefaults()
    defaults = SystemDefaults(
        velocity=_merge_defaults(settings_obj.get("vibration"), base.velocity, field_name="vibration"),
        temperature=_merge_defaults(
            settings_obj.get("temperature"),
            base.temperature,
            field_name="temperature",
            positive_only=False,
        ),
    )
    return ThresholdBundle(overrides=tuple(overrides), defaults=defaults)


def parse_sensor_reading(
    payload: Mapping[str, object],
    *,
    settings: EngineSettings | None = None,
    now_ms: int | None = None,
) -> SensorReading:
    """Build a SensorReading from one dashboard sensor record.

    Without explicit flags a sensor with `last_data` is online and running,
    and one without is in standby. When `now_ms`, `last_seen_ms` and
    `time_interval` are all present, connectivity follows the reporting
    timeout instead.
    """
    active = settings if settings is not None else EngineSettings()
    sensor_id = _require_text(_pick(payload, "id", "sensor_id", "name"), field_name="id")

    last_data_raw = payload.get("last_data")
    if last_data_raw is not None and not isinstance(last_data_raw, Mapping):
        raise PayloadError("last_data must be an object")
    last_data: Mapping[str, object] | None = last_data_raw

    buffers: dict[Axis, np.ndarray] = {}
    temperature: float | None = None
    if last_data is not None:
        for axis in Axis:
            raw = last_data.get(axis.value)
            if raw is not None:
                buffers[axis] = _parse_buffer(raw, field_name=f"last_data.{axis.value}")
        temperature = _optional_float(_pick(last_data, "temperature", "temp"), field_name="temperature")

    connectivity = _parse_connectivity(payload, settings=active, now_ms=now_ms)
    operational_mode = _parse_operational_mode(payload, has_data=last_data is not None)

    try:
        return SensorReading(
            sensor_id=sensor_id,
            context=parse_sensor_context(payload),
            config=parse_axis_config(payload, settings=active),
            buffers=buffers,
            connectivity=connectivity,
            operational_mode=operational_mode,
            temperature_c=temperature,
        )
    except ValueError as exc:
        raise PayloadError(f"sensor {sensor_id}: {exc}") from exc


def _parse_connectivity(
    payload: Mapping[str, object],
    *,
    settings: EngineSettings,
    now_ms: int | None,
) -> Connectivity:
    explicit = _text_or_none(payload.get("connectivity"))
    if explicit is not None:
        try:
            return Connectivity(explicit.lower())
        except ValueError as exc:
            raise PayloadError(f"unsupported connectivity: {explicit}") from exc

    last_seen = _pick(payload, "last_seen_ms", "lastSeenMs")
    interval = _pick(payload, "time_interval", "timeInterval")
    if now_ms is not None and last_seen is not None and interval is not None:
        return connectivity_from_last_seen(
            int(_require_float(last_seen, field_name="last_seen_ms")),
            now_ms,
            interval_minutes=_require_float(interval, field_name="time_interval"),
            grace_minutes=settings.lost_grace_minutes,
        )
    return Connectivity.ONLINE


def _parse_operational_mode(payload: Mapping[str, object], *, has_data: bool) -> OperationalMode:
    explicit = _text_or_none(_pick(payload, "operational_mode", "operationalStatus"))
    if explicit is None:
        return OperationalMode.RUNNING if has_data else OperationalMode.STANDBY
    lowered = explicit.lower()
    if lowered == "standby":
        return OperationalMode.STANDBY
    if lowered in {"running", "alarm"}:
        return OperationalMode.RUNNING
    raise PayloadError(f"unsupported operational mode: {explicit}")


def _parse_buffer(raw: object, *, field_name: str) -> np.ndarray:
    if not isinstance(raw, Sequence) or isinstance(raw, (str, bytes)):
        raise PayloadError(f"{field_name} must be a list of numbers")
    values: list[float] = []
    for idx, item in enumerate(raw):
        if isinstance(item, bool) or not isinstance(item, (int, float)):
            raise PayloadError(f"{field_name}[{idx}] must be numeric")
        values.append(float(item))
    return np.asarray(values, dtype=np.float64)


def _partial_with_prefixes(payload: Mapping[str, object], prefixes: tuple[str, ...]) -> PartialThresholds:
    def first(*suffixes: str) -> float | None:
        keys = [f"{prefix}_{suffix}" for suffix in suffixes for prefix in prefixes]
        return _optional_float(_pick(payload, *keys), field_name=keys[0])

    return PartialThresholds(
        min=first("min", "warning"),
        medium=first("medium", "concern"),
        max=first("max", "critical"),
    )


def _merge_defaults(
    raw: object | None,
    base: ThresholdSet,
    *,
    field_name: str,
    positive_only: bool = True,
) -> ThresholdSet:
    if raw is None:
        return base
    if not isinstance(raw, Mapping):
        raise PayloadError(f"{field_name} must be an object")
    partial = PartialThresholds(
        min=_optional_float(_pick(raw, "min", "warning"), field_name=f"{field_name}.min"),
        medium=_optional_float(_pick(raw, "medium", "concern"), field_name=f"{field_name}.medium"),
        max=_optional_float(_pick(raw, "max", "critical"), field_name=f"{field_name}.max"),
    )
    explicit = [partial.get(boundary, positive_only=positive_only) for boundary in Boundary]
    merged: list[float] = []
    for idx, (value, fallback) in enumerate(zip(explicit, base.as_tuple())):
        if value is None:
            # missing boundaries stay between the explicit neighbours
            lower = max((v for v in explicit[:idx] if v is not None), default=-inf)
            upper = min((v for v in explicit[idx + 1 :] if v is not None), default=inf)
            value = min(max(fallback, lower), upper)
        merged.append(value)
    try:
        return ThresholdSet(min=merged[0], medium=merged[1], max=merged[2])
    except ValueError as exc:
        raise PayloadError(f"{field_name} defaults: {exc}") from exc


def _pick(payload: Mapping[str, object], *keys: str) -> object | None:
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return None


def _text_or_none(raw: object | None) -> str | None:
    if raw is None:
        return None
    if isinstance(raw, str):
        value = raw.strip()
        return value or None
    return str(raw).strip() or None


def _require_text(raw: object | None, *, field_name: str) -> str:
    value = _text_or_none(raw)
    if value is None:
        raise PayloadError(f"{field_name} is required")
    return value


def _require_float(raw: object | None, *, field_name: str) -> float:
    if raw is None:
        raise PayloadError(f"{field_name} is required")
    if isinstance(raw, bool):
        raise PayloadError(f"{field_name} must be numeric")
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            raise PayloadError(f"{field_name} is required")
        try:
            value = float(text)
        except ValueError as exc:
            raise PayloadError(f"{field_name} must be numeric") from exc
    else:
        raise PayloadError(f"{field_name} must be numeric")

    if not isfinite(value):
        raise PayloadError(f"{field_name} must be finite")
    return value


def _optional_float(raw: object | None, *, field_name: str) -> float | None:
    if raw is None:
        return None
    if isinstance(raw, str) and not raw.strip():
        return None
    return _require_float(raw, field_name=field_name)


def _optional_positive(raw: object | None, *, field_name: str) -> float | None:
    value = _optional_float(raw, field_name=field_name)
    if value is None or value <= 0:
        if value is not None:
            logger.debug("%s=%s is not positive; using default", field_name, value)
        return None
    return value
