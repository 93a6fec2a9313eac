"""Engine settings with environment overrides."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from math import isfinite

from isovibe.transforms.frequency import DEFAULT_VELOCITY_LOW_CUT_HZ


ENV_PREFIX = "ISOVIBE_"


@dataclass(frozen=True, slots=True)
class EngineSettings:
    """Acquisition fallbacks and analysis knobs shared by the engine and CLI."""

    default_g_scale: float = 16.0
    default_fmax: float = 400.0
    default_lor: int = 6400
    peak_count: int = 5
    lost_grace_minutes: float = 5.0
    pad_to_pow2: bool = False
    velocity_low_cut_hz: float = DEFAULT_VELOCITY_LOW_CUT_HZ

    def __post_init__(self) -> None:
        if not isfinite(self.default_g_scale) or self.default_g_scale <= 0:
            raise ValueError("default_g_scale must be > 0")
        if not isfinite(self.default_fmax) or self.default_fmax <= 0:
            raise ValueError("default_fmax must be > 0")
        if self.default_lor < 2:
            raise ValueError("default_lor must be >= 2")
        if self.peak_count <= 0:
            raise ValueError("peak_count must be > 0")
        if self.lost_grace_minutes < 0:
            raise ValueError("lost_grace_minutes must be >= 0")
        if not isfinite(self.velocity_low_cut_hz) or self.velocity_low_cut_hz < 0:
            raise ValueError("velocity_low_cut_hz must be >= 0")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EngineSettings:
        """Build settings from `ISOVIBE_<FIELD>` variables, defaults otherwise."""
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        for entry in fields(cls):
            raw = env.get(f"{ENV_PREFIX}{entry.name.upper()}")
            if raw is None or not raw.strip():
                continue
            values[entry.name] = _coerce(raw.strip(), entry.type, name=entry.name)
        return cls(**values)  # type: ignore[arg-type]


def _coerce(raw: str, type_name: object, *, name: str) -> object:
    try:
        if type_name in ("bool", bool):
            lowered = raw.lower()
            if lowered in {"1", "true", "yes", "on"}:
                return True
            if lowered in {"0", "false", "no", "off"}:
                return False
            raise ValueError(raw)
        if type_name in ("int", int):
            return int(raw)
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name.upper()} has invalid value: {raw!r}") from exc
