"""Cross-axis reduction and fleet-wide status tallies."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from isovibe.domain.models import Connectivity, OperationalMode, SensorStatus, StatusLevel


@dataclass(frozen=True, slots=True)
class FleetSummary:
    """Mutually exclusive per-status sensor counts."""

    normal: int = 0
    warning: int = 0
    concern: int = 0
    critical: int = 0
    standby: int = 0
    lost: int = 0

    @property
    def total(self) -> int:
        return self.connected_total + self.disconnected_total

    @property
    def connected_total(self) -> int:
        return self.normal + self.warning + self.concern + self.critical

    @property
    def disconnected_total(self) -> int:
        return self.standby + self.lost

    def count(self, status: SensorStatus) -> int:
        return int(getattr(self, status.value))

    def as_dict(self) -> dict[str, int]:
        """Counts keyed by status value in stable declaration order."""
        return {status.value: self.count(status) for status in SensorStatus}


def sensor_status(
    h: StatusLevel | None,
    v: StatusLevel | None,
    a: StatusLevel | None,
    connectivity: Connectivity = Connectivity.ONLINE,
    operational_mode: OperationalMode = OperationalMode.RUNNING,
) -> SensorStatus:
    """Offline wins, then standby, then the worst axis level.

    Axes without data (`None`) are skipped; a sensor with no axis data at
    all is reported as standby rather than normal.
    """
    if connectivity == Connectivity.OFFLINE:
        return SensorStatus.LOST
    if operational_mode == OperationalMode.STANDBY:
        return SensorStatus.STANDBY

    levels = [level for level in (h, v, a) if level is not None]
    if not levels:
        return SensorStatus.STANDBY
    return SensorStatus.from_level(max(levels))


def fleet_summary(statuses: Iterable[SensorStatus]) -> FleetSummary:
    """Count sensors per status in one pass; counts always sum to the input length."""
    counters: dict[SensorStatus, int] = {status: 0 for status in SensorStatus}
    for status in statuses:
        counters[SensorStatus(status)] += 1
    return FleetSummary(**{status.value: count for status, count in counters.items()})


def connectivity_from_last_seen(
    last_seen_ms: int,
    now_ms: int,
    *,
    interval_minutes: float,
    grace_minutes: float = 5.0,
) -> Connectivity:
    """Offline once no data arrived within the reporting interval plus grace."""
    if interval_minutes < 0:
        raise ValueError("interval_minutes must be >= 0")
    if grace_minutes < 0:
        raise ValueError("grace_minutes must be >= 0")
    timeout_ms = (interval_minutes + grace_minutes) * 60_000
    if now_ms - last_seen_ms > timeout_ms:
        return Connectivity.OFFLINE
    return Connectivity.ONLINE
