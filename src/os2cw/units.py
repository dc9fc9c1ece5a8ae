"""Storage units used to scale byte counts before they are reported."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class MetricUnit:
    """A size unit: CLI token, CloudWatch unit name and bytes per unit."""

    token: str
    name: str
    multiplier: int


STORAGE_UNITS: Mapping[str, MetricUnit] = MappingProxyType({
    unit.token: unit
    for unit in (
        MetricUnit("b", "Bytes", 1),
        MetricUnit("kb", "Kilobytes", 1024),
        MetricUnit("mb", "Megabytes", 1024 ** 2),
        MetricUnit("gb", "Gigabytes", 1024 ** 3),
        MetricUnit("tb", "Terabytes", 1024 ** 4),
    )
})


def lookup_unit(token: str) -> MetricUnit | None:
    """Return the unit for *token*, or ``None`` if it is not supported."""
    return STORAGE_UNITS.get(token)


def to_unit(num_bytes: float, unit: MetricUnit) -> float:
    return num_bytes / unit.multiplier
