"""Shared types for metric handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from ..config import EffectiveConfig
from ..errors import HandlerError
from ..units import MetricUnit, lookup_unit
from .probe import SystemProbe

PERCENT = "Percent"
SECONDS = "Seconds"
COUNT = "Count"


@dataclass
class MetricSample:
    """A single value ready to be reported."""

    name: str
    value: float
    unit: str
    dimensions: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CollectContext:
    """Everything a handler may read: the effective configuration and the OS."""

    config: EffectiveConfig
    probe: SystemProbe

    @property
    def memory_unit(self) -> MetricUnit:
        return _require_unit(self.config.memory_unit)

    @property
    def volume_unit(self) -> MetricUnit:
        return _require_unit(self.config.volume_unit)

    def sample(self, name: str, value: float, unit: str, **dimensions: str) -> MetricSample:
        """Build a sample tagged with the system id plus any extra *dimensions*."""
        dims = {"InstanceId": self.config.system_id}
        dims.update(dimensions)
        return MetricSample(name=name, value=value, unit=unit, dimensions=dims)


Handler = Callable[[CollectContext, str], "list[MetricSample]"]


def _require_unit(token: str) -> MetricUnit:
    unit = lookup_unit(token)
    if unit is None:
        raise HandlerError(f"Invalid unit: {token}")
    return unit


def percentage(part: float, total: float, what: str) -> float:
    """Return ``part / total * 100``; a zero *total* is an error, not a NaN."""
    if total <= 0:
        raise HandlerError(f"Total {what} reported as {total}; cannot compute percentage")
    return part / total * 100.0
