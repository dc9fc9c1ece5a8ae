"""Catalog of the metrics os2cw knows how to collect."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from . import memory, system, volume
from .base import CollectContext, Handler, MetricSample


@dataclass(frozen=True)
class MetricSpec:
    """A metric id bound to its CloudWatch name and collection handler."""

    id: str
    name: str
    handler: Handler

    def collect(self, ctx: CollectContext) -> list[MetricSample]:
        return self.handler(ctx, self.name)


class MetricRegistry:
    """Read-only mapping from metric id to :class:`MetricSpec`."""

    def __init__(self, specs: Iterable[MetricSpec]) -> None:
        table: dict[str, MetricSpec] = {}
        for spec in specs:
            if spec.id in table:
                raise ValueError(f"Metric '{spec.id}' is already registered.")
            table[spec.id] = spec
        self._specs: Mapping[str, MetricSpec] = MappingProxyType(table)

    def lookup(self, metric_id: str) -> MetricSpec | None:
        return self._specs.get(metric_id)

    def all_ids(self) -> list[str]:
        """Metric ids in lexicographic order."""
        return sorted(self._specs)

    def __contains__(self, metric_id: object) -> bool:
        return metric_id in self._specs

    def __len__(self) -> int:
        return len(self._specs)


def build_registry() -> MetricRegistry:
    return MetricRegistry([
        MetricSpec("mem-avail", "MemoryFreePercentage", memory.mem_avail),
        MetricSpec("mem-free", "MemoryFree", memory.mem_free),
        MetricSpec("mem-total", "MemoryTotal", memory.mem_total),
        MetricSpec("mem-used", "MemoryUsed", memory.mem_used),
        MetricSpec("mem-util", "MemoryUsedPercentage", memory.mem_util),
        MetricSpec("vol-avail", "VolumeFreePercentage", volume.vol_avail),
        MetricSpec("vol-free", "VolumeFree", volume.vol_free),
        MetricSpec("vol-total", "VolumeTotal", volume.vol_total),
        MetricSpec("vol-used", "VolumeUsed", volume.vol_used),
        MetricSpec("vol-util", "VolumeUsedPercentage", volume.vol_util),
        MetricSpec("uptime", "Uptime", system.uptime),
        MetricSpec("procs", "Processes", system.procs),
    ])
