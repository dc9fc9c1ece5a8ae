"""Volume metric handlers, producing one sample per configured volume."""

from __future__ import annotations

import logging
from typing import Callable

from ..errors import HandlerError
from ..units import to_unit
from .base import PERCENT, CollectContext, MetricSample, percentage
from .probe import VolumeUsage

logger = logging.getLogger(__name__)

ALL_VOLUMES = "all"


def resolve_volumes(ctx: CollectContext) -> list[str]:
    """Expand the configured volume list, replacing ``all`` with every mount."""
    volumes: list[str] = []
    for volume in ctx.config.volumes:
        expanded = ctx.probe.mountpoints() if volume == ALL_VOLUMES else [volume]
        for path in expanded:
            if path not in volumes:
                volumes.append(path)
    if not volumes:
        raise HandlerError("No volumes to report")
    return volumes


def _per_volume(
    ctx: CollectContext,
    name: str,
    compute: Callable[[VolumeUsage], tuple[float, str]],
) -> list[MetricSample]:
    """Run *compute* for each volume.

    A volume that cannot be read does not stop its siblings; once all volumes
    were tried, a :class:`HandlerError` carrying the good samples is raised.
    """
    samples: list[MetricSample] = []
    failures: list[str] = []
    for path in resolve_volumes(ctx):
        try:
            value, unit = compute(ctx.probe.volume(path))
        except HandlerError as exc:
            logger.warning("%s: skipping volume %s: %s", name, path, exc)
            failures.append(f"{path}: {exc}")
            continue
        samples.append(ctx.sample(name, value, unit, Volume=path))

    if failures:
        raise HandlerError(f"{name} failed for {len(failures)} volume(s): " + "; ".join(failures), samples)
    return samples


def vol_avail(ctx: CollectContext, name: str) -> list[MetricSample]:
    return _per_volume(ctx, name, lambda u: (percentage(u.free, u.total, f"size of {u.path}"), PERCENT))


def vol_free(ctx: CollectContext, name: str) -> list[MetricSample]:
    unit = ctx.volume_unit
    return _per_volume(ctx, name, lambda u: (to_unit(u.free, unit), unit.name))


def vol_total(ctx: CollectContext, name: str) -> list[MetricSample]:
    unit = ctx.volume_unit
    return _per_volume(ctx, name, lambda u: (to_unit(u.total, unit), unit.name))


def vol_used(ctx: CollectContext, name: str) -> list[MetricSample]:
    unit = ctx.volume_unit
    return _per_volume(ctx, name, lambda u: (to_unit(u.used, unit), unit.name))


def vol_util(ctx: CollectContext, name: str) -> list[MetricSample]:
    return _per_volume(ctx, name, lambda u: (percentage(u.used, u.total, f"size of {u.path}"), PERCENT))
