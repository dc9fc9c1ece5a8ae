"""Memory metric handlers.

"Free" memory is what psutil reports as *available*; "used" is the rest of
the total, so the free and used percentages always add up to 100.
"""

from __future__ import annotations

from ..units import to_unit
from .base import PERCENT, CollectContext, MetricSample, percentage


def mem_avail(ctx: CollectContext, name: str) -> list[MetricSample]:
    mem = ctx.probe.memory()
    return [ctx.sample(name, percentage(mem.available, mem.total, "memory"), PERCENT)]


def mem_free(ctx: CollectContext, name: str) -> list[MetricSample]:
    mem = ctx.probe.memory()
    unit = ctx.memory_unit
    return [ctx.sample(name, to_unit(mem.available, unit), unit.name)]


def mem_total(ctx: CollectContext, name: str) -> list[MetricSample]:
    mem = ctx.probe.memory()
    unit = ctx.memory_unit
    return [ctx.sample(name, to_unit(mem.total, unit), unit.name)]


def mem_used(ctx: CollectContext, name: str) -> list[MetricSample]:
    mem = ctx.probe.memory()
    unit = ctx.memory_unit
    return [ctx.sample(name, to_unit(mem.total - mem.available, unit), unit.name)]


def mem_util(ctx: CollectContext, name: str) -> list[MetricSample]:
    mem = ctx.probe.memory()
    used = mem.total - mem.available
    return [ctx.sample(name, percentage(used, mem.total, "memory"), PERCENT)]
