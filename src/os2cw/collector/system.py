"""Host-wide handlers: uptime and process count."""

from __future__ import annotations

from .base import COUNT, SECONDS, CollectContext, MetricSample


def uptime(ctx: CollectContext, name: str) -> list[MetricSample]:
    return [ctx.sample(name, ctx.probe.uptime(), SECONDS)]


def procs(ctx: CollectContext, name: str) -> list[MetricSample]:
    return [ctx.sample(name, float(ctx.probe.process_count()), COUNT)]
