"""Runs one batch of requested metrics through their handlers and the exporter."""

from __future__ import annotations

import enum
import logging
import socket
from dataclasses import dataclass, field
from typing import Callable, Sequence

from .collector.base import CollectContext
from .collector.probe import SystemProbe
from .collector.registry import MetricRegistry
from .config import EffectiveConfig, resolve_system_id
from .errors import ConfigurationError, HandlerError, InvalidMetricError, TransportError
from .exporter.base import BaseExporter
from .metadata import InstanceMetadata
from .units import lookup_unit

logger = logging.getLogger(__name__)


class MetricOutcome(enum.Enum):
    SENT = "sent"
    INVALID = "invalid"
    FAILED = "failed"


@dataclass
class MetricRecord:
    metric_id: str
    outcome: MetricOutcome
    message: str = ""


@dataclass
class RunResult:
    """Per-metric outcomes of one invocation."""

    records: list[MetricRecord] = field(default_factory=list)
    samples_sent: int = 0

    def add(self, metric_id: str, outcome: MetricOutcome, message: str = "") -> None:
        self.records.append(MetricRecord(metric_id, outcome, message))

    def outcome_of(self, metric_id: str) -> MetricOutcome | None:
        for record in self.records:
            if record.metric_id == metric_id:
                return record.outcome
        return None

    @property
    def ok(self) -> bool:
        return bool(self.records) and all(r.outcome is MetricOutcome.SENT for r in self.records)

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


def build_exporter(config: EffectiveConfig) -> BaseExporter:
    """Pick the sink for this run: console output on dry runs, CloudWatch otherwise."""
    if config.dry_run:
        from .exporter.console import ConsoleExporter

        return ConsoleExporter(config.namespace)

    from .exporter.cloudwatch import CloudWatchExporter

    return CloudWatchExporter(config)


class Dispatcher:
    """Validates a run, then executes every distinct requested metric once.

    Fatal problems (no system id, no metrics, unknown unit) raise
    :class:`ConfigurationError` before any handler runs. Everything after
    that is per metric: an unknown id, a failing handler or a failed send is
    recorded in the :class:`RunResult` and the batch carries on.
    """

    def __init__(
        self,
        registry: MetricRegistry,
        probe: SystemProbe | None = None,
        metadata: InstanceMetadata | None = None,
        hostname: Callable[[], str] = socket.gethostname,
        exporter_factory: Callable[[EffectiveConfig], BaseExporter] = build_exporter,
    ) -> None:
        self._registry = registry
        self._probe = probe or SystemProbe()
        self._metadata = metadata
        self._hostname = hostname
        self._exporter_factory = exporter_factory

    def run(self, config: EffectiveConfig, args: Sequence[str] = ()) -> RunResult:
        system_id = resolve_system_id(config.system_id, self._metadata, self._hostname)
        if not system_id:
            raise ConfigurationError("Unable to generate system id.")
        config = config.with_system_id(system_id)
        logger.debug("Using system id %s", system_id)

        exporter = self._exporter_factory(config)

        metrics = list(args) or list(config.metrics)
        if not metrics:
            raise ConfigurationError("No metrics specified.")

        if lookup_unit(config.volume_unit) is None:
            raise ConfigurationError(f"Invalid volume unit: {config.volume_unit}")
        if lookup_unit(config.memory_unit) is None:
            raise ConfigurationError(f"Invalid memory unit: {config.memory_unit}")

        ctx = CollectContext(config=config, probe=self._probe)
        result = RunResult()
        for metric_id in dict.fromkeys(metrics):
            self._run_metric(metric_id, ctx, exporter, result)

        failed = [r.metric_id for r in result.records if r.outcome is not MetricOutcome.SENT]
        if failed:
            logger.error("%d of %d metric(s) failed: %s", len(failed), len(result.records), ", ".join(failed))
        else:
            logger.info("Reported %d value(s) for %d metric(s)", result.samples_sent, len(result.records))
        return result

    def _run_metric(
        self,
        metric_id: str,
        ctx: CollectContext,
        exporter: BaseExporter,
        result: RunResult,
    ) -> None:
        spec = self._registry.lookup(metric_id)
        if spec is None:
            err = InvalidMetricError(metric_id)
            logger.error("%s", err)
            result.add(metric_id, MetricOutcome.INVALID, str(err))
            return

        errors: list[str] = []
        try:
            samples = spec.collect(ctx)
        except HandlerError as exc:
            logger.error("An error occurred during metric run %s: %s", metric_id, exc)
            samples = exc.samples
            errors.append(str(exc))
        except Exception as exc:
            logger.exception("Metric handler %s failed", metric_id)
            samples = []
            errors.append(f"{type(exc).__name__}: {exc}")

        for sample in samples:
            try:
                exporter.report(sample.name, sample.value, sample.unit, sample.dimensions)
            except TransportError as exc:
                logger.error("Failed to report %s: %s", metric_id, exc)
                errors.append(str(exc))
                continue
            result.samples_sent += 1

        if errors:
            result.add(metric_id, MetricOutcome.FAILED, "; ".join(errors))
        else:
            result.add(metric_id, MetricOutcome.SENT)
