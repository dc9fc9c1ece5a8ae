"""Exception hierarchy for os2cw."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .collector.base import MetricSample


class Os2cwError(Exception):
    """Base class for all os2cw errors."""


class ConfigurationError(Os2cwError):
    """The effective configuration cannot be used; the run aborts."""


class InvalidMetricError(Os2cwError):
    """A requested metric id is not in the registry."""

    def __init__(self, metric_id: str) -> None:
        super().__init__(f"Invalid metric {metric_id} provided.")
        self.metric_id = metric_id


class HandlerError(Os2cwError):
    """A metric handler could not produce (all of) its values.

    *samples* holds whatever the handler did collect before failing, so
    volume handlers can still report healthy volumes.
    """

    def __init__(self, message: str, samples: list[MetricSample] | None = None) -> None:
        super().__init__(message)
        self.samples = list(samples or [])


class TransportError(Os2cwError):
    """The reporting backend rejected or never received a value."""
