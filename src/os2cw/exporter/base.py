"""Base interface for metric exporters."""

from __future__ import annotations

import abc
from typing import Mapping


class BaseExporter(abc.ABC):
    """Abstract sink that receives one computed metric value at a time."""

    @abc.abstractmethod
    def report(self, name: str, value: float, unit: str, dimensions: Mapping[str, str]) -> None:
        """Send a single value. Raises :class:`~os2cw.errors.TransportError` on failure."""
