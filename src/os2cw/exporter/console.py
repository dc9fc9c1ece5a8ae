"""Dry-run exporter that prints metrics instead of sending them."""

from __future__ import annotations

import logging
from typing import Mapping

from rich.console import Console
from rich.text import Text

from .base import BaseExporter

logger = logging.getLogger(__name__)


class ConsoleExporter(BaseExporter):
    """Renders each metric on stdout. Never fails.

    Names and dimension values are printed verbatim, never parsed as markup.
    """

    def __init__(self, namespace: str, console: Console | None = None) -> None:
        self._namespace = namespace
        self._console = console or Console(highlight=False)
        logger.info("Dry run: metrics will be printed, not sent")

    def report(self, name: str, value: float, unit: str, dimensions: Mapping[str, str]) -> None:
        dims = ", ".join(f"{k}={v}" for k, v in dimensions.items())
        line = Text.assemble(
            (f"{self._namespace}/{name}", "bold"),
            f" {value:.2f} {unit} ",
            (f"({dims})", "dim"),
        )
        self._console.print(line)
