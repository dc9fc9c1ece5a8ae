"""Thin wrapper around psutil so metric handlers never touch the OS directly."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import psutil

from ..errors import HandlerError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MemoryUsage:
    total: int
    available: int


@dataclass(frozen=True)
class VolumeUsage:
    path: str
    total: int
    used: int
    free: int


class SystemProbe:
    """Reads raw OS counters through psutil.

    Every method raises :class:`HandlerError` instead of leaking psutil or
    ``OSError`` exceptions, so callers only deal with one failure type.
    """

    def memory(self) -> MemoryUsage:
        try:
            mem = psutil.virtual_memory()
        except (psutil.Error, OSError) as exc:
            raise HandlerError(f"Unable to read memory statistics: {exc}") from exc
        return MemoryUsage(total=mem.total, available=mem.available)

    def volume(self, path: str) -> VolumeUsage:
        try:
            usage = psutil.disk_usage(path)
        except (psutil.Error, OSError) as exc:
            raise HandlerError(f"Unable to read volume {path}: {exc}") from exc
        return VolumeUsage(path=path, total=usage.total, used=usage.used, free=usage.free)

    def mountpoints(self) -> list[str]:
        """Return the mount point of every mounted physical partition."""
        try:
            partitions = psutil.disk_partitions(all=False)
        except (psutil.Error, OSError) as exc:
            raise HandlerError(f"Unable to enumerate volumes: {exc}") from exc
        mounts: list[str] = []
        for part in partitions:
            if part.mountpoint not in mounts:
                mounts.append(part.mountpoint)
        logger.debug("Discovered volumes: %s", mounts)
        return mounts

    def uptime(self) -> float:
        try:
            boot = psutil.boot_time()
        except (psutil.Error, OSError) as exc:
            raise HandlerError(f"Unable to read boot time: {exc}") from exc
        return max(time.time() - boot, 0.0)

    def process_count(self) -> int:
        try:
            return len(psutil.pids())
        except (psutil.Error, OSError) as exc:
            raise HandlerError(f"Unable to list processes: {exc}") from exc
