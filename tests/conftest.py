"""Shared fakes for the os2cw tests."""

from __future__ import annotations

import pytest

from os2cw.collector.probe import MemoryUsage, SystemProbe, VolumeUsage
from os2cw.config import EffectiveConfig
from os2cw.errors import HandlerError, TransportError
from os2cw.exporter.base import BaseExporter

GB = 1024 ** 3


class FakeProbe(SystemProbe):
    """SystemProbe returning canned values instead of reading the OS."""

    def __init__(self, total=8 * GB, available=2 * GB, volumes=None, mounts=None, uptime=3600.0, procs=42):
        self.total = total
        self.available = available
        self.volumes = volumes if volumes is not None else {
            "/": VolumeUsage("/", total=100 * GB, used=25 * GB, free=75 * GB),
        }
        self.mounts = mounts if mounts is not None else list(self.volumes)
        self._uptime = uptime
        self._procs = procs

    def memory(self):
        return MemoryUsage(total=self.total, available=self.available)

    def volume(self, path):
        usage = self.volumes.get(path)
        if usage is None:
            raise HandlerError(f"Unable to read volume {path}: no such mount")
        return usage

    def mountpoints(self):
        return list(self.mounts)

    def uptime(self):
        return self._uptime

    def process_count(self):
        return self._procs


class RecordingExporter(BaseExporter):
    """Collects reported values; names in *fail_on* raise TransportError."""

    def __init__(self, fail_on=()):
        self.reports = []
        self.fail_on = set(fail_on)

    def report(self, name, value, unit, dimensions):
        if name in self.fail_on:
            raise TransportError(f"rejected {name}")
        self.reports.append((name, value, unit, dict(dimensions)))


class FakeMetadata:
    def __init__(self, instance_id=None, region=None):
        self._instance_id = instance_id
        self._region = region
        self.calls = []

    def instance_id(self):
        self.calls.append("instance-id")
        return self._instance_id

    def region(self):
        self.calls.append("region")
        return self._region


@pytest.fixture
def probe():
    return FakeProbe()


@pytest.fixture
def exporter():
    return RecordingExporter()


@pytest.fixture
def config():
    return EffectiveConfig(system_id="i-0123456789", region="us-east-1", dry_run=True)
