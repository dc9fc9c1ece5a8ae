"""Tests for the metric handlers and the registry."""

import pytest

from conftest import GB, FakeProbe
from os2cw.collector.base import CollectContext, percentage
from os2cw.collector.probe import SystemProbe, VolumeUsage
from os2cw.collector.registry import MetricRegistry, MetricSpec, build_registry
from os2cw.collector.volume import resolve_volumes
from os2cw.config import EffectiveConfig
from os2cw.errors import HandlerError


def _collect(metric_id, probe, **config):
    config.setdefault("system_id", "host-1")
    ctx = CollectContext(config=EffectiveConfig(**config), probe=probe)
    return build_registry().lookup(metric_id).collect(ctx)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

def test_registry_ids_sorted():
    registry = build_registry()
    assert registry.all_ids() == [
        "mem-avail", "mem-free", "mem-total", "mem-used", "mem-util",
        "procs", "uptime",
        "vol-avail", "vol-free", "vol-total", "vol-used", "vol-util",
    ]
    assert len(registry) == 12


def test_registry_lookup():
    registry = build_registry()
    assert registry.lookup("mem-avail").name == "MemoryFreePercentage"
    assert registry.lookup("procs").name == "Processes"
    assert registry.lookup("cpu") is None
    assert "uptime" in registry
    assert "cpu" not in registry


def test_registry_rejects_duplicates():
    spec = MetricSpec("x", "X", lambda ctx, name: [])
    with pytest.raises(ValueError):
        MetricRegistry([spec, spec])


# ---------------------------------------------------------------------------
# Memory
# ---------------------------------------------------------------------------

def test_memory_values_in_configured_unit():
    probe = FakeProbe(total=8 * GB, available=2 * GB)
    [free] = _collect("mem-free", probe, memory_unit="gb")
    [total] = _collect("mem-total", probe, memory_unit="mb")
    [used] = _collect("mem-used", probe, memory_unit="gb")
    assert (free.name, free.value, free.unit) == ("MemoryFree", 2.0, "Gigabytes")
    assert (total.value, total.unit) == (8 * 1024.0, "Megabytes")
    assert used.value == 6.0
    assert free.dimensions == {"InstanceId": "host-1"}


def test_memory_percentages():
    probe = FakeProbe(total=8 * GB, available=2 * GB)
    [avail] = _collect("mem-avail", probe)
    [util] = _collect("mem-util", probe)
    assert avail.value == pytest.approx(25.0)
    assert util.value == pytest.approx(75.0)
    assert avail.unit == util.unit == "Percent"


def test_mem_util_zero_total_is_error():
    probe = FakeProbe(total=0, available=0)
    with pytest.raises(HandlerError):
        _collect("mem-util", probe)
    with pytest.raises(HandlerError):
        _collect("mem-avail", probe)


def test_percentage_guard():
    assert percentage(1, 4, "x") == 25.0
    with pytest.raises(HandlerError):
        percentage(1, 0, "x")


# ---------------------------------------------------------------------------
# Volumes
# ---------------------------------------------------------------------------

def _two_volume_probe():
    return FakeProbe(volumes={
        "/": VolumeUsage("/", total=100 * GB, used=40 * GB, free=60 * GB),
        "/home": VolumeUsage("/home", total=200 * GB, used=50 * GB, free=150 * GB),
    })


def test_volume_all_enumerates_mounts():
    samples = _collect("vol-free", _two_volume_probe(), volume_unit="gb", volumes=("all",))
    assert [(s.dimensions["Volume"], s.value) for s in samples] == [("/", 60.0), ("/home", 150.0)]
    assert all(s.unit == "Gigabytes" for s in samples)
    assert all(s.dimensions["InstanceId"] == "host-1" for s in samples)


def test_volume_explicit_list():
    samples = _collect("vol-util", _two_volume_probe(), volumes=("/home",))
    assert len(samples) == 1
    assert samples[0].value == pytest.approx(25.0)
    assert samples[0].dimensions["Volume"] == "/home"


def test_volume_total_used_avail():
    probe = _two_volume_probe()
    [total] = _collect("vol-total", probe, volume_unit="gb", volumes=("/",))
    [used] = _collect("vol-used", probe, volume_unit="gb", volumes=("/",))
    [avail] = _collect("vol-avail", probe, volumes=("/",))
    assert total.value == 100.0
    assert used.value == 40.0
    assert avail.value == pytest.approx(60.0)


def test_unreadable_volume_does_not_stop_siblings():
    probe = _two_volume_probe()
    probe.mounts = ["/", "/mnt/broken", "/home"]
    with pytest.raises(HandlerError) as excinfo:
        _collect("vol-used", probe, volume_unit="gb", volumes=("all",))
    partial = excinfo.value.samples
    assert [s.dimensions["Volume"] for s in partial] == ["/", "/home"]
    assert "/mnt/broken" in str(excinfo.value)


def test_zero_size_volume_percentage_fails():
    probe = FakeProbe(volumes={"/proc": VolumeUsage("/proc", total=0, used=0, free=0)})
    with pytest.raises(HandlerError):
        _collect("vol-util", probe, volumes=("/proc",))


def test_resolve_volumes_dedupes():
    probe = _two_volume_probe()
    ctx = CollectContext(config=EffectiveConfig(volumes=("/", "all")), probe=probe)
    assert resolve_volumes(ctx) == ["/", "/home"]


def test_resolve_volumes_empty_is_error():
    ctx = CollectContext(config=EffectiveConfig(volumes=()), probe=FakeProbe())
    with pytest.raises(HandlerError):
        resolve_volumes(ctx)


# ---------------------------------------------------------------------------
# System
# ---------------------------------------------------------------------------

def test_uptime_and_procs():
    probe = FakeProbe(uptime=120.5, procs=17)
    [up] = _collect("uptime", probe)
    [procs] = _collect("procs", probe)
    assert (up.name, up.value, up.unit) == ("Uptime", 120.5, "Seconds")
    assert (procs.name, procs.value, procs.unit) == ("Processes", 17.0, "Count")


# ---------------------------------------------------------------------------
# SystemProbe against the real OS
# ---------------------------------------------------------------------------

def test_system_probe_reads_host():
    probe = SystemProbe()
    mem = probe.memory()
    assert mem.total > 0
    assert 0 <= mem.available <= mem.total
    assert probe.uptime() > 0
    assert probe.process_count() > 0
    mounts = probe.mountpoints()
    assert isinstance(mounts, list)


def test_system_probe_missing_volume():
    with pytest.raises(HandlerError):
        SystemProbe().volume("/__nonexistent_volume_xyz__")
