"""Configuration loading and resolution for os2cw.

Values are layered, lowest precedence first: compiled defaults, the YAML
config file, ``OS2CW_*`` environment variables, command-line flags and
finally positional metric arguments (which replace the metric list).
"""

from __future__ import annotations

import logging
import os
import socket
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Iterable, Sequence

import yaml

from .errors import ConfigurationError

if TYPE_CHECKING:
    from .metadata import InstanceMetadata

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "os2cw.yaml"


@dataclass
class Settings:
    """Durable settings: defaults merged with the config file and environment."""

    memory_unit: str = "kb"
    volume_unit: str = "mb"
    namespace: str = "System"
    system_id: str = ""
    volumes: list[str] = field(default_factory=lambda: ["all"])
    dry_run: bool = False
    metrics: list[str] = field(default_factory=list)
    region: str = ""
    access_key: str = ""
    secret_key: str = ""


@dataclass(frozen=True)
class EffectiveConfig:
    """The final, read-only parameters of one invocation."""

    system_id: str = ""
    region: str = ""
    access_key: str = ""
    secret_key: str = ""
    memory_unit: str = "kb"
    volume_unit: str = "mb"
    volumes: tuple[str, ...] = ("all",)
    namespace: str = "System"
    dry_run: bool = False
    metrics: tuple[str, ...] = ()

    @property
    def credentials(self) -> tuple[str, str] | None:
        """Static ``(access_key, secret_key)`` pair, if an access key is set."""
        if not self.access_key:
            return None
        return self.access_key, self.secret_key

    def with_system_id(self, system_id: str) -> EffectiveConfig:
        return replace(self, system_id=system_id)


# config file key -> Settings attribute
_FILE_KEYS = {
    "memoryUnit": "memory_unit",
    "volumeUnit": "volume_unit",
    "namespace": "namespace",
    "systemID": "system_id",
    "volumes": "volumes",
    "dryrun": "dry_run",
    "metrics": "metrics",
    "region": "region",
    "accessKey": "access_key",
    "secretKey": "secret_key",
}

_ENV_KEYS = {
    "OS2CW_MEMORY_UNIT": "memory_unit",
    "OS2CW_VOLUME_UNIT": "volume_unit",
    "OS2CW_NAMESPACE": "namespace",
    "OS2CW_SYSTEM_ID": "system_id",
    "OS2CW_VOLUMES": "volumes",
    "OS2CW_DRYRUN": "dry_run",
    "OS2CW_METRICS": "metrics",
    "OS2CW_REGION": "region",
    "OS2CW_ACCESS_KEY": "access_key",
    "OS2CW_SECRET_KEY": "secret_key",
}

_LIST_FIELDS = {"volumes", "metrics"}


def split_list(values: Iterable[str] | str | None) -> list[str]:
    """Flatten repeated and comma separated values: ``["/,/home", "C:"]`` -> 3 items."""
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    items: list[str] = []
    for value in values:
        items.extend(part.strip() for part in str(value).split(",") if part.strip())
    return items


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _coerce(attr: str, value: Any) -> Any:
    if attr in _LIST_FIELDS:
        return split_list(value)
    if attr == "dry_run":
        return _parse_bool(value)
    return "" if value is None else str(value)


def _apply_file(settings: Settings, data: dict[str, Any]) -> None:
    for key, value in data.items():
        attr = _FILE_KEYS.get(key)
        if attr is None:
            logger.warning("Ignoring unknown config key %r", key)
            continue
        setattr(settings, attr, _coerce(attr, value))


def _apply_env_overrides(settings: Settings) -> None:
    for env_key, attr in _ENV_KEYS.items():
        value = os.environ.get(env_key)
        if value is not None:
            setattr(settings, attr, _coerce(attr, value))


def load_config(path: str | Path | None = None) -> Settings:
    """Load durable settings from a YAML file with environment overrides.

    Looks for ``os2cw.yaml`` in the current directory if *path* is None. A
    missing file is not an error; a malformed one is.
    """
    settings = Settings()
    path = Path(DEFAULT_CONFIG_FILE) if path is None else Path(path)

    if path.exists():
        try:
            with open(path, encoding="utf-8") as fh:
                loaded = yaml.safe_load(fh)
        except OSError as exc:
            raise ConfigurationError(f"Unable to read config file {path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in config file {path}: {exc}") from exc
        if isinstance(loaded, dict):
            _apply_file(settings, loaded)
            logger.debug("Loaded configuration from %s", path)
        elif loaded is not None:
            raise ConfigurationError(f"Config file {path} must contain a mapping")

    _apply_env_overrides(settings)
    return settings


def resolve_config(
    settings: Settings,
    *,
    memory_unit: str | None = None,
    volume_unit: str | None = None,
    namespace: str | None = None,
    system_id: str | None = None,
    volumes: Sequence[str] | None = None,
    dry_run: bool | None = None,
    args: Sequence[str] = (),
    metadata: InstanceMetadata | None = None,
) -> EffectiveConfig:
    """Merge CLI flags and positional *args* over *settings*.

    A flag left as ``None`` (or an empty volume list) keeps the durable value.
    Positional metric arguments replace the configured list wholesale. When no
    region is configured it is seeded from instance *metadata*.
    """
    region = settings.region
    if not region and metadata is not None:
        region = metadata.region() or ""
        logger.debug("Region seeded from instance metadata: %r", region)

    flag_volumes = split_list(volumes)
    return EffectiveConfig(
        system_id=system_id or settings.system_id,
        region=region,
        access_key=settings.access_key,
        secret_key=settings.secret_key,
        memory_unit=memory_unit or settings.memory_unit,
        volume_unit=volume_unit or settings.volume_unit,
        volumes=tuple(flag_volumes or settings.volumes),
        namespace=namespace or settings.namespace,
        dry_run=settings.dry_run if dry_run is None else dry_run,
        metrics=tuple(args) if args else tuple(settings.metrics),
    )


def resolve_system_id(
    explicit: str,
    metadata: InstanceMetadata | None,
    hostname: Callable[[], str] = socket.gethostname,
) -> str:
    """Return *explicit*, else the EC2 instance id, else the hostname, else ``""``."""
    if explicit:
        return explicit
    if metadata is not None:
        instance_id = metadata.instance_id()
        if instance_id:
            return instance_id
    try:
        return hostname() or ""
    except OSError as exc:
        logger.debug("Hostname lookup failed: %s", exc)
        return ""
