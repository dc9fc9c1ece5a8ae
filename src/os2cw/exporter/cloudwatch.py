"""CloudWatch exporter that publishes metrics with ``PutMetricData``."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..config import EffectiveConfig
from ..errors import ConfigurationError, TransportError
from .base import BaseExporter

logger = logging.getLogger(__name__)


class CloudWatchExporter(BaseExporter):
    """Sends each value to CloudWatch under the configured namespace.

    The client is fully configured at construction (region and, when an
    access key is configured, static credentials) and never changed after.
    Botocore's own retries are disabled: a failed send is reported once.
    """

    def __init__(self, config: EffectiveConfig, client: Any = None) -> None:
        self._namespace = config.namespace
        if client is None:
            client = self._build_client(config)
        self._client = client

    @staticmethod
    def _build_client(config: EffectiveConfig) -> Any:
        session_kwargs: dict[str, Any] = {}
        if config.region:
            session_kwargs["region_name"] = config.region
            logger.debug("Session region set to %s", config.region)
        credentials = config.credentials
        logger.debug("Static access key configured: %s", credentials is not None)
        if credentials is not None:
            session_kwargs["aws_access_key_id"], session_kwargs["aws_secret_access_key"] = credentials

        try:
            session = boto3.Session(**session_kwargs)
            return session.client("cloudwatch", config=Config(retries={"max_attempts": 1, "mode": "standard"}))
        except BotoCoreError as exc:
            raise ConfigurationError(f"Unable to create CloudWatch client: {exc}") from exc

    def report(self, name: str, value: float, unit: str, dimensions: Mapping[str, str]) -> None:
        datum = {
            "MetricName": name,
            "Dimensions": [{"Name": k, "Value": v} for k, v in dimensions.items()],
            "Value": float(value),
            "Unit": unit,
        }
        try:
            self._client.put_metric_data(Namespace=self._namespace, MetricData=[datum])
        except ClientError as exc:
            error = exc.response.get("Error", {})
            raise TransportError(
                f"PutMetricData {self._namespace}/{name} failed: {error.get('Code')} - {error.get('Message')}"
            ) from exc
        except BotoCoreError as exc:
            raise TransportError(f"PutMetricData {self._namespace}/{name} failed: {exc}") from exc
        logger.debug("Sent %s/%s = %s %s", self._namespace, name, value, unit)
