"""EC2 instance metadata lookups (IMDSv2)."""

from __future__ import annotations

import logging

import requests

logger = logging.getLogger(__name__)

IMDS_ENDPOINT = "http://169.254.169.254"
TOKEN_TTL_SECONDS = 21600


class InstanceMetadata:
    """Reads the instance id and region from the EC2 metadata service.

    IMDSv2 is tried first; if no token can be obtained (other than a 403),
    this and later lookups use tokenless IMDSv1 requests.

    Off EC2 the service is unreachable; every lookup then returns ``None``
    after *timeout* seconds instead of raising.
    """

    def __init__(
        self,
        endpoint: str = IMDS_ENDPOINT,
        timeout: float = 1.0,
        session: requests.Session | None = None,
    ) -> None:
        self._endpoint = endpoint.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._token: str | None = None
        self._tokenless = False

    def _fetch_token(self) -> str | None:
        """Return an IMDSv2 session token, or ``None`` to fall back to IMDSv1.

        A 403 means the metadata service refuses this caller, so the error is
        re-raised instead of retrying without a token.
        """
        if self._token is not None:
            return self._token
        if self._tokenless:
            return None
        try:
            resp = self._session.put(
                f"{self._endpoint}/latest/api/token",
                headers={"X-aws-ec2-metadata-token-ttl-seconds": str(TOKEN_TTL_SECONDS)},
                timeout=self._timeout,
            )
            resp.raise_for_status()
        except requests.exceptions.HTTPError as exc:
            if exc.response is not None and exc.response.status_code == 403:
                raise
            logger.debug("IMDSv2 token unavailable (%s); using IMDSv1", exc)
            self._tokenless = True
            return None
        except requests.exceptions.RequestException as exc:
            logger.debug("IMDSv2 token unavailable (%s); using IMDSv1", exc)
            self._tokenless = True
            return None
        self._token = resp.text
        return self._token

    def _get(self, path: str) -> str | None:
        try:
            token = self._fetch_token()
            resp = self._session.get(
                f"{self._endpoint}/latest/meta-data/{path}",
                headers={"X-aws-ec2-metadata-token": token} if token else {},
                timeout=self._timeout,
            )
            resp.raise_for_status()
        except requests.exceptions.RequestException as exc:
            logger.debug("Instance metadata %s unavailable: %s", path, exc)
            return None
        return resp.text.strip() or None

    def instance_id(self) -> str | None:
        return self._get("instance-id")

    def region(self) -> str | None:
        return self._get("placement/region")
