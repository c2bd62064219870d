"""Loki push API client."""

import json
import logging

import httpx

from action_logger.config import LokiConfig
from action_logger.errors import PushError

logger = logging.getLogger(__name__)

SUCCESS_CODES = (200, 204)


def build_push_payload(labels: dict[str, str], timestamp_ns: int, line: str) -> dict:
    """Build a single-stream, single-value Loki push body.

    Format: {"streams": [{"stream": labels, "values": [[ts_ns, line]]}]}
    """
    return {
        "streams": [
            {
                "stream": dict(labels),
                "values": [[str(timestamp_ns), line]],
            }
        ]
    }


def encode_payload(payload: dict) -> bytes:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


class LokiClient:
    """Pushes log lines to Loki over HTTP.

    Disabled clients (enabled=False or no push URL) accept every push as a
    no-op and never open a connection.
    """

    def __init__(self, config: LokiConfig, transport: httpx.BaseTransport | None = None):
        self._config = config
        self._transport = transport
        self._client: httpx.Client | None = None

    @property
    def config(self) -> LokiConfig:
        return self._config

    @property
    def enabled(self) -> bool:
        return self._config.enabled and bool(self._config.push_url)

    @property
    def job(self) -> str:
        return self._config.job

    def _http(self) -> httpx.Client:
        if self._client is None:
            auth = None
            if self._config.username and self._config.password:
                auth = httpx.BasicAuth(self._config.username, self._config.password)
            self._client = httpx.Client(
                timeout=self._config.timeout,
                auth=auth,
                transport=self._transport,
            )
        return self._client

    def push(self, labels: dict[str, str], timestamp_ns: int, line: str):
        """Send one line to Loki. Raises PushError on transport failure or a non-2xx reply."""
        if not self.enabled:
            return

        body = encode_payload(build_push_payload(labels, timestamp_ns, line))
        try:
            response = self._http().post(
                self._config.push_url,
                content=body,
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as exc:
            raise PushError(f"failed to send request to Loki: {exc}") from exc

        if response.status_code not in SUCCESS_CODES:
            raise PushError(
                f"unexpected response from Loki: {response.status_code}",
                status_code=response.status_code,
            )
        logger.debug("Pushed %d bytes to Loki (status %d)", len(body), response.status_code)

    def close(self):
        """Close the underlying HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None
