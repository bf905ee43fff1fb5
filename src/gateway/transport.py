import logging
from typing import Protocol

import requests

from src.gateway.errors import TransportError

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Executes one HTTP request and returns the raw response body."""

    def __call__(self, method: str, url: str, body: str, headers: dict) -> str:
        ...


class RequestsTransport:
    """Default transport built on ``requests``.

    The response body is returned whatever the HTTP status code is, since the
    upstream reports failures inside its JSON payload. Client-side failures
    (connection refused, timeouts, invalid URLs) raise ``TransportError``.
    """

    def __init__(self, timeout_seconds: float = 30):
        self.timeout_seconds = timeout_seconds

    def __call__(self, method: str, url: str, body: str, headers: dict) -> str:
        try:
            resp = requests.request(
                method,
                url,
                data=body or None,
                headers=headers,
                timeout=self.timeout_seconds,
            )
        except requests.exceptions.RequestException as e:
            logger.warning("HTTP %s %s failed: %s", method, url, e)
            raise TransportError(f"HTTP transport error: {e}") from e
        return resp.text
