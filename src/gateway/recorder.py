import json
import threading
from datetime import datetime, timezone
from typing import Self

from src.models.transport import TransportCall


class RecordingTransport:
    """Thread-safe transport double that records calls and replays a canned response."""

    def __init__(self, response: str | dict = "", error: Exception | None = None):
        self._response = response
        self._error = error
        self._calls: list[TransportCall] = []
        self._lock = threading.Lock()

    def set_response(self, response: str | dict) -> Self:
        with self._lock:
            self._response = response
            self._error = None
        return self

    def set_error(self, error: Exception) -> Self:
        with self._lock:
            self._error = error
        return self

    def __call__(self, method: str, url: str, body: str, headers: dict) -> str:
        with self._lock:
            self._calls.append(TransportCall(
                method=method,
                url=url,
                body=body,
                headers=dict(headers),
                timestamp=datetime.now(timezone.utc),
            ))
            if self._error is not None:
                raise self._error
            if isinstance(self._response, dict):
                return json.dumps(self._response)
            return self._response

    def get_calls(self) -> list[TransportCall]:
        with self._lock:
            return list(self._calls)

    def last_call(self) -> TransportCall | None:
        with self._lock:
            return self._calls[-1] if self._calls else None

    def clear(self) -> None:
        with self._lock:
            self._calls.clear()
