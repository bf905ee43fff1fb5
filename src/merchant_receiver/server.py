import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

from src.gateway.adapter import PayPlayGateway
from src.gateway.errors import MalformedPayloadError, SignatureMismatchError


class _CallbackHandler(BaseHTTPRequestHandler):
    """HTTP request handler for receiving PayPlay callbacks."""

    def do_POST(self):
        content_length = int(self.headers.get("Content-Length", 0))
        raw = self.rfile.read(content_length)

        server_config = self.server.config  # type: ignore[attr-defined]

        try:
            payload = server_config["gateway"].verify_callback(self.headers, raw)
        except SignatureMismatchError:
            self._send_json(401, {"error": "invalid signature"})
            return
        except MalformedPayloadError:
            self._send_json(400, {"error": "invalid JSON"})
            return

        with server_config["lock"]:
            server_config["received_notifications"].append({
                "payload": payload,
                "headers": dict(self.headers),
            })

        self._send_json(200, {"status": "ok"})

    def _send_json(self, code: int, payload: dict) -> None:
        self.send_response(code)
        self.send_header("Content-Type", "application/json")
        self.end_headers()
        self.wfile.write(json.dumps(payload).encode())

    def log_message(self, format, *args):
        """Suppress default request logging."""
        pass


class CallbackReceiverServer:
    """Merchant endpoint that authenticates PayPlay callbacks with a gateway.

    Bad signatures are answered with 401 and malformed bodies with 400;
    accepted notifications are recorded and answered with 200.
    """

    def __init__(self, gateway: PayPlayGateway, host: str = "127.0.0.1", port: int = 0):
        self._host = host
        self._port = port
        self._config = {
            "gateway": gateway,
            "received_notifications": [],
            "lock": threading.Lock(),
        }
        self._server: ThreadingHTTPServer | None = None
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        self._server = ThreadingHTTPServer((self._host, self._port), _CallbackHandler)
        self._server.config = self._config  # type: ignore[attr-defined]
        self._port = self._server.server_address[1]
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        if self._server:
            self._server.shutdown()
            self._server.server_close()
            self._server = None
        if self._thread:
            self._thread.join(timeout=5)
            self._thread = None

    @property
    def url(self) -> str:
        return f"http://{self._host}:{self._port}/payplay/callback"

    @property
    def port(self) -> int:
        return self._port

    def get_received_notifications(self) -> list[dict]:
        with self._config["lock"]:
            return list(self._config["received_notifications"])

    def get_processed_count(self) -> int:
        with self._config["lock"]:
            return len(self._config["received_notifications"])

    def clear(self) -> None:
        with self._config["lock"]:
            self._config["received_notifications"].clear()
