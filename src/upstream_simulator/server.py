import json
import logging
import threading
import time
import uuid
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Self

import requests

from src.utils.crypto import sign_callback, sign_request, signatures_match

logger = logging.getLogger(__name__)

INVOICES_PATH = "/v1/invoices"


class _PayPlayHandler(BaseHTTPRequestHandler):
    """HTTP request handler imitating the PayPlay invoice API."""

    def do_POST(self):
        content_length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(content_length).decode("utf-8")

        server_config = self.server.config  # type: ignore[attr-defined]

        if server_config["response_delay"] > 0:
            time.sleep(server_config["response_delay"])

        if self.path != INVOICES_PATH:
            self._send_json(404, {"status": "FAIL", "message": "unknown endpoint"})
            return

        # Authentication
        if self.headers.get("X-PAYPLAY-KEY", "") != server_config["api_key"]:
            self._send_json(401, {"status": "FAIL", "message": "unknown api key"})
            return
        timestamp = self.headers.get("X-PAYPLAY-TIMESTAMP", "")
        expected = sign_request(
            server_config["api_secret"],
            f"{timestamp}\n{self.command}\n{self.path}\n{body}",
        )
        if not signatures_match(expected, self.headers.get("X-PAYPLAY-SIGN", "")):
            self._send_json(401, {"status": "FAIL", "message": "bad signature"})
            return

        with server_config["lock"]:
            server_config["received_requests"].append({
                "method": self.command,
                "path": self.path,
                "body": body,
                "headers": dict(self.headers),
            })
            override = server_config["response_override"]

        code = server_config["response_code"]
        if override is not None:
            self._send_raw(code, override if isinstance(override, str) else json.dumps(override))
            return

        try:
            order = json.loads(body)
        except (json.JSONDecodeError, ValueError):
            self._send_json(400, {"status": "FAIL", "message": "invalid JSON"})
            return
        if not isinstance(order, dict):
            self._send_json(400, {"status": "FAIL", "message": "invoice body must be a JSON object"})
            return

        invoice_id = f"inv_{uuid.uuid4().hex[:16]}"
        invoice = {
            "invoice_id": invoice_id,
            "external_id": order.get("external_id"),
            "amount": order.get("amount"),
            "asset": order.get("asset"),
            "callback_url": order.get("callback_url"),
        }
        with server_config["lock"]:
            server_config["invoices"][invoice_id] = invoice

        payment_url = f"{server_config['pay_base_url']}/{invoice_id}"
        self._send_json(code, {
            "status": "SUCCESS",
            "data": {"invoice_id": invoice_id, "payment_url": payment_url},
        })

    def _send_json(self, code: int, payload: dict) -> None:
        self._send_raw(code, json.dumps(payload))

    def _send_raw(self, code: int, body: str) -> None:
        self.send_response(code)
        self.send_header("Content-Type", "application/json")
        self.end_headers()
        self.wfile.write(body.encode("utf-8"))

    def log_message(self, format, *args):
        """Suppress default request logging."""
        pass


class MockPayPlayServer:
    """Local HTTP server that plays the PayPlay side of the integration.

    Invoice requests are authenticated exactly like the real API: the
    ``X-PAYPLAY-KEY`` header must match and ``X-PAYPLAY-SIGN`` must be the
    HMAC of ``"{timestamp}\\n{method}\\n{path}\\n{body}"``. Issued invoices can
    later be confirmed with ``notify()``, which posts a signed callback to the
    invoice's ``callback_url``.
    """

    def __init__(
        self,
        api_key: str = "demo_key",
        api_secret: str = "demo_secret",
        host: str = "127.0.0.1",
        port: int = 0,
    ):
        self._host = host
        self._port = port
        self._config = {
            "api_key": api_key,
            "api_secret": api_secret,
            "response_code": 200,
            "response_delay": 0,
            "response_override": None,
            "pay_base_url": "",
            "received_requests": [],
            "invoices": {},
            "lock": threading.Lock(),
        }
        self._server: ThreadingHTTPServer | None = None
        self._thread: threading.Thread | None = None

    def set_response_code(self, code: int) -> Self:
        self._config["response_code"] = code
        return self

    def set_response_delay(self, seconds: float) -> Self:
        self._config["response_delay"] = seconds
        return self

    def set_response(self, payload: dict | str | None) -> Self:
        """Answer authenticated invoice requests with ``payload`` instead of a new invoice."""
        with self._config["lock"]:
            self._config["response_override"] = payload
        return self

    def start(self) -> None:
        self._server = ThreadingHTTPServer((self._host, self._port), _PayPlayHandler)
        self._server.config = self._config  # type: ignore[attr-defined]
        self._port = self._server.server_address[1]
        self._config["pay_base_url"] = f"{self.url}/pay"
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()
        logger.info("MockPayPlayServer listening on %s", self.url)

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
        return f"http://{self._host}:{self._port}"

    @property
    def port(self) -> int:
        return self._port

    def get_received_requests(self) -> list[dict]:
        with self._config["lock"]:
            return list(self._config["received_requests"])

    def get_invoices(self) -> dict[str, dict]:
        with self._config["lock"]:
            return dict(self._config["invoices"])

    def find_invoice(self, external_id: str) -> dict | None:
        with self._config["lock"]:
            for invoice in self._config["invoices"].values():
                if invoice["external_id"] == external_id:
                    return dict(invoice)
        return None

    def notify(
        self,
        external_id: str,
        status: str = "CONFIRMED",
        timeout_seconds: float = 5,
        **extra,
    ) -> requests.Response:
        """POST a signed status callback for the invoice issued to ``external_id``."""
        invoice = self.find_invoice(external_id)
        if invoice is None:
            raise ValueError(f"No invoice issued for order {external_id}")

        payload = {
            "invoice_id": invoice["invoice_id"],
            "external_id": invoice["external_id"],
            "amount": invoice["amount"],
            "asset": invoice["asset"],
            "status": status,
        }
        payload.update(extra)
        body = json.dumps(payload, separators=(",", ":"))
        timestamp = str(int(time.time() * 1000))

        return requests.post(
            invoice["callback_url"],
            data=body,
            headers={
                "Content-Type": "application/json",
                "X-PAYPLAY-TIMESTAMP": timestamp,
                "X-PAYPLAY-CB-SIGN": sign_callback(self._config["api_secret"], timestamp, body),
            },
            timeout=timeout_seconds,
        )

    def clear(self) -> None:
        with self._config["lock"]:
            self._config["received_requests"].clear()
            self._config["invoices"].clear()
            self._config["response_override"] = None
