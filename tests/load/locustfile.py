# Locust load test for signed invoice creation.
#
# How to run:
#   locust -f tests/load/locustfile.py --headless -u 50 -r 10 --run-time 30s --host http://127.0.0.1:8080
#
# The test starts a MockPayPlayServer on port 8080 via on_test_start/on_test_stop
# events, so no external server is needed. Every request goes through
# PayPlayGateway, so each one is signed and authenticated by the simulator.

import logging
import threading

from locust import HttpUser, between, events, task

from src.gateway.adapter import PayPlayGateway
from src.gateway.errors import PayPlayError
from src.models.config import GatewayConfig
from src.upstream_simulator.server import MockPayPlayServer
from src.utils.factories import OrderFactory

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Shared state: tracking sent vs issued invoices
# ---------------------------------------------------------------------------
API_KEY = "load-test-key"
API_SECRET = "load-test-secret"

_stats_lock = threading.Lock()
_sent_count: int = 0
_success_count: int = 0
_failure_count: int = 0

_server: MockPayPlayServer | None = None

ASSETS = ["BTC", "ETH", "USDT", "LTC", "TRX"]


def _increment(counter: str) -> None:
    global _sent_count, _success_count, _failure_count
    with _stats_lock:
        if counter == "sent":
            _sent_count += 1
        elif counter == "success":
            _success_count += 1
        else:
            _failure_count += 1


# ---------------------------------------------------------------------------
# Locust lifecycle events
# ---------------------------------------------------------------------------
@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    """Start a MockPayPlayServer on port 8080 before the load test begins."""
    global _server, _sent_count, _success_count, _failure_count

    with _stats_lock:
        _sent_count = 0
        _success_count = 0
        _failure_count = 0

    _server = MockPayPlayServer(api_key=API_KEY, api_secret=API_SECRET, port=8080)
    _server.start()
    logger.info("MockPayPlayServer started on port 8080")


@events.test_stop.add_listener
def on_test_stop(environment, **kwargs):
    """Stop the MockPayPlayServer and report invoice stats."""
    global _server

    issued = 0

    if _server is not None:
        issued = len(_server.get_invoices())
        _server.stop()
        _server = None
        logger.info("MockPayPlayServer stopped")

    with _stats_lock:
        total_sent = _sent_count
        total_ok = _success_count
        total_fail = _failure_count

    logger.info(
        "Load test summary: sent=%d, ok=%d, failed=%d, invoices_issued=%d",
        total_sent,
        total_ok,
        total_fail,
        issued,
    )

    if total_sent > 0:
        success_rate = total_ok / total_sent * 100
        logger.info("Success rate: %.2f%% (target: 100%%)", success_rate)

        # Any rejection means a signature was computed incorrectly
        if total_fail > 0:
            environment.process_exit_code = 1
            logger.error("ASSERTION FAILED: %d invoice requests were rejected", total_fail)
        if issued < total_ok:
            environment.process_exit_code = 1
            logger.error(
                "ASSERTION FAILED: %d invoices missing (%d accepted, %d issued)",
                total_ok - issued,
                total_ok,
                issued,
            )


# ---------------------------------------------------------------------------
# Locust user
# ---------------------------------------------------------------------------
class InvoiceUser(HttpUser):
    """Simulates a merchant creating invoices through PayPlayGateway."""

    wait_time = between(0.01, 0.05)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._asset_index = 0
        self._gateway = PayPlayGateway(
            GatewayConfig(api_key=API_KEY, api_secret=API_SECRET, base_url=self.host),
            transport=self._send,
        )

    def _send(self, method: str, url: str, body: str, headers: dict) -> str:
        """Transport that routes the gateway's requests through the Locust client."""
        response = self.client.request(method, url, data=body or None, headers=headers, name="/v1/invoices")
        return response.text

    def _next_asset(self) -> str:
        asset = ASSETS[self._asset_index % len(ASSETS)]
        self._asset_index += 1
        return asset

    @task
    def create_invoice(self) -> None:
        """Create an invoice for a fresh order."""
        order = OrderFactory.create(currency_send=self._next_asset())

        _increment("sent")
        try:
            result = self._gateway.create_invoice(order)
        except PayPlayError as e:
            _increment("failure")
            logger.warning("Invoice for order %s failed: %s", order.id, e)
            return

        if result.redirect == "#":
            _increment("failure")
        else:
            _increment("success")
