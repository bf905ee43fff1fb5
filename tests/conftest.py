import pytest

from src.gateway.adapter import PayPlayGateway
from src.gateway.recorder import RecordingTransport
from src.gateway.transport import RequestsTransport
from src.merchant_receiver.server import CallbackReceiverServer
from src.models.config import GatewayConfig
from src.upstream_simulator.server import MockPayPlayServer
from src.utils.factories import CallbackFactory, InvoiceResponseFactory, OrderFactory


API_KEY = "test-api-key"
API_SECRET = "test-secret-key-for-hmac"


@pytest.fixture
def api_secret():
    return API_SECRET


@pytest.fixture
def config():
    return GatewayConfig(api_key=API_KEY, api_secret=API_SECRET, base_url="https://mock")


@pytest.fixture
def transport():
    return RecordingTransport(InvoiceResponseFactory.success())


@pytest.fixture
def gateway(config, transport):
    return PayPlayGateway(config=config, transport=transport)


@pytest.fixture
def upstream_server():
    server = MockPayPlayServer(api_key=API_KEY, api_secret=API_SECRET)
    server.start()
    yield server
    server.stop()


@pytest.fixture
def live_gateway(upstream_server):
    """Gateway talking HTTP to the local PayPlay simulator."""
    return PayPlayGateway(
        config=GatewayConfig(api_key=API_KEY, api_secret=API_SECRET, base_url=upstream_server.url),
        transport=RequestsTransport(timeout_seconds=5),
    )


@pytest.fixture
def callback_receiver(live_gateway):
    server = CallbackReceiverServer(gateway=live_gateway)
    server.start()
    yield server
    server.stop()


@pytest.fixture
def order_factory():
    return OrderFactory


@pytest.fixture
def callback_factory():
    return CallbackFactory
