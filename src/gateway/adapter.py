import json
import logging
import time
from collections.abc import Mapping

from src.gateway.errors import (
    InvalidResponseError,
    MalformedPayloadError,
    SignatureMismatchError,
    UpstreamError,
)
from src.gateway.transport import RequestsTransport, Transport
from src.models.config import GatewayConfig
from src.models.invoice import MISSING_PAYMENT_URL, InvoiceResult
from src.models.order import OrderRequest, render_scalar
from src.utils import crypto

logger = logging.getLogger(__name__)

INVOICES_PATH = "/v1/invoices"

KEY_HEADER = "X-PAYPLAY-KEY"
TIMESTAMP_HEADER = "X-PAYPLAY-TIMESTAMP"
SIGN_HEADER = "X-PAYPLAY-SIGN"
CALLBACK_SIGN_HEADER = "X-PAYPLAY-CB-SIGN"

SUCCESS_STATUS = "SUCCESS"


class PayPlayGateway:
    """Merchant-side client for the PayPlay invoice API.

    Outbound requests are signed with HMAC-SHA256 over
    ``"{timestamp}\\n{method}\\n{path}\\n{body}"`` and inbound callbacks are
    authenticated over ``"{timestamp}\\n{body}"``, both keyed by the API secret.
    The transport is injectable; it defaults to ``RequestsTransport``.
    """

    def __init__(
        self,
        config: GatewayConfig | None = None,
        transport: Transport | None = None,
    ):
        self.config = config if config is not None else GatewayConfig()
        self.transport = transport if transport is not None else RequestsTransport()

    def create_invoice(self, order: OrderRequest | Mapping) -> InvoiceResult:
        """Create an invoice for ``order`` and return where to send the payer."""
        if isinstance(order, Mapping):
            order = OrderRequest.from_mapping(order)

        body = {
            "amount": render_scalar(order.amount_send),
            "asset": order.currency_send,
            "external_id": render_scalar(order.id),
            "callback_url": order.resolved_callback_url,
        }
        data = self.signed_request("POST", INVOICES_PATH, body)

        payment_url = data.get("payment_url") if isinstance(data, dict) else None
        if payment_url is None:
            payment_url = MISSING_PAYMENT_URL
        logger.info(
            "Created PayPlay invoice for order %s (payment_url %s)",
            body["external_id"],
            "missing" if payment_url == MISSING_PAYMENT_URL else "received",
        )
        return InvoiceResult(redirect=payment_url)

    def verify_callback(self, headers: Mapping, body: str | bytes) -> dict:
        """Authenticate and decode a callback.

        ``body`` may be the raw request bytes; they are decoded as UTF-8.

        Raises:
            SignatureMismatchError: the ``X-PAYPLAY-CB-SIGN`` header does not
                match the signature recomputed from the timestamp and body.
            MalformedPayloadError: the body is authentic but not a JSON object,
                or raw bytes that are not UTF-8.

        The decoded object is returned verbatim; interpreting its status is
        left to the caller.
        """
        if isinstance(body, (bytes, bytearray)):
            try:
                body = bytes(body).decode("utf-8")
            except UnicodeDecodeError:
                logger.warning("Rejected PayPlay callback with non UTF-8 body")
                raise MalformedPayloadError("Callback body is not UTF-8") from None

        timestamp = headers.get(TIMESTAMP_HEADER) or ""
        provided = headers.get(CALLBACK_SIGN_HEADER) or ""

        expected = crypto.sign_callback(self.config.api_secret, timestamp, body)
        if not crypto.signatures_match(expected, provided):
            logger.warning("Rejected PayPlay callback with bad signature (timestamp=%r)", timestamp)
            raise SignatureMismatchError()

        payload = _decode_object(body)
        if payload is None:
            logger.warning("Rejected PayPlay callback with non-object JSON body")
            raise MalformedPayloadError()
        return payload

    def signed_request(self, method: str, path: str, body: dict | None = None):
        """Send a signed request to ``path`` and return the response ``data``.

        Returns the ``data`` member of the response object when present,
        otherwise the whole object. A missing ``status`` counts as success.
        """
        timestamp = str(int(time.time() * 1000))
        json_body = json.dumps(body, separators=(",", ":")) if body else ""
        string_to_sign = f"{timestamp}\n{method}\n{path}\n{json_body}"
        signature = crypto.sign_request(self.config.api_secret, string_to_sign)

        headers = {
            "Content-Type": "application/json",
            KEY_HEADER: self.config.api_key,
            TIMESTAMP_HEADER: timestamp,
            SIGN_HEADER: signature,
        }
        logger.debug("Signed PayPlay request %s %s at %s", method, path, timestamp)
        raw = self.transport(method, self.config.base_url + path, json_body, headers)

        data = _decode_object(raw)
        if data is None:
            logger.warning("PayPlay %s %s returned invalid JSON", method, path)
            raise InvalidResponseError(raw)

        status = data.get("status")
        if status is None:
            status = SUCCESS_STATUS
        if status != SUCCESS_STATUS:
            logger.warning("PayPlay %s %s rejected with status %r", method, path, status)
            raise UpstreamError(raw)

        if data.get("data") is not None:
            return data["data"]
        return data

    @staticmethod
    def sign_request(secret: str, string_to_sign: str) -> str:
        return crypto.sign_request(secret, string_to_sign)

    @staticmethod
    def sign_callback(secret: str, timestamp: str, payload: str) -> str:
        return crypto.sign_callback(secret, timestamp, payload)


def _decode_object(raw) -> dict | None:
    """Decode ``raw`` as JSON, returning None unless it is an object."""
    try:
        decoded = json.loads(raw)
    except (TypeError, ValueError, RecursionError):
        return None
    if not isinstance(decoded, dict):
        return None
    return decoded
