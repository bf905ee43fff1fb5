import json
import time
import uuid
from decimal import Decimal

from src.models.order import OrderRequest
from src.models.callback import CallbackNotification
from src.utils.crypto import sign_callback


class OrderFactory:
    """Factory for creating OrderRequest instances with sensible defaults."""

    @staticmethod
    def create(**overrides) -> OrderRequest:
        defaults = {
            "id": uuid.uuid4().int % 1_000_000,
            "amount_send": Decimal("0.015"),
            "currency_send": "BTC",
            "callback_url": "https://merchant.example/payplay/callback",
        }
        defaults.update(overrides)
        return OrderRequest(**defaults)


class CallbackFactory:
    """Factory for building correctly signed PayPlay callback notifications."""

    @staticmethod
    def create_notification(
        secret: str,
        status: str = "CONFIRMED",
        timestamp: str | None = None,
        **payload_overrides,
    ) -> CallbackNotification:
        if timestamp is None:
            timestamp = str(int(time.time() * 1000))

        payload = {
            "invoice_id": f"inv_{uuid.uuid4().hex[:16]}",
            "external_id": str(uuid.uuid4().int % 1_000_000),
            "amount": "0.015",
            "asset": "BTC",
            "status": status,
        }
        payload.update(payload_overrides)
        body = json.dumps(payload, separators=(",", ":"))

        headers = {
            "Content-Type": "application/json",
            "X-PAYPLAY-TIMESTAMP": timestamp,
            "X-PAYPLAY-CB-SIGN": sign_callback(secret, timestamp, body),
        }
        return CallbackNotification(headers=headers, body=body, payload=payload)


class InvoiceResponseFactory:
    """Factory for upstream response bodies of the invoice endpoint."""

    @staticmethod
    def success(payment_url: str | None = "https://pay.payplay.io/i/inv_test", **data) -> dict:
        if payment_url is not None:
            data["payment_url"] = payment_url
        return {"status": "SUCCESS", "data": data}

    @staticmethod
    def failure(message: str = "invalid asset", status: str = "FAIL") -> dict:
        return {"status": status, "message": message}
