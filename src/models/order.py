from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_CALLBACK_URL = "https://example.com/webhook"

REQUIRED_FIELDS = ("id", "amount_send", "currency_send")


@dataclass
class OrderRequest:
    id: object
    amount_send: object
    currency_send: str
    callback_url: str | None = None

    @classmethod
    def from_mapping(cls, order: Mapping) -> "OrderRequest":
        """Build an order from a plain dict using the exchanger's order keys."""
        missing = [f for f in REQUIRED_FIELDS if f not in order]
        if missing:
            raise ValueError(f"missing order fields: {missing}")
        return cls(
            id=order["id"],
            amount_send=order["amount_send"],
            currency_send=order["currency_send"],
            callback_url=order.get("callback_url"),
        )

    @property
    def resolved_callback_url(self) -> str:
        if self.callback_url is None:
            return DEFAULT_CALLBACK_URL
        return self.callback_url


def render_scalar(value) -> str:
    """Render an identifier or amount the way the upstream expects it.

    Integral floats lose their fractional part (``250.0`` -> ``"250"``) and
    booleans render as ``"1"``/``""``.
    """
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
