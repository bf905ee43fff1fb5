from .crypto import sign_callback, sign_request, signatures_match
from .factories import CallbackFactory, InvoiceResponseFactory, OrderFactory

__all__ = [
    "sign_request", "sign_callback", "signatures_match",
    "OrderFactory", "CallbackFactory", "InvoiceResponseFactory",
]
