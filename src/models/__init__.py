from .config import GatewayConfig
from .order import OrderRequest
from .invoice import InvoiceResult
from .callback import CallbackNotification
from .transport import TransportCall

__all__ = [
    "GatewayConfig",
    "OrderRequest",
    "InvoiceResult",
    "CallbackNotification", "TransportCall",
]
