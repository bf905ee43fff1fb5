from .adapter import PayPlayGateway
from .errors import (
    InvalidResponseError,
    MalformedPayloadError,
    PayPlayError,
    SignatureMismatchError,
    TransportError,
    UpstreamError,
)
from .recorder import RecordingTransport
from .transport import RequestsTransport, Transport

__all__ = [
    "PayPlayGateway",
    "PayPlayError",
    "InvalidResponseError",
    "UpstreamError",
    "SignatureMismatchError",
    "MalformedPayloadError",
    "TransportError",
    "Transport",
    "RequestsTransport",
    "RecordingTransport",
]
