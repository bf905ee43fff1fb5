class PayPlayError(RuntimeError):
    """Base class for every failure raised by the PayPlay adapter."""


class InvalidResponseError(PayPlayError):
    """The upstream answered with something that is not a JSON object."""

    def __init__(self, raw_body: str):
        super().__init__(f"Invalid JSON from PayPlay: {raw_body}")
        self.raw_body = raw_body


class UpstreamError(PayPlayError):
    """The upstream answered with a status other than SUCCESS."""

    def __init__(self, raw_body: str):
        super().__init__(f"PayPlay error payload: {raw_body}")
        self.raw_body = raw_body


class SignatureMismatchError(PayPlayError):
    """An inbound callback carried a signature that does not match its body."""

    def __init__(self, message: str = "Bad signature"):
        super().__init__(message)


class MalformedPayloadError(PayPlayError):
    """An authenticated callback body is not a JSON object."""

    def __init__(self, message: str = "Invalid JSON"):
        super().__init__(message)


class TransportError(PayPlayError):
    """The HTTP client failed before a response body was received."""
