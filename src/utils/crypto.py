import hashlib
import hmac


def sign_request(secret: str, string_to_sign: str) -> str:
    """Generate the lowercase hex HMAC-SHA256 of an outbound string-to-sign."""
    return hmac.new(
        secret.encode("utf-8"),
        string_to_sign.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def sign_callback(secret: str, timestamp: str, payload: str) -> str:
    """Generate the HMAC-SHA256 signature of an inbound callback body."""
    return sign_request(secret, f"{timestamp}\n{payload}")


def signatures_match(expected: str, provided: str) -> bool:
    """Constant-time comparison of two signatures."""
    # compare_digest rejects non-ASCII str, so compare the raw bytes instead
    return hmac.compare_digest(expected.encode("utf-8"), provided.encode("utf-8"))
