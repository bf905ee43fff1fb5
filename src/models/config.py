import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_API_KEY = "demo_key"
DEFAULT_API_SECRET = "demo_secret"
DEFAULT_API_URL = "https://api.payplay.io"


@dataclass(frozen=True)
class GatewayConfig:
    """Credentials and endpoint of a PayPlay merchant account.

    The defaults are demo values for non-production use. Trailing slashes
    are stripped from ``base_url`` so request paths can be appended as-is.
    """

    api_key: str = DEFAULT_API_KEY
    api_secret: str = DEFAULT_API_SECRET
    base_url: str = DEFAULT_API_URL

    def __post_init__(self):
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_mapping(cls, cfg: Mapping) -> "GatewayConfig":
        """Build a config from ``api_key``/``api_secret``/``api_url`` keys."""
        return cls(
            api_key=_value_or(cfg.get("api_key"), DEFAULT_API_KEY),
            api_secret=_value_or(cfg.get("api_secret"), DEFAULT_API_SECRET),
            base_url=_value_or(cfg.get("api_url"), DEFAULT_API_URL),
        )

    @classmethod
    def from_env(cls, environ: Mapping | None = None) -> "GatewayConfig":
        """Build a config from ``PAYPLAY_API_KEY``, ``PAYPLAY_API_SECRET`` and ``PAYPLAY_API_URL``."""
        environ = os.environ if environ is None else environ
        return cls.from_mapping({
            "api_key": environ.get("PAYPLAY_API_KEY"),
            "api_secret": environ.get("PAYPLAY_API_SECRET"),
            "api_url": environ.get("PAYPLAY_API_URL"),
        })


def _value_or(value, default: str) -> str:
    return default if value is None else value
