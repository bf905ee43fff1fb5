from dataclasses import dataclass, field


@dataclass
class CallbackNotification:
    """A signed PayPlay callback as it arrives at the merchant."""

    headers: dict
    body: str
    payload: dict = field(default_factory=dict)
