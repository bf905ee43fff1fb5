from dataclasses import dataclass
from datetime import datetime


@dataclass
class TransportCall:
    method: str
    url: str
    body: str
    headers: dict
    timestamp: datetime
