from dataclasses import dataclass

MISSING_PAYMENT_URL = "#"


@dataclass
class InvoiceResult:
    redirect: str

    def as_dict(self) -> dict:
        return {"redirect": self.redirect}
