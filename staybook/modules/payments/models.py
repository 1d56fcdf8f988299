from pydantic import BaseModel, ConfigDict
from typing import Optional
from enum import Enum


class PaymentStatus(str, Enum):
    paid = "paid"
    unpaid = "unpaid"
    no_payment_required = "no_payment_required"
    expired = "expired"

class CheckoutSession(BaseModel):
    """A checkout session as last reported by the gateway.

    Snapshots of this are stored on the user and inside orders; none of them
    are authoritative for payment status, only a fresh gateway read is.
    """
    model_config = ConfigDict(extra="ignore", use_enum_values=True, validate_default=True)
    id: str
    payment_status: PaymentStatus = PaymentStatus.unpaid
    amount_total: int  # minor currency unit
    application_fee_amount: int = 0
    currency: str
    destination: Optional[str] = None  # payout account receiving the transfer
    listing_id: Optional[str] = None
    url: Optional[str] = None  # hosted checkout page

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.paid
