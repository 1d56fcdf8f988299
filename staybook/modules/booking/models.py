from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime, timezone
import uuid
from staybook.modules.payments.models import CheckoutSession


class PendingSession(BaseModel):
    """The one checkout a user has in flight, kept on the user document."""
    model_config = ConfigDict(extra="ignore")
    session: CheckoutSession
    listing_id: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class Order(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    listing_id: str
    session: CheckoutSession  # as re-fetched from the gateway when confirmed
    ordered_by: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

class Confirmation(BaseModel):
    order: Order
    created: bool  # False when the order already existed for this session
