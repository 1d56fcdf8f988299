from pydantic import BaseModel, ConfigDict, Field
from staybook.modules.booking.models import Order


class BookingSessionCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    listing_id: str = Field(alias="listingId", min_length=1)

class BookingSessionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    session_id: str = Field(serialization_alias="sessionId")

class ConfirmResponse(BaseModel):
    order: Order
