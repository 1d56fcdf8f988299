from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime, timezone
import uuid


class ListingImage(BaseModel):
    data: bytes
    content_type: str

class Listing(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    content: str = ""
    location: str
    price: float = Field(ge=0)  # major currency unit
    from_date: datetime  # availability window start
    to_date: datetime  # availability window end
    bed: int = Field(ge=1)
    posted_by: str  # owner user id, never changes
    image: Optional[ListingImage] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
