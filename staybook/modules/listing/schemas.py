from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Union
from datetime import datetime


class ListingCreate(BaseModel):
    title: str = Field(min_length=1)
    content: str = ""
    location: str = Field(min_length=1)
    price: float = Field(ge=0)
    from_date: datetime
    to_date: datetime
    bed: int = Field(ge=1)

class ListingUpdate(BaseModel):
    """Fields an owner may change. Anything else in the body is rejected."""
    model_config = ConfigDict(extra="forbid")
    title: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = None
    location: Optional[str] = Field(default=None, min_length=1)
    price: Optional[float] = Field(default=None, ge=0)
    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None
    bed: Optional[int] = Field(default=None, ge=1)

class SearchRequest(BaseModel):
    # Raw criteria as the search form sends them; parsed by build_listing_filter
    model_config = ConfigDict(populate_by_name=True)
    location: Optional[str] = None
    from_: Optional[str] = Field(default=None, alias="from")
    to: Optional[str] = None
    bed: Optional[Union[int, str]] = None
