from pydantic import BaseModel, ConfigDict, Field, EmailStr
from typing import Optional, Dict, Any
from datetime import datetime, timezone
import uuid
from staybook.modules.booking.models import PendingSession


class User(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    email: EmailStr
    hashed_password: str
    stripe_account_id: Optional[str] = None  # payout account, set once
    stripe_seller: Optional[Dict[str, Any]] = None  # last retrieved payout account snapshot
    stripe_session: Optional[PendingSession] = None  # single in-flight checkout
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
