from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional, Dict, Any
from datetime import datetime


class UserResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str
    name: str
    email: EmailStr
    stripe_account_id: Optional[str] = None
    stripe_seller: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None

class UserRegister(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6, max_length=64)

class UserLogin(BaseModel):
    email: EmailStr
    password: str
