# backend/modules/businesses/schemas/business_schemas.py

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class BlockUserRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=255)


class BusinessStatusOut(BaseModel):
    """Account state after a block or unblock"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    business_name: str
    is_active: bool
    is_blocked: bool
    blocked_reason: Optional[str] = None
    blocked_at: Optional[datetime] = None


class PasswordChangeAccepted(BaseModel):
    user_id: int
    message: str = "Password change audit scheduled"
