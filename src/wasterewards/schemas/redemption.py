"""Pydantic schemas for redemption workflows."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from ..models import RedemptionStatus


class RedemptionCreate(BaseModel):
    """Incoming payload for requesting a redemption."""

    points: StrictInt = Field(..., gt=0, description="Number of points to redeem.")
    bank_name: str = Field(..., min_length=1, max_length=255)
    account_number: str = Field(..., min_length=1, max_length=255)
    account_holder: str = Field(..., min_length=1, max_length=255)
    reason: Optional[str] = None


class RedemptionReject(BaseModel):
    """Optional admin explanation for a rejection."""

    rejection_reason: Optional[str] = None


class RedemptionRead(BaseModel):
    """Represents a redemption request."""

    model_config = ConfigDict(from_attributes=True)

    request_id: int
    user_id: int
    points: int
    bank_name: Optional[str]
    account_number: Optional[str]
    account_holder: Optional[str]
    status: RedemptionStatus
    reason: Optional[str]
    rejection_reason: Optional[str]
    created_at: datetime
    approved_at: Optional[datetime]
