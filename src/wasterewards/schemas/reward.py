"""Pydantic schemas for balances, transactions and the points calculator."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, StrictInt, computed_field

from ..models import TransactionType
from ..services.points_engine import MAX_WASTE_AMOUNT_KG, tier_name


class BalanceRead(BaseModel):
    """Balance snapshot for a user or the system pool."""

    model_config = ConfigDict(from_attributes=True)

    balance_id: int
    user_id: int
    points: int = Field(..., ge=0)
    level: int = Field(..., ge=1, le=5)
    updated_at: datetime

    @computed_field
    @property
    def tier(self) -> str:
        return tier_name(self.level)


class TransactionRead(BaseModel):
    """Ledger entry as exposed to clients."""

    model_config = ConfigDict(from_attributes=True)

    transaction_id: int
    user_id: int
    type: TransactionType
    amount: int
    description: str
    date: datetime


class TokenAdjustment(BaseModel):
    """Admin adjustment; negative amounts remove points."""

    amount: StrictInt = Field(..., description="Signed number of points to add or remove.")


class AdjustmentReceipt(BaseModel):
    balance: BalanceRead
    transaction: TransactionRead


class SystemRewardCreate(BaseModel):
    """Admin-issued reward credited to the system pool."""

    points: StrictInt = Field(..., gt=0)


class PointsPreviewRequest(BaseModel):
    """Inputs for previewing a points award."""

    waste_type: str
    amount: Decimal = Field(..., ge=0, le=MAX_WASTE_AMOUNT_KG, description="Kilograms of waste.")
    submission_count: int = Field(0, ge=0, description="Verified submissions counted for the frequency bonus.")


class TierRead(BaseModel):
    level: int
    name: str
    min_points: int


class LedgerSummary(BaseModel):
    """Aggregate ledger figures for the admin dashboard."""

    points_distributed: int
    points_redeemed: int
    pending_redemptions: int
    pending_redemption_points: int
