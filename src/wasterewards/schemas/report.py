"""Pydantic schemas for waste report endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models import ReportStatus


class ReportCreate(BaseModel):
    """Request body for submitting a waste report."""

    user_id: int
    location: str = Field(..., min_length=1)
    waste_type: str = Field(..., min_length=1, description="Foodwaste, Electroicwaste or other.")
    amount: str = Field(..., min_length=1, description="Free-text quantity, e.g. '12.5 kg'.")


class ReportStatusUpdate(BaseModel):
    """Admin status change; ``verified`` triggers the points award."""

    status: ReportStatus

    verified_at: Optional[datetime] = None

class ReportRead(BaseModel):
    """Waste report response payload."""

    model_config = ConfigDict(from_attributes=True)

    report_id: int
    user_id: int
    location: str
    waste_type: str
    amount: str
    status: ReportStatus
    created_at: datetime
    verified_at: Optional[datetime] = None


class PointsBreakdown(BaseModel):
    """Result of the points calculation for one submission."""

    total_points: int
    base_points: int
    quantity_bonus_points: int
    frequency_bonus_points: int
    breakdown: dict


class ReportStatusReceipt(BaseModel):
    """Response returned after a status change."""

    report: ReportRead
    award: Optional[PointsBreakdown] = Field(None, description="Points credited when the report was verified.")
