"""Waste report endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ...core.config import Settings, get_settings
from ...core.database import get_db
from ...schemas import PointsBreakdown, ReportCreate, ReportRead, ReportStatusReceipt, ReportStatusUpdate
from ...services import report_service
from ...services.errors import RewardRuleViolation

router = APIRouter(tags=["reports"])


@router.post(
    "/reports",
    response_model=ReportRead,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a waste report",
    responses={
        400: {"description": "Business rule violation"},
        404: {"description": "User not found"},
    },
)
def create_report(
    payload: ReportCreate,
    db: Session = Depends(get_db),
) -> ReportRead:
    """Store a pending report awaiting admin verification.

    Example request body::

        {
            "user_id": 7,
            "location": "Sector 14 market, north gate",
            "waste_type": "Foodwaste",
            "amount": "12.5 kg"
        }
    """

    try:
        report = report_service.create_report(
            db,
            user_id=payload.user_id,
            location=payload.location,
            waste_type=payload.waste_type,
            amount=payload.amount,
        )
        db.commit()
        db.refresh(report)
        return report
    except RewardRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.get(
    "/reports",
    response_model=List[ReportRead],
    summary="List waste reports",
)
def list_reports(
    *,
    user_id: Optional[int] = Query(None, description="Filter by submitting user"),
    limit: int = Query(50, ge=1, le=100, description="Maximum items to return"),
    offset: int = Query(0, ge=0, description="Items to skip for pagination"),
    db: Session = Depends(get_db),
) -> List[ReportRead]:
    """Fetch reports newest first."""

    return list(report_service.list_reports(db, user_id=user_id, limit=limit, offset=offset))


@router.patch(
    "/admin/reports/{report_id}",
    response_model=ReportStatusReceipt,
    summary="Update report status",
    responses={
        200: {
            "description": "Status updated; points awarded when verified",
            "content": {
                "application/json": {
                    "example": {
                        "report": {
                            "report_id": 42,
                            "user_id": 7,
                            "location": "Sector 14 market, north gate",
                            "waste_type": "other",
                            "amount": "60 kg",
                            "status": "verified",
                            "created_at": "2025-11-12T10:15:30",
                        },
                        "award": {
                            "total_points": 414,
                            "base_points": 360,
                            "quantity_bonus_points": 36,
                            "frequency_bonus_points": 18,
                            "breakdown": {
                                "waste_type": "other",
                                "amount": "60",
                                "multiplier": 6,
                                "submission_count": 6,
                                "frequency_level": 1,
                            },
                        },
                    }
                }
            },
        },
        400: {"description": "Business rule violation"},
        404: {"description": "Report not found"},
        503: {"description": "Balance update failed; retry"},
    },
)
def update_report_status(
    report_id: int,
    payload: ReportStatusUpdate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ReportStatusReceipt:
    """Change a report's status. Moving it to ``verified`` credits the reporter."""

    try:
        report, calculation = report_service.update_report_status(
            db,
            report_id=report_id,
            status=payload.status,
            strict_waste_types=settings.strict_waste_types,
        )
        db.commit()
        db.refresh(report)
    except RewardRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc

    award = PointsBreakdown(**calculation.as_dict()) if calculation is not None else None
    return ReportStatusReceipt(report=ReportRead.model_validate(report), award=award)
