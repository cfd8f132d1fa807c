"""Endpoints for point redemptions."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ...core.config import Settings, get_settings
from ...core.database import get_db
from ...models import RedemptionStatus
from ...schemas import RedemptionCreate, RedemptionRead, RedemptionReject
from ...services import redemption_service
from ...services.errors import RewardRuleViolation

router = APIRouter(tags=["redemptions"])

_REDEMPTION_EXAMPLE = {
    "request_id": 12,
    "user_id": 7,
    "points": 500,
    "bank_name": "State Bank of India",
    "account_number": "00112233445",
    "account_holder": "Asha Verma",
    "status": "pending",
    "reason": "Festival expenses",
    "rejection_reason": None,
    "created_at": "2025-11-12T14:30:00",
    "approved_at": None,
}


@router.post(
    "/users/{user_id}/redemption-requests",
    response_model=RedemptionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Request a redemption",
    responses={
        201: {
            "description": "Redemption request created",
            "content": {"application/json": {"example": _REDEMPTION_EXAMPLE}},
        },
        400: {"description": "Insufficient points or invalid amount"},
        404: {"description": "User not found"},
    },
)
def request_redemption(
    user_id: int,
    payload: RedemptionCreate,
    db: Session = Depends(get_db),
) -> RedemptionRead:
    """Ask for points to be paid out by bank transfer.

    Example request body::

        {
            "points": 500,
            "bank_name": "State Bank of India",
            "account_number": "00112233445",
            "account_holder": "Asha Verma",
            "reason": "Festival expenses"
        }
    """

    try:
        request = redemption_service.request_redemption(
            db,
            user_id=user_id,
            points=payload.points,
            bank_name=payload.bank_name,
            account_number=payload.account_number,
            account_holder=payload.account_holder,
            reason=payload.reason,
        )
        db.commit()
        db.refresh(request)
        return request
    except RewardRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.get(
    "/users/{user_id}/redemption-requests",
    response_model=List[RedemptionRead],
    summary="List a user's redemption requests",
)
def list_user_redemptions(
    user_id: int,
    limit: int = Query(50, ge=1, le=100, description="Maximum items to return"),
    offset: int = Query(0, ge=0, description="Items to skip for pagination"),
    db: Session = Depends(get_db),
) -> List[RedemptionRead]:
    """Return the user's requests newest first."""

    return list(redemption_service.list_redemption_requests(db, user_id=user_id, limit=limit, offset=offset))


@router.get(
    "/admin/redemption-requests",
    response_model=List[RedemptionRead],
    summary="List redemption requests",
)
def list_redemptions(
    *,
    status_filter: Optional[RedemptionStatus] = Query(None, alias="status", description="Filter by status"),
    limit: int = Query(50, ge=1, le=100, description="Maximum items to return"),
    offset: int = Query(0, ge=0, description="Items to skip for pagination"),
    db: Session = Depends(get_db),
) -> List[RedemptionRead]:
    """Return all requests, optionally only those in one state."""

    return list(
        redemption_service.list_redemption_requests(db, status=status_filter, limit=limit, offset=offset)
    )


@router.patch(
    "/admin/redemption-requests/{request_id}/approve",
    response_model=RedemptionRead,
    summary="Approve a redemption",
    responses={
        404: {"description": "Request not found"},
        409: {"description": "Request already resolved"},
        503: {"description": "Balance update failed; retry"},
    },
)
def approve_redemption(
    request_id: int,
    db: Session = Depends(get_db),
) -> RedemptionRead:
    """Approve a pending request and deduct the points."""

    try:
        request = redemption_service.approve_redemption(db, request_id=request_id)
        db.commit()
        db.refresh(request)
        return request
    except RewardRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.patch(
    "/admin/redemption-requests/{request_id}/reject",
    response_model=RedemptionRead,
    summary="Reject a redemption",
    responses={
        404: {"description": "Request not found"},
        409: {"description": "Request already resolved"},
    },
)
def reject_redemption(
    request_id: int,
    payload: Optional[RedemptionReject] = None,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> RedemptionRead:
    """Reject a pending request; the balance is left alone.

    Example request body::

        {
            "rejection_reason": "Account holder does not match the registered name"
        }
    """

    try:
        request = redemption_service.reject_redemption(
            db,
            request_id=request_id,
            rejection_reason=payload.rejection_reason if payload else None,
            default_reason=settings.default_rejection_reason,
        )
        db.commit()
        db.refresh(request)
        return request
    except RewardRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
