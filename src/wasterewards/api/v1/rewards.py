"""Balance, transaction and points calculator endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...schemas import (
    AdjustmentReceipt,
    BalanceRead,
    LedgerSummary,
    PointsBreakdown,
    PointsPreviewRequest,
    SystemRewardCreate,
    TierRead,
    TokenAdjustment,
    TransactionRead,
)
from ...services import ledger_service
from ...services.errors import RewardRuleViolation
from ...services.points_engine import LEVEL_THRESHOLDS, calculate_reward_points, tier_name

router = APIRouter(tags=["rewards"])


@router.post(
    "/rewards/calculate",
    response_model=PointsBreakdown,
    summary="Preview a points award",
)
def preview_points(payload: PointsPreviewRequest) -> PointsBreakdown:
    """Run the points calculation without touching any balance."""

    calculation = calculate_reward_points(payload.waste_type, payload.amount, payload.submission_count)
    return PointsBreakdown(**calculation.as_dict())


@router.get(
    "/rewards/tiers",
    response_model=List[TierRead],
    summary="Tier thresholds",
)
def list_tiers() -> List[TierRead]:
    """Return each level with its display name and minimum points."""

    return [
        TierRead(level=level, name=tier_name(level), min_points=threshold)
        for level, threshold in sorted(LEVEL_THRESHOLDS)
    ]


@router.get(
    "/users/{user_id}/balance",
    response_model=BalanceRead,
    summary="User balance",
    responses={
        200: {
            "description": "Current balance and tier",
            "content": {
                "application/json": {
                    "example": {
                        "balance_id": 3,
                        "user_id": 7,
                        "points": 989,
                        "level": 2,
                        "tier": "Silver",
                        "updated_at": "2025-11-12T14:30:00",
                    }
                }
            },
        },
        404: {"description": "No balance yet"},
    },
)
def get_balance(user_id: int, db: Session = Depends(get_db)) -> BalanceRead:
    """Return the user's balance snapshot."""

    balance = ledger_service.get_balance(db, user_id)
    if balance is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No balance for user {user_id}")
    return balance


@router.get(
    "/users/{user_id}/transactions",
    response_model=List[TransactionRead],
    summary="User transactions",
)
def list_user_transactions(
    user_id: int,
    limit: int = Query(50, ge=1, le=100, description="Maximum items to return"),
    offset: int = Query(0, ge=0, description="Items to skip for pagination"),
    db: Session = Depends(get_db),
) -> List[TransactionRead]:
    """Return the user's ledger entries newest first."""

    return list(ledger_service.list_transactions(db, user_id=user_id, limit=limit, offset=offset))


@router.post(
    "/admin/users/{user_id}/tokens",
    response_model=AdjustmentReceipt,
    summary="Adjust a user's points",
    responses={
        400: {"description": "Invalid amount"},
        404: {"description": "User not found"},
        503: {"description": "Balance update failed; retry"},
    },
)
def adjust_tokens(
    user_id: int,
    payload: TokenAdjustment,
    db: Session = Depends(get_db),
) -> AdjustmentReceipt:
    """Add or remove points. The balance never drops below zero.

    Example request body::

        {
            "amount": -150
        }
    """

    try:
        balance, transaction = ledger_service.apply_admin_adjustment(
            db,
            user_id=user_id,
            signed_amount=payload.amount,
        )
        db.commit()
        db.refresh(balance)
        db.refresh(transaction)
        return AdjustmentReceipt(
            balance=BalanceRead.model_validate(balance),
            transaction=TransactionRead.model_validate(transaction),
        )
    except RewardRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.get(
    "/admin/balances",
    response_model=List[BalanceRead],
    summary="All balances",
)
def list_balances(db: Session = Depends(get_db)) -> List[BalanceRead]:
    """Return every balance, highest first."""

    return list(ledger_service.list_balances(db))


@router.post(
    "/admin/rewards",
    response_model=AdjustmentReceipt,
    status_code=status.HTTP_201_CREATED,
    summary="Issue a system reward",
)
def issue_system_reward(
    payload: SystemRewardCreate,
    db: Session = Depends(get_db),
) -> AdjustmentReceipt:
    """Credit admin-issued points to the shared system pool."""

    try:
        balance, transaction = ledger_service.issue_system_reward(db, points=payload.points)
        db.commit()
        db.refresh(balance)
        db.refresh(transaction)
        return AdjustmentReceipt(
            balance=BalanceRead.model_validate(balance),
            transaction=TransactionRead.model_validate(transaction),
        )
    except RewardRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.delete(
    "/admin/balances/{balance_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a balance",
    responses={404: {"description": "Balance not found"}},
)
def delete_balance(balance_id: int, db: Session = Depends(get_db)) -> None:
    """Remove a balance row; its transactions are kept."""

    try:
        ledger_service.delete_balance(db, balance_id)
        db.commit()
    except RewardRuleViolation as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.get(
    "/admin/transactions",
    response_model=List[TransactionRead],
    summary="All transactions",
)
def list_transactions(
    *,
    user_id: Optional[int] = Query(None, description="Filter by user"),
    limit: int = Query(50, ge=1, le=100, description="Maximum items to return"),
    offset: int = Query(0, ge=0, description="Items to skip for pagination"),
    db: Session = Depends(get_db),
) -> List[TransactionRead]:
    """Fetch ledger entries newest first."""

    return list(ledger_service.list_transactions(db, user_id=user_id, limit=limit, offset=offset))


@router.get(
    "/admin/stats",
    response_model=LedgerSummary,
    summary="Ledger totals",
)
def ledger_stats(db: Session = Depends(get_db)) -> LedgerSummary:
    """Points distributed and redeemed, plus the pending redemption backlog."""

    return LedgerSummary(**ledger_service.ledger_summary(db))
