"""Balance and transaction ledger.

This module owns every write to ``RewardBalance.points``. Each mutation locks
the balance row, writes the new total and level, appends exactly one
``PointTransaction`` and flushes both together; committing is left to the
caller so the pair lands or rolls back as a unit.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import (
    SYSTEM_USER_ID,
    PointTransaction,
    RedemptionRequest,
    RedemptionStatus,
    RewardBalance,
    TransactionType,
    User,
)
from ..utils.datetime import utc_now
from .errors import BalanceNotFound, InvalidAmount, LedgerUpdateFailed, UserNotFound
from .points_engine import calculate_level

logger = logging.getLogger(__name__)

ADMIN_ADDED_DESCRIPTION = "Admin token adjustment (added)"
ADMIN_REMOVED_DESCRIPTION = "Admin token adjustment (removed)"

# Upper bound of the INTEGER columns holding points.
MAX_POINTS = 2_147_483_647


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def ensure_user(session: Session, user_id: int) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise UserNotFound(f"User {user_id} not found")
    return user


def _ensure_ledger_owner(session: Session, user_id: int) -> None:
    if user_id != SYSTEM_USER_ID:
        ensure_user(session, user_id)


def _lock_balance(session: Session, user_id: int) -> Optional[RewardBalance]:
    stmt = select(RewardBalance).where(RewardBalance.user_id == user_id).with_for_update()
    return session.execute(stmt).scalar_one_or_none()


def _mutate(
    session: Session,
    *,
    user_id: int,
    delta: int,
    transaction_type: TransactionType,
    amount: int,
    description: str,
) -> tuple[RewardBalance, PointTransaction, int]:
    """Apply ``delta`` to the locked balance and append its audit entry.

    Returns the balance, the new transaction and the points held before the
    change. The balance never drops below zero. Totals or amounts beyond
    ``MAX_POINTS`` raise ``InvalidAmount`` before anything is written.
    """

    now = utc_now()
    try:
        balance = _lock_balance(session, user_id)
        previous = balance.points if balance is not None else 0
        if amount > MAX_POINTS or previous + delta > MAX_POINTS:
            raise InvalidAmount(f"Points may not exceed {MAX_POINTS}.")
        if balance is None:
            balance = RewardBalance(user_id=user_id, points=0, level=1, created_at=now)
            session.add(balance)
        balance.points = max(0, previous + delta)
        balance.level = calculate_level(balance.points)
        balance.updated_at = now

        transaction = PointTransaction(
            user_id=user_id,
            type=transaction_type,
            amount=amount,
            description=description,
            date=now,
        )
        session.add(transaction)
        session.flush()
    except SQLAlchemyError as exc:
        logger.exception("ledger update failed for user %s", user_id)
        raise LedgerUpdateFailed("Balance update failed; please retry the operation.") from exc

    return balance, transaction, previous


def get_balance(session: Session, user_id: int) -> Optional[RewardBalance]:
    """Return the user's balance row, or ``None`` before their first award."""

    stmt = select(RewardBalance).where(RewardBalance.user_id == user_id)
    return session.execute(stmt).scalar_one_or_none()


def current_points(session: Session, user_id: int) -> int:
    balance = get_balance(session, user_id)
    return balance.points if balance is not None else 0


def apply_award(
    session: Session,
    *,
    user_id: int,
    points: int,
    description: str,
) -> tuple[RewardBalance, PointTransaction]:
    """Credit an award and record an ``earned`` transaction."""

    if not _is_int(points) or points <= 0:
        raise InvalidAmount("Award points must be a positive integer.")
    _ensure_ledger_owner(session, user_id)

    balance, transaction, _ = _mutate(
        session,
        user_id=user_id,
        delta=points,
        transaction_type=TransactionType.EARNED,
        amount=points,
        description=description,
    )
    logger.info("awarded %s points to user %s (balance %s)", points, user_id, balance.points)
    return balance, transaction


def apply_admin_adjustment(
    session: Session,
    *,
    user_id: int,
    signed_amount: int,
) -> tuple[RewardBalance, PointTransaction]:
    """Add or remove points on an admin's behalf, clamping the balance at zero."""

    if not _is_int(signed_amount) or signed_amount == 0:
        raise InvalidAmount("Adjustment amount must be a non-zero integer.")
    _ensure_ledger_owner(session, user_id)

    if signed_amount > 0:
        transaction_type, description = TransactionType.EARNED, ADMIN_ADDED_DESCRIPTION
    else:
        transaction_type, description = TransactionType.REDEEMED, ADMIN_REMOVED_DESCRIPTION

    balance, transaction, _ = _mutate(
        session,
        user_id=user_id,
        delta=signed_amount,
        transaction_type=transaction_type,
        amount=abs(signed_amount),
        description=description,
    )
    logger.info("admin adjusted user %s by %s (balance %s)", user_id, signed_amount, balance.points)
    return balance, transaction


def apply_redemption(
    session: Session,
    *,
    user_id: int,
    points: int,
    description: str,
) -> tuple[RewardBalance, PointTransaction]:
    """Deduct approved redemption points, clamping the balance at zero."""

    balance, transaction, previous = _mutate(
        session,
        user_id=user_id,
        delta=-points,
        transaction_type=TransactionType.REDEEMED,
        amount=points,
        description=description,
    )
    if points > previous:
        logger.warning(
            "redemption of %s points exceeded balance %s for user %s; clamped at zero",
            points,
            previous,
            user_id,
        )
    logger.info("redeemed %s points for user %s (balance %s)", points, user_id, balance.points)
    return balance, transaction


def issue_system_reward(session: Session, *, points: int) -> tuple[RewardBalance, PointTransaction]:
    """Credit admin-issued points to the shared system pool."""

    if not _is_int(points) or points <= 0:
        raise InvalidAmount("Reward points must be a positive integer.")
    return apply_admin_adjustment(session, user_id=SYSTEM_USER_ID, signed_amount=points)


def list_balances(session: Session) -> Sequence[RewardBalance]:
    stmt = select(RewardBalance).order_by(RewardBalance.points.desc(), RewardBalance.user_id.asc())
    return session.execute(stmt).scalars().all()


def delete_balance(session: Session, balance_id: int) -> None:
    """Remove a balance row. The transaction history is kept."""

    balance = session.get(RewardBalance, balance_id)
    if balance is None:
        raise BalanceNotFound(f"Balance {balance_id} not found")
    user_id = balance.user_id
    session.delete(balance)
    session.flush()
    logger.info("deleted balance %s for user %s", balance_id, user_id)


def list_transactions(
    session: Session,
    *,
    user_id: Optional[int] = None,
    limit: int = 50,
    offset: int = 0,
) -> Sequence[PointTransaction]:
    """Return transactions newest first, optionally for one user."""

    stmt = (
        select(PointTransaction)
        .order_by(PointTransaction.date.desc(), PointTransaction.transaction_id.desc())
        .offset(offset)
        .limit(limit)
    )
    if user_id is not None:
        stmt = stmt.where(PointTransaction.user_id == user_id)
    return session.execute(stmt).scalars().all()


def ledger_summary(session: Session) -> dict[str, int]:
    """Aggregate totals for the admin dashboard."""

    def _sum(transaction_type: TransactionType) -> int:
        stmt = select(func.coalesce(func.sum(PointTransaction.amount), 0)).where(
            PointTransaction.type == transaction_type
        )
        return int(session.execute(stmt).scalar_one())

    pending_stmt = select(
        func.count(RedemptionRequest.request_id),
        func.coalesce(func.sum(RedemptionRequest.points), 0),
    ).where(RedemptionRequest.status == RedemptionStatus.PENDING)
    pending_count, pending_points = session.execute(pending_stmt).one()

    return {
        "points_distributed": _sum(TransactionType.EARNED),
        "points_redeemed": _sum(TransactionType.REDEEMED),
        "pending_redemptions": int(pending_count),
        "pending_redemption_points": int(pending_points),
    }
