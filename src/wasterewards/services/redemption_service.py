"""Domain logic for point redemption requests."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import RedemptionRequest, RedemptionStatus
from ..utils.datetime import utc_now
from . import ledger_service
from .errors import AlreadyResolved, InsufficientBalance, InvalidAmount, RequestNotFound

logger = logging.getLogger(__name__)

DEFAULT_REJECTION_REASON = "Request rejected by admin"


def _ensure_pending(session: Session, request_id: int) -> RedemptionRequest:
    stmt = select(RedemptionRequest).where(RedemptionRequest.request_id == request_id).with_for_update()
    request = session.execute(stmt).scalar_one_or_none()
    if request is None:
        raise RequestNotFound(f"Redemption request {request_id} not found")
    if request.status != RedemptionStatus.PENDING:
        raise AlreadyResolved(f"Redemption request {request_id} is already {request.status.value}.")
    return request


def request_redemption(
    session: Session,
    *,
    user_id: int,
    points: int,
    bank_name: str,
    account_number: str,
    account_holder: str,
    reason: Optional[str] = None,
) -> RedemptionRequest:
    """Open a pending redemption if the user currently holds enough points.

    The balance is only checked here; nothing is reserved until approval.
    """

    if isinstance(points, bool) or not isinstance(points, int) or points <= 0:
        raise InvalidAmount("Redemption points must be a positive integer.")

    user = ledger_service.ensure_user(session, user_id)

    available = ledger_service.current_points(session, user.user_id)
    if points > available:
        raise InsufficientBalance(f"Insufficient points to redeem ({available} available).")

    request = RedemptionRequest(
        user=user,
        points=points,
        bank_name=bank_name,
        account_number=account_number,
        account_holder=account_holder,
        reason=reason,
        status=RedemptionStatus.PENDING,
        created_at=utc_now(),
    )
    session.add(request)
    session.flush()
    session.refresh(request)

    logger.info("redemption request %s opened for user %s (%s points)", request.request_id, user_id, points)
    return request


def approve_redemption(session: Session, *, request_id: int) -> RedemptionRequest:
    """Approve a pending request and deduct its points from the balance."""

    request = _ensure_pending(session, request_id)

    request.status = RedemptionStatus.APPROVED
    request.approved_at = utc_now()

    ledger_service.apply_redemption(
        session,
        user_id=request.user_id,
        points=request.points,
        description=(
            f"Coin redemption approved: {request.points} points transferred to "
            f"{request.bank_name} account {request.account_number}"
        ),
    )

    logger.info("redemption request %s approved", request_id)
    return request


def reject_redemption(
    session: Session,
    *,
    request_id: int,
    rejection_reason: Optional[str] = None,
    default_reason: str = DEFAULT_REJECTION_REASON,
) -> RedemptionRequest:
    """Reject a pending request. The balance is untouched."""

    request = _ensure_pending(session, request_id)

    request.status = RedemptionStatus.REJECTED
    request.rejection_reason = rejection_reason or default_reason
    session.flush()

    logger.info("redemption request %s rejected: %s", request_id, request.rejection_reason)
    return request


def list_redemption_requests(
    session: Session,
    *,
    user_id: Optional[int] = None,
    status: Optional[RedemptionStatus] = None,
    limit: int = 50,
    offset: int = 0,
) -> Sequence[RedemptionRequest]:
    """Retrieve redemption requests newest first with optional filters."""

    stmt = (
        select(RedemptionRequest)
        .order_by(RedemptionRequest.created_at.desc(), RedemptionRequest.request_id.desc())
        .offset(offset)
        .limit(limit)
    )

    if user_id is not None:
        stmt = stmt.where(RedemptionRequest.user_id == user_id)
    if status is not None:
        stmt = stmt.where(RedemptionRequest.status == status)

    return session.execute(stmt).scalars().all()
