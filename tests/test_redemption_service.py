"""
Unit tests for the redemption state machine.

Tests cover:
1. Balance checks when a request is opened
2. Approval deducting points exactly once
3. Rejection leaving the balance untouched
4. Terminal states refusing further transitions
"""

import pytest
from sqlalchemy import select

from wasterewards.models import PointTransaction, RedemptionStatus, TransactionType
from wasterewards.services import ledger_service, redemption_service
from wasterewards.services.errors import (
    AlreadyResolved,
    InsufficientBalance,
    InvalidAmount,
    RequestNotFound,
    UserNotFound,
)

BANK = {
    "bank_name": "State Bank of India",
    "account_number": "00112233445",
    "account_holder": "Asha Verma",
}


def _fund(session, user_id, points):
    ledger_service.apply_admin_adjustment(session, user_id=user_id, signed_amount=points)
    session.commit()


def _open(session, user_id, points, **extra):
    request = redemption_service.request_redemption(session, user_id=user_id, points=points, **BANK, **extra)
    session.commit()
    return request


def _redeemed(session, user_id):
    stmt = select(PointTransaction).where(
        PointTransaction.user_id == user_id,
        PointTransaction.type == TransactionType.REDEEMED,
    )
    return session.execute(stmt).scalars().all()


class TestRequestRedemption:
    def test_creates_pending_request_without_touching_balance(self, session, user):
        _fund(session, user.user_id, 800)

        request = _open(session, user.user_id, 500, reason="Festival expenses")

        assert request.status == RedemptionStatus.PENDING
        assert request.points == 500
        assert request.bank_name == "State Bank of India"
        assert request.reason == "Festival expenses"
        assert request.approved_at is None
        assert ledger_service.current_points(session, user.user_id) == 800

    def test_exact_balance_is_allowed(self, session, user):
        _fund(session, user.user_id, 300)

        assert _open(session, user.user_id, 300).status == RedemptionStatus.PENDING

    def test_more_than_balance_is_rejected(self, session, user):
        _fund(session, user.user_id, 300)

        with pytest.raises(InsufficientBalance):
            redemption_service.request_redemption(session, user_id=user.user_id, points=301, **BANK)

    def test_missing_balance_counts_as_zero(self, session, user):
        with pytest.raises(InsufficientBalance):
            redemption_service.request_redemption(session, user_id=user.user_id, points=1, **BANK)

    def test_unknown_user(self, session):
        with pytest.raises(UserNotFound):
            redemption_service.request_redemption(session, user_id=77, points=10, **BANK)

    @pytest.mark.parametrize("points", [0, -10, 1.5])
    def test_invalid_points(self, session, user, points):
        _fund(session, user.user_id, 100)

        with pytest.raises(InvalidAmount):
            redemption_service.request_redemption(session, user_id=user.user_id, points=points, **BANK)


class TestApproveRedemption:
    def test_approving_full_balance_reaches_zero(self, session, user):
        _fund(session, user.user_id, 500)
        request = _open(session, user.user_id, 500)

        approved = redemption_service.approve_redemption(session, request_id=request.request_id)
        session.commit()

        balance = ledger_service.get_balance(session, user.user_id)
        redeemed = _redeemed(session, user.user_id)
        assert approved.status == RedemptionStatus.APPROVED
        assert approved.approved_at is not None
        assert balance.points == 0
        assert balance.level == 1
        assert len(redeemed) == 1
        assert redeemed[0].amount == 500
        assert redeemed[0].description == (
            "Coin redemption approved: 500 points transferred to State Bank of India account 00112233445"
        )

    def test_approval_recomputes_level(self, session, user):
        _fund(session, user.user_id, 1600)
        request = _open(session, user.user_id, 200)

        redemption_service.approve_redemption(session, request_id=request.request_id)
        session.commit()

        balance = ledger_service.get_balance(session, user.user_id)
        assert balance.points == 1400
        assert balance.level == 2

    @pytest.mark.parametrize("resolve", ["approve", "reject"])
    def test_resolved_request_cannot_be_approved(self, session, user, resolve):
        _fund(session, user.user_id, 500)
        request = _open(session, user.user_id, 200)
        if resolve == "approve":
            redemption_service.approve_redemption(session, request_id=request.request_id)
        else:
            redemption_service.reject_redemption(session, request_id=request.request_id)
        session.commit()
        points_before = ledger_service.current_points(session, user.user_id)
        status_before = request.status

        with pytest.raises(AlreadyResolved):
            redemption_service.approve_redemption(session, request_id=request.request_id)
        session.rollback()

        assert ledger_service.current_points(session, user.user_id) == points_before
        assert request.status == status_before
        assert len(_redeemed(session, user.user_id)) == (1 if resolve == "approve" else 0)

    def test_unknown_request(self, session):
        with pytest.raises(RequestNotFound):
            redemption_service.approve_redemption(session, request_id=9999)

    def test_sequential_approvals_are_clamped_at_zero(self, session, user):
        # Both requests pass the balance check because nothing is reserved.
        _fund(session, user.user_id, 400)
        first = _open(session, user.user_id, 300)
        second = _open(session, user.user_id, 300)

        redemption_service.approve_redemption(session, request_id=first.request_id)
        redemption_service.approve_redemption(session, request_id=second.request_id)
        session.commit()

        assert ledger_service.current_points(session, user.user_id) == 0
        assert [t.amount for t in _redeemed(session, user.user_id)] == [300, 300]


class TestRejectRedemption:
    def test_reject_with_reason(self, session, user):
        _fund(session, user.user_id, 500)
        request = _open(session, user.user_id, 200)

        rejected = redemption_service.reject_redemption(
            session, request_id=request.request_id, rejection_reason="Account holder mismatch"
        )
        session.commit()

        assert rejected.status == RedemptionStatus.REJECTED
        assert rejected.rejection_reason == "Account holder mismatch"
        assert ledger_service.current_points(session, user.user_id) == 500
        assert _redeemed(session, user.user_id) == []

    def test_reject_uses_default_reason(self, session, user):
        _fund(session, user.user_id, 500)
        request = _open(session, user.user_id, 200)

        rejected = redemption_service.reject_redemption(session, request_id=request.request_id)

        assert rejected.rejection_reason == "Request rejected by admin"

    def test_reject_twice_fails(self, session, user):
        _fund(session, user.user_id, 500)
        request = _open(session, user.user_id, 200)
        redemption_service.reject_redemption(session, request_id=request.request_id)
        session.commit()

        with pytest.raises(AlreadyResolved):
            redemption_service.reject_redemption(session, request_id=request.request_id, rejection_reason="again")

    def test_unknown_request(self, session):
        with pytest.raises(RequestNotFound):
            redemption_service.reject_redemption(session, request_id=9999)


class TestListRedemptions:
    def test_filters_by_user_and_status(self, session, user):
        _fund(session, user.user_id, 1000)
        first = _open(session, user.user_id, 100)
        _open(session, user.user_id, 200)
        redemption_service.approve_redemption(session, request_id=first.request_id)
        session.commit()

        pending = redemption_service.list_redemption_requests(session, status=RedemptionStatus.PENDING)
        mine = redemption_service.list_redemption_requests(session, user_id=user.user_id)

        assert [r.points for r in pending] == [200]
        assert len(mine) == 2
        assert ledger_service.ledger_summary(session)["pending_redemption_points"] == 200
