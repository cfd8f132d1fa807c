"""Rule violations raised by the rewards services.

Routers translate these into HTTP errors using ``status_code``; the service
layer never commits, so raising one leaves the unit of work for the caller to
roll back.
"""

from __future__ import annotations


class RewardRuleViolation(Exception):
    """Raised when a rewards business rule is violated."""

    status_code = 400

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class UserNotFound(RewardRuleViolation):
    status_code = 404


class RequestNotFound(RewardRuleViolation):
    status_code = 404


class ReportNotFound(RewardRuleViolation):
    status_code = 404


class BalanceNotFound(RewardRuleViolation):
    status_code = 404


class AlreadyResolved(RewardRuleViolation):
    """The redemption request has left the pending state."""

    status_code = 409


class InsufficientBalance(RewardRuleViolation):
    status_code = 400


class InvalidAmount(RewardRuleViolation):
    status_code = 400


class UnknownWasteType(RewardRuleViolation):
    status_code = 400


class LedgerUpdateFailed(RewardRuleViolation):
    """The atomic balance write failed; the whole operation must be retried."""

    status_code = 503
