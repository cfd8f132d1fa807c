"""SQLAlchemy models for the waste rewards service."""

from .redemption import RedemptionRequest, RedemptionStatus
from .reward_balance import SYSTEM_USER_ID, RewardBalance
from .transaction import PointTransaction, TransactionType
from .user import User
from .waste_report import ReportStatus, WasteReport

__all__ = [
    "PointTransaction",
    "RedemptionRequest",
    "RedemptionStatus",
    "ReportStatus",
    "RewardBalance",
    "SYSTEM_USER_ID",
    "TransactionType",
    "User",
    "WasteReport",
]
