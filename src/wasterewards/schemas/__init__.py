"""Public schema exports."""

from .redemption import RedemptionCreate, RedemptionRead, RedemptionReject
from .report import PointsBreakdown, ReportCreate, ReportRead, ReportStatusReceipt, ReportStatusUpdate
from .reward import (
	AdjustmentReceipt,
	BalanceRead,
	LedgerSummary,
	PointsPreviewRequest,
	SystemRewardCreate,
	TierRead,
	TokenAdjustment,
	TransactionRead,
)
from .user import UserCreate, UserRead

__all__ = [
	"AdjustmentReceipt",
	"BalanceRead",
	"LedgerSummary",
	"PointsBreakdown",
	"PointsPreviewRequest",
	"RedemptionCreate",
	"RedemptionRead",
	"RedemptionReject",
	"ReportCreate",
	"ReportRead",
	"ReportStatusReceipt",
	"ReportStatusUpdate",
	"SystemRewardCreate",
	"TierRead",
	"TokenAdjustment",
	"TransactionRead",
	"UserCreate",
	"UserRead",
]
