"""Service layer exports."""

from . import (
	ledger_service,
	points_engine,
	redemption_service,
	report_service,
	user_service,
)

__all__ = [
	"ledger_service",
	"points_engine",
	"redemption_service",
	"report_service",
	"user_service",
]
