"""Waste report ingestion and the verification award flow."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import ReportStatus, WasteReport
from ..utils.datetime import utc_now
from . import ledger_service
from .errors import LedgerUpdateFailed, ReportNotFound
from .points_engine import PointsCalculation, calculate_reward_points, parse_waste_type, validate_waste_amount

logger = logging.getLogger(__name__)


def _ensure_report(session: Session, report_id: int) -> WasteReport:
    stmt = select(WasteReport).where(WasteReport.report_id == report_id).with_for_update()
    report = session.execute(stmt).scalar_one_or_none()
    if report is None:
        raise ReportNotFound(f"Report {report_id} not found")
    return report


def _verified_count(session: Session, user_id: int) -> int:
    """Count reports that have ever been verified, whatever their status now."""

    stmt = select(func.count(WasteReport.report_id)).where(
        WasteReport.user_id == user_id,
        WasteReport.verified_at.is_not(None),
    )
    return int(session.execute(stmt).scalar_one())


def create_report(
    session: Session,
    *,
    user_id: int,
    location: str,
    waste_type: str,
    amount: str,
) -> WasteReport:
    """Store a pending waste report for later verification."""

    validate_waste_amount(amount)
    user = ledger_service.ensure_user(session, user_id)
    report = WasteReport(
        user=user,
        location=location,
        waste_type=waste_type,
        amount=amount,
        status=ReportStatus.PENDING,
        created_at=utc_now(),
    )
    session.add(report)
    session.flush()
    session.refresh(report)
    return report


def update_report_status(
    session: Session,
    *,
    report_id: int,
    status: ReportStatus,
    strict_waste_types: bool = False,
) -> tuple[WasteReport, Optional[PointsCalculation]]:
    """Change a report's status, awarding points the first time it is verified.

    ``verified_at`` marks a report as awarded, so moving it back to ``verified``
    after collection credits nothing. The verified-submission count includes
    the report being verified. Returns the report and the calculation that was
    credited, if any.
    """

    report = _ensure_report(session, report_id)
    first_verification = status == ReportStatus.VERIFIED and report.verified_at is None

    if first_verification:
        waste_type = parse_waste_type(report.waste_type, strict=strict_waste_types)
        kilograms = validate_waste_amount(report.amount)

    try:
        report.status = status
        if first_verification:
            report.verified_at = utc_now()
        session.flush()
    except SQLAlchemyError as exc:
        logger.exception("status update failed for report %s", report_id)
        raise LedgerUpdateFailed("Report update failed; please retry the operation.") from exc

    if not first_verification:
        return report, None

    calculation = calculate_reward_points(
        waste_type,
        kilograms,
        _verified_count(session, report.user_id),
    )
    if calculation.total_points <= 0:
        logger.info("report %s verified with no points to award", report_id)
        return report, calculation

    ledger_service.apply_award(
        session,
        user_id=report.user_id,
        points=calculation.total_points,
        description=f"Waste report verified: {calculation.describe()}",
    )
    logger.info("report %s verified: %s", report_id, calculation.describe())
    return report, calculation


def list_reports(
    session: Session,
    *,
    user_id: Optional[int] = None,
    limit: int = 50,
    offset: int = 0,
) -> Sequence[WasteReport]:
    stmt = (
        select(WasteReport)
        .order_by(WasteReport.created_at.desc(), WasteReport.report_id.desc())
        .offset(offset)
        .limit(limit)
    )
    if user_id is not None:
        stmt = stmt.where(WasteReport.user_id == user_id)
    return session.execute(stmt).scalars().all()
