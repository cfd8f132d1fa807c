"""Waste report model consumed by the verification flow."""

import enum

from sqlalchemy import Column, DateTime, Enum as SAEnum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utc_now


class ReportStatus(str, enum.Enum):
    """Lifecycle states of a waste report."""

    PENDING = "pending"
    VERIFIED = "verified"
    IN_PROGRESS = "in_progress"
    COLLECTED = "collected"
    REJECTED = "rejected"


class WasteReport(Base):
    """Citizen-submitted waste location with free-text type and amount."""

    __tablename__ = "reports"

    report_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="RESTRICT"), nullable=False)
    location = Column(Text, nullable=False)
    waste_type = Column(String(255), nullable=False)
    amount = Column(String(255), nullable=False)
    status = Column(
        SAEnum(ReportStatus, name="report_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ReportStatus.PENDING,
    )
    created_at = Column(DateTime, default=utc_now, nullable=False)
    verified_at = Column(DateTime)

    user = relationship("User", back_populates="reports")
