"""Redemption request domain model."""

import enum

from sqlalchemy import CheckConstraint, Column, DateTime, Enum as SAEnum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utc_now


class RedemptionStatus(str, enum.Enum):
    """Possible redemption states."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RedemptionRequest(Base):
    """Request to convert points into a bank transfer, resolved by an admin."""

    __tablename__ = "redemption_requests"
    __table_args__ = (
        CheckConstraint("points > 0", name="redemption_requests_points_positive"),
    )

    request_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="RESTRICT"), nullable=False)
    points = Column(Integer, nullable=False)
    bank_name = Column(String(255))
    account_number = Column(String(255))
    account_holder = Column(String(255))
    status = Column(
        SAEnum(RedemptionStatus, name="redemption_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=RedemptionStatus.PENDING,
    )
    reason = Column(Text)
    rejection_reason = Column(Text)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    approved_at = Column(DateTime)

    user = relationship("User", back_populates="redemption_requests")
