"""Append-only points transaction log."""

import enum

from sqlalchemy import CheckConstraint, Column, DateTime, Enum as SAEnum, Integer, Text

from ..core.database import Base
from ..utils.datetime import utc_now


class TransactionType(str, enum.Enum):
    """Direction of a balance movement."""

    EARNED = "earned"
    REDEEMED = "redeemed"


class PointTransaction(Base):
    """Immutable audit entry written alongside every balance mutation."""

    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("amount > 0", name="transactions_amount_positive"),
    )

    transaction_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    type = Column(
        SAEnum(TransactionType, name="transaction_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    amount = Column(Integer, nullable=False)
    description = Column(Text, nullable=False)
    date = Column(DateTime, default=utc_now, nullable=False)
