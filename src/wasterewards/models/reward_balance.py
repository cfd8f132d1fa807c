"""Per-user reward balance model."""

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, UniqueConstraint

from ..core.database import Base
from ..utils.datetime import utc_now

SYSTEM_USER_ID = 0


class RewardBalance(Base):
    """Current redeemable points and tier for one user.

    ``user_id`` is not a foreign key: ``SYSTEM_USER_ID`` owns the shared pool
    for admin-issued rewards and has no user row.
    """

    __tablename__ = "reward_balances"
    __table_args__ = (
        UniqueConstraint("user_id", name="reward_balances_user_unique"),
        CheckConstraint("points >= 0", name="reward_balances_points_non_negative"),
        CheckConstraint("level BETWEEN 1 AND 5", name="reward_balances_level_range"),
    )

    balance_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    points = Column(Integer, nullable=False, default=0)
    level = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, nullable=False)
