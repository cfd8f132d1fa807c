"""User identity model."""

from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utc_now


class User(Base):
    """Citizen account that submits waste reports and earns points."""

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", name="users_email_unique"),
    )

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    reports = relationship("WasteReport", back_populates="user")
    redemption_requests = relationship("RedemptionRequest", back_populates="user")
