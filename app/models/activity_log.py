"""ORM model for the audit trail of authentication events."""

from sqlalchemy import Column, DateTime, Integer, String, Text

from app.models.base import Base


class ActivityLog(Base):
    """
    One audited action (login_success, login_failed, logout, password_reset_requested, ...).

    user_id is null when the actor is not known (e.g. failed login for an unknown username).
    """

    __tablename__ = "activity_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=True, index=True)
    action = Column(String(100), nullable=False, index=True)
    details = Column(Text, nullable=True)
    ip_address = Column(String(45), nullable=True)
    timestamp = Column(DateTime(timezone=True), nullable=False)
