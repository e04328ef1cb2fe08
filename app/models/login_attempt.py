"""ORM model for failed login attempts (append-only, used for lockout)."""

from sqlalchemy import Column, DateTime, Integer, String

from app.models.base import Base


class LoginAttempt(Base):
    """One failed login for a username. Rows are never updated."""

    __tablename__ = "login_attempts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), nullable=False, index=True)
    ip_address = Column(String(45), nullable=False)
    attempt_time = Column(DateTime(timezone=True), nullable=False, index=True)
