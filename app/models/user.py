"""ORM model for application users (credential store)."""

from sqlalchemy import Column, DateTime, Integer, String, func

from app.models.base import Base

USER_ROLES = ("admin", "manager", "user")


class User(Base):
    """
    User account for session login and role-based access.

    role: 'admin', 'manager' or 'user'
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False)
    email = Column(String(100), nullable=False, unique=True, index=True)
    role = Column(String(32), nullable=False, default="user")
    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
