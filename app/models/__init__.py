"""SQLAlchemy ORM models."""

from app.models.activity_log import ActivityLog
from app.models.base import Base
from app.models.login_attempt import LoginAttempt
from app.models.project import Project
from app.models.tokens import PasswordResetToken, RememberToken
from app.models.user import User

__all__ = [
    "ActivityLog",
    "Base",
    "LoginAttempt",
    "PasswordResetToken",
    "Project",
    "RememberToken",
    "User",
]
