"""Data-access layer: one repository per table, each wrapping an injected Session."""

from app.repositories.activity_log import ActivityLogRepository
from app.repositories.login_attempts import LoginAttemptRepository
from app.repositories.projects import ProjectRepository
from app.repositories.tokens import PasswordResetRepository, RememberTokenRepository
from app.repositories.users import UserRepository

__all__ = [
    "ActivityLogRepository",
    "LoginAttemptRepository",
    "PasswordResetRepository",
    "ProjectRepository",
    "RememberTokenRepository",
    "UserRepository",
]
