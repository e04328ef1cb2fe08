"""Authenticator and session orchestration: login, logout and project switching."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from app.core.clock import utcnow
from app.core.security import USERNAME_MAX_LEN, verify_password
from app.models import User
from app.repositories import (
    LoginAttemptRepository,
    ProjectRepository,
    RememberTokenRepository,
    UserRepository,
)
from app.schemas.auth import SessionContext
from app.services.audit import AuditTrail
from app.services.errors import (
    AccountLockedError,
    InputValidationError,
    InvalidCredentialsError,
)
from app.services.login_attempts import LoginAttemptTracker
from app.services.remember_tokens import RememberTokenIssuer

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class LoginResult:
    user: User
    context: SessionContext
    remember_token: str | None = None


class AuthService:
    """
    Login flow: validate input, check lockout, verify credentials, then bind the
    session to the chosen project. The lockout check runs before any credential
    check, so a locked username never reaches password verification.

    Collaborators default to SQLAlchemy-backed implementations on `session`;
    pass replacements to substitute test doubles.
    """

    def __init__(
        self,
        session: Session,
        settings: Settings,
        *,
        users: UserRepository | None = None,
        projects: ProjectRepository | None = None,
        tracker: LoginAttemptTracker | None = None,
        remember: RememberTokenIssuer | None = None,
        audit: AuditTrail | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.session = session
        self.settings = settings
        self.clock = clock
        self.users = users or UserRepository(session)
        self.projects = projects or ProjectRepository(session)
        self.tracker = tracker or LoginAttemptTracker(
            LoginAttemptRepository(session),
            max_attempts=settings.LOCKOUT_MAX_ATTEMPTS,
            window=timedelta(minutes=settings.LOCKOUT_WINDOW_MINUTES),
            clock=clock,
        )
        self.remember = remember or RememberTokenIssuer(
            RememberTokenRepository(session),
            ttl=timedelta(days=settings.REMEMBER_TOKEN_DAYS),
            clock=clock,
        )
        self.audit = audit or AuditTrail(None)

    def authenticate(self, username: str, password: str) -> User | None:
        """Return the user when the password matches its stored hash; None otherwise (including unknown username)."""
        user = self.users.get_by_username(username)
        if user is None:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user

    def login(
        self,
        username: str | None,
        password: str | None,
        project_id: int | None,
        remember_me: bool = False,
        ip_address: str = "unknown",
    ) -> LoginResult:
        """
        Project checks (present, then active) run before the lockout check; a
        locked username that picks an inactive project gets the validation error.
        """
        username = (username or "").strip()
        if (
            not username
            or len(username) > USERNAME_MAX_LEN
            or not password
            or not project_id
            or project_id <= 0
        ):
            self.audit.record(
                "login_validation_failed",
                "Login rejected: missing username, password or project",
                ip_address=ip_address,
            )
            raise InputValidationError()

        project = self.projects.get_active(project_id)
        if project is None:
            self.audit.record(
                "login_validation_failed",
                f"Login rejected: project {project_id} is not active",
                ip_address=ip_address,
            )
            raise InputValidationError()

        if self.tracker.is_locked(username):
            self.audit.record(
                "login_locked",
                f"Account locked: {username}",
                ip_address=ip_address,
            )
            raise AccountLockedError(retry_after=self.tracker.seconds_until_unlock(username))

        user = self.authenticate(username, password)
        if user is None:
            self.tracker.record_failure(username, ip_address)
            self.session.commit()
            self.audit.record(
                "login_failed",
                f"Failed login attempt for username: {username}",
                ip_address=ip_address,
            )
            raise InvalidCredentialsError()

        remember_token = None
        if remember_me:
            remember_token = self.remember.issue(user.id)
        self.users.touch_last_login(user, self.clock())
        self.session.commit()

        context = SessionContext(
            user_id=user.id,
            name=user.name,
            role=user.role,
            project_id=project.id,
        )
        self.audit.record(
            "login_success",
            f"User ID {user.id} ({username}) logged in successfully",
            user_id=user.id,
            ip_address=ip_address,
        )
        logger.info(
            "Login succeeded",
            extra={"user_id": user.id, "project_id": project.id, "remembered": remember_me},
        )
        return LoginResult(user=user, context=context, remember_token=remember_token)

    def logout(self, context: SessionContext | None, ip_address: str = "unknown") -> None:
        """Revoke the user's remember token; the caller clears the cookies."""
        if context is None:
            return
        self.remember.revoke(context.user_id)
        self.session.commit()
        self.audit.record(
            "logout",
            "User logged out successfully",
            user_id=context.user_id,
            ip_address=ip_address,
        )

    def select_project(
        self,
        context: SessionContext,
        project_id: int,
        ip_address: str = "unknown",
    ) -> SessionContext:
        """Rebind an authenticated session to another active project."""
        if not project_id or project_id <= 0:
            raise InputValidationError("Please select a project.")
        project = self.projects.get_active(project_id)
        if project is None:
            raise InputValidationError("Please select a project.")
        self.audit.record(
            "project_selected",
            f"Switched to project {project.id} ({project.name})",
            user_id=context.user_id,
            ip_address=ip_address,
        )
        return context.model_copy(update={"project_id": project.id})
