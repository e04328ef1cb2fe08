"""Password reset: issue a 1-hour emailed token, validate it, and consume it to set a new password."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import TYPE_CHECKING
from urllib.parse import urlencode

from sqlalchemy.orm import Session

from app.core.clock import as_utc, utcnow
from app.core.security import generate_token, hash_password, password_policy_error
from app.models import User
from app.repositories import PasswordResetRepository, UserRepository
from app.services.audit import AuditTrail
from app.services.email_templates import (
    PASSWORD_CHANGED_SUBJECT,
    RESET_SUBJECT,
    password_changed_email,
    password_reset_email,
)
from app.services.errors import (
    ExpiredResetTokenError,
    InputValidationError,
    InvalidResetTokenError,
    MailDispatchError,
    WeakPasswordError,
)
from app.services.mailer import Mailer

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

# Same text whether or not the email matched an account.
RESET_REQUESTED_MESSAGE = (
    "If your email address exists in our system, you will receive password reset instructions."
)
RESET_COMPLETED_MESSAGE = (
    "Your password has been reset successfully. You can now log in with your new password."
)


class PasswordResetService:
    """
    Reset token lifecycle: none -> issued (TTL) -> consumed | expired.

    A new request replaces any outstanding token for the user. A token is
    deleted when it is used to change the password, and when it is presented
    after expiry.
    """

    def __init__(
        self,
        session: Session,
        settings: Settings,
        mailer: Mailer,
        *,
        users: UserRepository | None = None,
        resets: PasswordResetRepository | None = None,
        audit: AuditTrail | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.session = session
        self.settings = settings
        self.mailer = mailer
        self.users = users or UserRepository(session)
        self.resets = resets or PasswordResetRepository(session)
        self.audit = audit or AuditTrail(None)
        self.clock = clock
        self.ttl = timedelta(minutes=settings.RESET_TOKEN_TTL_MINUTES)

    def reset_link(self, token: str) -> str:
        base = self.settings.RESET_URL_BASE
        separator = "&" if "?" in base else "?"
        return f"{base}{separator}{urlencode({'token': token})}"

    def request_reset(self, email: str, ip_address: str = "unknown") -> str:
        """
        Issue a reset token and email the link when the address belongs to a user.

        Returns the same message for known and unknown addresses. Raises
        InputValidationError for a blank address and MailDispatchError when the
        email cannot be handed to the transport (the token stays stored).
        """
        email = (email or "").strip()
        if not email:
            raise InputValidationError("Please enter your email address.")

        user = self.users.get_by_email(email)
        if user is None:
            self.audit.record(
                "password_reset_invalid_email",
                f"Reset attempted for unknown email: {email}",
                ip_address=ip_address,
            )
            return RESET_REQUESTED_MESSAGE

        now = self.clock()
        token = generate_token()
        self.resets.replace_for_user(user.id, token, now + self.ttl)
        self.session.commit()

        body = password_reset_email(
            name=user.name,
            reset_link=self.reset_link(token),
            ttl_minutes=self.settings.RESET_TOKEN_TTL_MINUTES,
            when=now,
        )
        try:
            self.mailer.send(user.email, RESET_SUBJECT, body)
        except MailDispatchError:
            self.audit.record(
                "password_reset_mail_failed",
                f"Failed to send reset email to: {email}",
                user_id=user.id,
                ip_address=ip_address,
            )
            raise

        self.audit.record(
            "password_reset_requested",
            f"Reset request for user ID {user.id} (email: {email})",
            user_id=user.id,
            ip_address=ip_address,
        )
        return RESET_REQUESTED_MESSAGE

    def validate_token(self, token: str, ip_address: str = "unknown") -> User:
        """Return the user owning a live token. Expired tokens are removed before raising."""
        token = (token or "").strip()
        row = self.resets.get_by_token(token) if token else None
        if row is None:
            self.audit.record(
                "reset_token_invalid",
                "Invalid password reset token attempted",
                ip_address=ip_address,
            )
            raise InvalidResetTokenError()
        if as_utc(row.expires_at) <= self.clock():
            user_id = row.user_id
            self.resets.delete_token(token)
            self.session.commit()
            self.audit.record(
                "reset_token_expired",
                "Expired password reset token used",
                user_id=user_id,
                ip_address=ip_address,
            )
            raise ExpiredResetTokenError()
        user = self.users.get_by_id(row.user_id)
        if user is None:
            raise InvalidResetTokenError()
        return user

    def confirm_reset(
        self,
        token: str,
        password: str,
        confirm_password: str,
        ip_address: str = "unknown",
    ) -> str:
        """Set a new password using a live token, consuming every reset token of the user."""
        user = self.validate_token(token, ip_address=ip_address)

        if not password or not confirm_password:
            raise WeakPasswordError("Please enter and confirm your new password.")
        if password != confirm_password:
            raise WeakPasswordError("Passwords do not match.")
        problem = password_policy_error(password)
        if problem:
            raise WeakPasswordError(problem)

        self.users.set_password_hash(user, hash_password(password))
        self.resets.delete_for_user(user.id)
        self.session.commit()
        self.audit.record(
            "password_reset_success",
            "Password reset completed successfully",
            user_id=user.id,
            ip_address=ip_address,
        )

        try:
            self.mailer.send(
                user.email,
                PASSWORD_CHANGED_SUBJECT,
                password_changed_email(user.name, self.clock()),
            )
        except MailDispatchError as e:
            logger.warning("Password change notification not sent for user_id=%s: %s", user.id, e)
        return RESET_COMPLETED_MESSAGE
