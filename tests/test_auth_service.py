"""Unit tests for app.services.auth: authenticate, login flow with lockout, logout, project switching."""

import unittest
from unittest.mock import MagicMock

from helpers import DEFAULT_PASSWORD, DatabaseTestCase, FixedClock

from app.core.clock import as_utc
from app.core.config import get_settings
from app.models import ActivityLog, LoginAttempt, RememberToken
from app.schemas.auth import SessionContext
from app.services.audit import AuditTrail
from app.services.auth import AuthService
from app.services.errors import (
    AccountLockedError,
    InputValidationError,
    InvalidCredentialsError,
    LOCKED_MESSAGE,
    VALIDATION_MESSAGE,
)


class TestAuthenticateWithRepositoryDouble(unittest.TestCase):
    """authenticate fails closed without touching password hashing when the user is unknown."""

    def test_unknown_username_returns_none(self) -> None:
        users = MagicMock()
        users.get_by_username.return_value = None
        service = AuthService(MagicMock(), get_settings(), users=users)
        self.assertIsNone(service.authenticate("ghost", "anything"))
        users.get_by_username.assert_called_once_with("ghost")


class AuthServiceTestCase(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.clock = FixedClock()
        self.user = self.add_user()
        self.project = self.add_project()
        self.service = AuthService(
            self.db,
            get_settings(),
            audit=AuditTrail(self.session_factory, clock=self.clock),
            clock=self.clock,
        )

    def _actions(self) -> list[str]:
        with self.session_factory() as s:
            return [row.action for row in s.query(ActivityLog).order_by(ActivityLog.id)]


class TestAuthenticate(AuthServiceTestCase):
    def test_unknown_username_returns_none_for_any_password(self) -> None:
        self.assertIsNone(self.service.authenticate("nobody", DEFAULT_PASSWORD))
        self.assertIsNone(self.service.authenticate("nobody", ""))

    def test_correct_password_returns_user(self) -> None:
        user = self.service.authenticate("admin", DEFAULT_PASSWORD)
        self.assertIsNotNone(user)
        self.assertEqual(user.id, self.user.id)

    def test_any_single_wrong_character_returns_none(self) -> None:
        for i in range(len(DEFAULT_PASSWORD)):
            wrong = DEFAULT_PASSWORD[:i] + ("x" if DEFAULT_PASSWORD[i] != "x" else "y") + DEFAULT_PASSWORD[i + 1 :]
            with self.subTest(position=i):
                self.assertIsNone(self.service.authenticate("admin", wrong))

    def test_characters_past_bcrypt_limit_are_not_ignored(self) -> None:
        longest = "Aa1" + "x" * 69
        self.add_user(username="longpass", password=longest)
        self.assertIsNotNone(self.service.authenticate("longpass", longest))
        self.assertIsNone(self.service.authenticate("longpass", longest[:-1] + "y"))
        self.assertIsNone(self.service.authenticate("longpass", longest + "y"))
        self.assertIsNone(self.service.authenticate("longpass", "Aa1" + "x" * 96 + "y"))


class TestLoginValidation(AuthServiceTestCase):
    def test_missing_fields_raise_generic_validation_error(self) -> None:
        cases = [
            ("", DEFAULT_PASSWORD, self.project.id),
            ("   ", DEFAULT_PASSWORD, self.project.id),
            ("admin", "", self.project.id),
            ("admin", DEFAULT_PASSWORD, 0),
            ("admin", DEFAULT_PASSWORD, -3),
            (None, DEFAULT_PASSWORD, self.project.id),
            ("admin", None, self.project.id),
            ("admin", DEFAULT_PASSWORD, None),
            ("x" * 300, DEFAULT_PASSWORD, self.project.id),
        ]
        for username, password, project_id in cases:
            with self.subTest(username=username, project_id=project_id):
                with self.assertRaises(InputValidationError) as ctx:
                    self.service.login(username, password, project_id)
                self.assertEqual(ctx.exception.message, VALIDATION_MESSAGE)

    def test_inactive_project_is_rejected_before_credentials(self) -> None:
        paused = self.add_project(name="Old Yard", status="paused")
        with self.assertRaises(InputValidationError):
            self.service.login("admin", "wrong-password", paused.id)
        self.assertEqual(self.db.query(LoginAttempt).count(), 0)

    def test_validation_failures_are_audited(self) -> None:
        with self.assertRaises(InputValidationError):
            self.service.login("", "", 0)
        self.assertEqual(self._actions(), ["login_validation_failed"])


class TestLoginSuccess(AuthServiceTestCase):
    def test_returns_session_context_bound_to_project(self) -> None:
        result = self.service.login("admin", DEFAULT_PASSWORD, self.project.id, ip_address="10.1.1.1")
        self.assertEqual(
            result.context,
            SessionContext(
                user_id=self.user.id,
                name="Site Admin",
                role="admin",
                project_id=self.project.id,
                authenticated=True,
            ),
        )
        self.assertIsNone(result.remember_token)

    def test_username_is_trimmed(self) -> None:
        result = self.service.login("  admin ", DEFAULT_PASSWORD, self.project.id)
        self.assertEqual(result.user.id, self.user.id)

    def test_updates_last_login(self) -> None:
        self.service.login("admin", DEFAULT_PASSWORD, self.project.id)
        self.db.refresh(self.user)
        self.assertEqual(as_utc(self.user.last_login), self.clock.now)

    def test_remember_me_issues_single_token(self) -> None:
        result = self.service.login("admin", DEFAULT_PASSWORD, self.project.id, remember_me=True)
        self.assertIsNotNone(result.remember_token)
        row = self.db.query(RememberToken).filter(RememberToken.user_id == self.user.id).one()
        self.assertEqual(row.token, result.remember_token)

    def test_success_is_audited(self) -> None:
        self.service.login("admin", DEFAULT_PASSWORD, self.project.id, ip_address="10.1.1.1")
        self.assertEqual(self._actions(), ["login_success"])


class TestLoginFailureAndLockout(AuthServiceTestCase):
    def test_wrong_password_records_attempt_and_raises(self) -> None:
        with self.assertRaises(InvalidCredentialsError):
            self.service.login("admin", "Wrong-pass1", self.project.id, ip_address="10.2.2.2")
        attempt = self.db.query(LoginAttempt).one()
        self.assertEqual(attempt.username, "admin")
        self.assertEqual(attempt.ip_address, "10.2.2.2")
        self.assertEqual(self._actions(), ["login_failed"])

    def test_unknown_username_gives_same_error_as_wrong_password(self) -> None:
        with self.assertRaises(InvalidCredentialsError) as unknown:
            self.service.login("ghost", DEFAULT_PASSWORD, self.project.id)
        with self.assertRaises(InvalidCredentialsError) as wrong:
            self.service.login("admin", "Wrong-pass1", self.project.id)
        self.assertEqual(unknown.exception.message, wrong.exception.message)

    def test_sixth_attempt_is_locked_even_with_correct_password(self) -> None:
        for _ in range(5):
            with self.assertRaises(InvalidCredentialsError):
                self.service.login("admin", "Wrong-pass1", self.project.id)
            self.clock.advance(minutes=2)
        with self.assertRaises(AccountLockedError) as ctx:
            self.service.login("admin", DEFAULT_PASSWORD, self.project.id)
        self.assertEqual(ctx.exception.message, LOCKED_MESSAGE)
        self.assertGreater(ctx.exception.retry_after, 0)
        self.db.refresh(self.user)
        self.assertIsNone(self.user.last_login)

    def test_locked_attempt_is_not_recorded_as_failure(self) -> None:
        for _ in range(5):
            with self.assertRaises(InvalidCredentialsError):
                self.service.login("admin", "Wrong-pass1", self.project.id)
        with self.assertRaises(AccountLockedError):
            self.service.login("admin", "Wrong-pass1", self.project.id)
        self.assertEqual(self.db.query(LoginAttempt).count(), 5)
        self.assertEqual(self._actions()[-1], "login_locked")

    def test_locked_username_with_inactive_project_gets_validation_error(self) -> None:
        paused = self.add_project(name="Old Yard", status="paused")
        for _ in range(5):
            with self.assertRaises(InvalidCredentialsError):
                self.service.login("admin", "Wrong-pass1", self.project.id)
        with self.assertRaises(InputValidationError) as ctx:
            self.service.login("admin", DEFAULT_PASSWORD, paused.id)
        self.assertEqual(ctx.exception.message, VALIDATION_MESSAGE)
        self.assertEqual(self._actions()[-1], "login_validation_failed")
        with self.assertRaises(AccountLockedError):
            self.service.login("admin", DEFAULT_PASSWORD, self.project.id)

    def test_lock_expires_after_window(self) -> None:
        for _ in range(5):
            with self.assertRaises(InvalidCredentialsError):
                self.service.login("admin", "Wrong-pass1", self.project.id)
        self.clock.advance(minutes=16)
        result = self.service.login("admin", DEFAULT_PASSWORD, self.project.id)
        self.assertEqual(result.user.id, self.user.id)


class TestLogoutAndProjectSelection(AuthServiceTestCase):
    def _context(self) -> SessionContext:
        return SessionContext(
            user_id=self.user.id, name="Site Admin", role="admin", project_id=self.project.id
        )

    def test_logout_revokes_remember_token(self) -> None:
        self.service.login("admin", DEFAULT_PASSWORD, self.project.id, remember_me=True)
        self.service.logout(self._context())
        self.assertEqual(self.db.query(RememberToken).count(), 0)
        self.assertEqual(self._actions()[-1], "logout")

    def test_logout_without_session_is_a_no_op(self) -> None:
        self.service.logout(None)
        self.assertEqual(self._actions(), [])

    def test_select_project_rebinds_context(self) -> None:
        other = self.add_project(name="Warrington Hub")
        updated = self.service.select_project(self._context(), other.id)
        self.assertEqual(updated.project_id, other.id)
        self.assertEqual(updated.user_id, self.user.id)

    def test_select_inactive_project_is_rejected(self) -> None:
        done = self.add_project(name="Finished Job", status="completed")
        with self.assertRaises(InputValidationError):
            self.service.select_project(self._context(), done.id)


if __name__ == "__main__":
    unittest.main()
