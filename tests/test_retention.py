"""Unit and integration tests for data retention: purge old attempts and expired tokens."""

import unittest
from datetime import timedelta
from unittest.mock import MagicMock

from helpers import DatabaseTestCase, T0

from app.core.config import get_settings
from app.models import LoginAttempt, PasswordResetToken, RememberToken
from app.services.retention import RetentionResult, run_retention


def _settings(enabled: bool = True, hours: int = 48) -> MagicMock:
    settings = MagicMock()
    settings.RETENTION_ENABLED = enabled
    settings.RETENTION_HOURS = hours
    settings.LOCKOUT_WINDOW_MINUTES = 15
    return settings


class TestRetentionDisabled(unittest.TestCase):
    """When RETENTION_ENABLED is False, run_retention does nothing."""

    def test_returns_zero_and_does_not_query(self) -> None:
        session = MagicMock()
        result = run_retention(session, _settings(enabled=False))
        self.assertEqual(result, RetentionResult(0, 0, 0))
        session.query.assert_not_called()
        session.commit.assert_not_called()


class TestRetentionNothingToDelete(unittest.TestCase):
    def test_returns_zero_and_commits(self) -> None:
        session = MagicMock()
        session.query.return_value.filter.return_value.delete.return_value = 0
        result = run_retention(session, _settings())
        self.assertEqual(result, RetentionResult(0, 0, 0))
        session.commit.assert_called_once()


class TestRetentionAgainstDatabase(DatabaseTestCase):
    """Insert old and fresh rows, run retention, assert only stale rows are gone."""

    def setUp(self) -> None:
        super().setUp()
        self.user = self.add_user()
        self.other = self.add_user(username="manager", role="manager")

    def test_purges_stale_rows_only(self) -> None:
        self.db.add_all(
            [
                LoginAttempt(username="admin", ip_address="1.1.1.1", attempt_time=T0 - timedelta(hours=49)),
                LoginAttempt(username="admin", ip_address="1.1.1.1", attempt_time=T0 - timedelta(hours=1)),
                RememberToken(user_id=self.user.id, token="a" * 64, expires_at=T0 - timedelta(minutes=1)),
                RememberToken(user_id=self.other.id, token="b" * 64, expires_at=T0 + timedelta(days=3)),
                PasswordResetToken(user_id=self.user.id, token="c" * 64, expires_at=T0 - timedelta(hours=2)),
            ]
        )
        self.db.commit()

        result = run_retention(self.db, get_settings(), now=T0)

        self.assertEqual(result, RetentionResult(1, 1, 1))
        self.assertEqual(self.db.query(LoginAttempt).count(), 1)
        self.assertEqual(self.db.query(RememberToken).one().user_id, self.other.id)
        self.assertEqual(self.db.query(PasswordResetToken).count(), 0)

    def test_never_purges_inside_lockout_window(self) -> None:
        self.db.add(
            LoginAttempt(username="admin", ip_address="1.1.1.1", attempt_time=T0 - timedelta(minutes=90))
        )
        self.db.commit()
        settings = _settings(hours=1)
        settings.LOCKOUT_WINDOW_MINUTES = 120
        result = run_retention(self.db, settings, now=T0)
        self.assertEqual(result.attempts_deleted, 0)

    def test_is_idempotent(self) -> None:
        self.db.add(
            LoginAttempt(username="admin", ip_address="1.1.1.1", attempt_time=T0 - timedelta(days=5))
        )
        self.db.commit()
        first = run_retention(self.db, get_settings(), now=T0)
        second = run_retention(self.db, get_settings(), now=T0)
        self.assertEqual(first.attempts_deleted, 1)
        self.assertEqual(second, RetentionResult(0, 0, 0))


if __name__ == "__main__":
    unittest.main()
