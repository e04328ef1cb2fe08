"""Data retention: purge old login attempts and expired remember/reset tokens."""

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, NamedTuple

from sqlalchemy.orm import Session

from app.repositories import (
    LoginAttemptRepository,
    PasswordResetRepository,
    RememberTokenRepository,
)

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


class RetentionResult(NamedTuple):
    attempts_deleted: int
    remember_tokens_deleted: int
    reset_tokens_deleted: int


def run_retention(
    session: Session,
    settings: "Settings",
    now: datetime | None = None,
) -> RetentionResult:
    """
    Delete login attempts older than RETENTION_HOURS and tokens past expiry.

    The attempt cutoff never reaches inside the lockout window, so purging
    cannot unlock an account early. Idempotent: safe to run repeatedly.
    """
    if not settings.RETENTION_ENABLED:
        logger.info("Retention is disabled (RETENTION_ENABLED=false); skipping.")
        return RetentionResult(0, 0, 0)

    now = now or datetime.now(timezone.utc)
    keep = max(
        timedelta(hours=settings.RETENTION_HOURS),
        timedelta(minutes=settings.LOCKOUT_WINDOW_MINUTES),
    )
    cutoff = now - keep
    result = RetentionResult(
        attempts_deleted=LoginAttemptRepository(session).delete_older_than(cutoff),
        remember_tokens_deleted=RememberTokenRepository(session).delete_expired(now),
        reset_tokens_deleted=PasswordResetRepository(session).delete_expired(now),
    )
    session.commit()

    if any(result):
        logger.info(
            "Retention run: cutoff=%s, attempts_deleted=%s, remember_tokens_deleted=%s, "
            "reset_tokens_deleted=%s",
            cutoff.isoformat(),
            result.attempts_deleted,
            result.remember_tokens_deleted,
            result.reset_tokens_deleted,
        )
    return result
