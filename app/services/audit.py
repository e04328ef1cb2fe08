"""Audit trail for authentication events: security log line plus an activity_log row."""

import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.orm import Session, sessionmaker

from app.core.clock import utcnow
from app.repositories import ActivityLogRepository

logger = logging.getLogger(__name__)
security_logger = logging.getLogger("app.security")


class AuditTrail:
    """
    Record auth events without ever failing the caller.

    Rows are written through their own short-lived session so that a failed
    audit insert cannot roll back (or be rolled back by) the request's unit of work.
    """

    def __init__(
        self,
        session_factory: sessionmaker | Callable[[], Session] | None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.session_factory = session_factory
        self.clock = clock

    def record(
        self,
        action: str,
        details: str,
        user_id: int | None = None,
        ip_address: str | None = None,
    ) -> None:
        security_logger.info(
            "%s | %s",
            action,
            details,
            extra={"audit_action": action, "user_id": user_id, "ip_address": ip_address},
        )
        if self.session_factory is None:
            return
        try:
            session = self.session_factory()
        except Exception as e:
            logger.warning("Audit session unavailable for %s: %s", action, e)
            return
        try:
            ActivityLogRepository(session).add(
                action=action,
                details=details,
                user_id=user_id,
                ip_address=ip_address,
                when=self.clock(),
            )
            session.commit()
        except Exception as e:
            session.rollback()
            logger.warning("Audit write failed for %s (continuing): %s", action, e)
        finally:
            session.close()
