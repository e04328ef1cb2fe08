"""Audit trail rows."""

from datetime import datetime

from sqlalchemy.orm import Session

from app.models import ActivityLog


class ActivityLogRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(
        self,
        action: str,
        details: str,
        user_id: int | None,
        ip_address: str | None,
        when: datetime,
    ) -> ActivityLog:
        row = ActivityLog(
            user_id=user_id,
            action=action,
            details=details,
            ip_address=ip_address,
            timestamp=when,
        )
        self.session.add(row)
        self.session.flush()
        return row

    def list_for_user(self, user_id: int) -> list[ActivityLog]:
        return (
            self.session.query(ActivityLog)
            .filter(ActivityLog.user_id == user_id)
            .order_by(ActivityLog.id.asc())
            .all()
        )
