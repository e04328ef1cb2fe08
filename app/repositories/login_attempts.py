"""Append-only store of failed login attempts."""

from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models import LoginAttempt


class LoginAttemptRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, username: str, ip_address: str, when: datetime) -> LoginAttempt:
        attempt = LoginAttempt(username=username, ip_address=ip_address, attempt_time=when)
        self.session.add(attempt)
        self.session.flush()
        return attempt

    def count_since(self, username: str, since: datetime) -> int:
        """Number of attempts for username with attempt_time strictly after since."""
        return (
            self.session.query(func.count(LoginAttempt.id))
            .filter(LoginAttempt.username == username, LoginAttempt.attempt_time > since)
            .scalar()
            or 0
        )

    def times_since(self, username: str, since: datetime) -> list[datetime]:
        """Attempt timestamps after since, oldest first."""
        rows = (
            self.session.query(LoginAttempt.attempt_time)
            .filter(LoginAttempt.username == username, LoginAttempt.attempt_time > since)
            .order_by(LoginAttempt.attempt_time.asc())
            .all()
        )
        return [row[0] for row in rows]

    def delete_older_than(self, cutoff: datetime) -> int:
        return (
            self.session.query(LoginAttempt)
            .filter(LoginAttempt.attempt_time < cutoff)
            .delete(synchronize_session=False)
        )
