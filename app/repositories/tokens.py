"""Per-user token stores. Both enforce one row per user by delete-then-insert."""

from datetime import datetime

from sqlalchemy.orm import Session

from app.models import PasswordResetToken, RememberToken


class _UserTokenRepository:
    model: type[RememberToken] | type[PasswordResetToken]

    def __init__(self, session: Session) -> None:
        self.session = session

    def replace_for_user(self, user_id: int, token: str, expires_at: datetime):
        """Drop any existing row for user_id and store the new token."""
        self.delete_for_user(user_id)
        row = self.model(user_id=user_id, token=token, expires_at=expires_at)
        self.session.add(row)
        self.session.flush()
        return row

    def get_for_user(self, user_id: int):
        return self.session.query(self.model).filter(self.model.user_id == user_id).first()

    def get_by_token(self, token: str):
        return self.session.query(self.model).filter(self.model.token == token).first()

    def count_for_user(self, user_id: int) -> int:
        return self.session.query(self.model).filter(self.model.user_id == user_id).count()

    def delete_for_user(self, user_id: int) -> int:
        deleted = (
            self.session.query(self.model)
            .filter(self.model.user_id == user_id)
            .delete(synchronize_session=False)
        )
        # Flush so the unique user_id slot is free before the next insert.
        self.session.flush()
        return deleted

    def delete_token(self, token: str) -> int:
        return (
            self.session.query(self.model)
            .filter(self.model.token == token)
            .delete(synchronize_session=False)
        )

    def delete_expired(self, now: datetime) -> int:
        return (
            self.session.query(self.model)
            .filter(self.model.expires_at <= now)
            .delete(synchronize_session=False)
        )


class RememberTokenRepository(_UserTokenRepository):
    model = RememberToken


class PasswordResetRepository(_UserTokenRepository):
    model = PasswordResetToken
