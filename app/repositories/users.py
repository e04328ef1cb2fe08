"""User lookups and mutations."""

from datetime import datetime

from sqlalchemy.orm import Session

from app.models import User


class UserRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, user_id: int) -> User | None:
        return self.session.query(User).filter(User.id == user_id).first()

    def get_by_username(self, username: str) -> User | None:
        return self.session.query(User).filter(User.username == username).first()

    def get_by_email(self, email: str) -> User | None:
        return self.session.query(User).filter(User.email == email).first()

    def add(self, user: User) -> User:
        self.session.add(user)
        self.session.flush()
        return user

    def touch_last_login(self, user: User, when: datetime) -> None:
        user.last_login = when
        self.session.flush()

    def set_password_hash(self, user: User, password_hash: str) -> None:
        user.password_hash = password_hash
        self.session.flush()
