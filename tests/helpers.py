"""Shared fixtures for DB-backed tests: a throwaway SQLite file per test case."""

import tempfile
import unittest
from datetime import datetime, timedelta, timezone

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.security import hash_password
from app.models import Base, Project, User
from app.services.errors import MailDispatchError

T0 = datetime(2025, 6, 24, 9, 0, 0, tzinfo=timezone.utc)
DEFAULT_PASSWORD = "Sitework2025"


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class RecordingMailer:
    """Mailer double: keeps sent messages, or fails when fail=True."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[tuple[str, str, str]] = []

    def send(self, to: str, subject: str, html_body: str) -> None:
        if self.fail:
            raise MailDispatchError()
        self.sent.append((to, subject, html_body))


class DatabaseTestCase(unittest.TestCase):
    """Creates all tables in a fresh SQLite file; self.db is an open session."""

    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        self.engine = create_engine(
            f"sqlite:///{self._tmpdir.name}/test.db",
            connect_args={"check_same_thread": False},
        )
        Base.metadata.create_all(self.engine)
        self.session_factory = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)
        self.db = self.session_factory()

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()
        self._tmpdir.cleanup()

    def add_user(
        self,
        username: str = "admin",
        password: str = DEFAULT_PASSWORD,
        email: str | None = None,
        name: str = "Site Admin",
        role: str = "admin",
    ) -> User:
        user = User(
            username=username,
            password_hash=hash_password(password),
            name=name,
            email=email or f"{username}@example.com",
            role=role,
        )
        self.db.add(user)
        self.db.commit()
        return user

    def add_project(self, name: str = "Irlam Depot", status: str = "active") -> Project:
        project = Project(name=name, status=status)
        self.db.add(project)
        self.db.commit()
        return project
