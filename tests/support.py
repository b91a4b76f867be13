"""Shared fixtures for tests: in-memory SQLite store, fake mailer, API client wiring."""

import re
import unittest
from collections.abc import Generator
from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from portfolio.core.database import get_db
from portfolio.core.security import create_access_token, hash_password
from portfolio.main import app
from portfolio.models import Base, User
from portfolio.services.mailer import MailDeliveryError, get_mailer

STRONG_PASSWORD = "Abcdef1!"
RESET_LINK_RE = re.compile(r"/reset-password/([^\"<\s]+)")


class FakeMailer:
    """Records messages instead of sending them; fail=True simulates a transport error."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[tuple[str, str, str]] = []

    def send(self, to: str, subject: str, html: str) -> None:
        if self.fail:
            raise MailDeliveryError("Error sending email.")
        self.sent.append((to, subject, html))

    def last_reset_token(self) -> str:
        match = RESET_LINK_RE.search(self.sent[-1][2])
        assert match is not None, "no reset link in last email"
        return match.group(1)


def make_session_factory() -> sessionmaker:
    """Fresh in-memory database with all tables created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def add_user(
    db: Session,
    name: str = "Ann",
    email: str = "ann@x.com",
    password: str = STRONG_PASSWORD,
    is_admin: bool = False,
) -> User:
    user = User(
        name=name,
        email=email,
        password_hash=hash_password(password),
        is_admin=is_admin,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def bearer(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


class StoreTestCase(unittest.TestCase):
    """Fresh database per test, with cheap bcrypt rounds."""

    def setUp(self) -> None:
        rounds = patch("portfolio.core.security.BCRYPT_ROUNDS", 4)
        rounds.start()
        self.addCleanup(rounds.stop)
        self.SessionLocal = make_session_factory()
        self.db = self.SessionLocal()
        self.addCleanup(self.db.close)


class ApiTestCase(StoreTestCase):
    """StoreTestCase plus a TestClient whose get_db and get_mailer point at test doubles."""

    def setUp(self) -> None:
        super().setUp()
        self.mailer = FakeMailer()

        def override_get_db() -> Generator[Session, None, None]:
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_mailer] = lambda: self.mailer
        self.addCleanup(app.dependency_overrides.clear)
        self.client = TestClient(app)

    def fresh(self, user_id: int) -> User | None:
        """Re-read a user from the store, bypassing the test session's identity map."""
        with self.SessionLocal() as db:
            user = db.get(User, user_id)
            if user is not None:
                db.expunge(user)
            return user
