from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from contact_api.core.config import Settings
from contact_api.core.database import Base
from contact_api.core.rate_limit import RateLimiter
from contact_api.main import create_app
from contact_api.models.contact import ContactSubmission  # noqa: F401
from contact_api.services.email_service import NotificationSender


class FakeTransport:
    """Records messages instead of talking to SMTP; can be told to fail."""

    def __init__(self, fail_on=None):
        self.sent = []
        self.fail_on = fail_on

    def send(self, from_email, to_email, msg):
        if self.fail_on is not None and len(self.sent) + 1 == self.fail_on:
            raise ConnectionError("smtp unavailable")
        self.sent.append({"from": from_email, "to": to_email, "subject": msg["Subject"], "msg": msg})


class SteppingClock:
    def __init__(self, start=None, step=timedelta(seconds=1)):
        self.current = start or datetime(2026, 1, 1, tzinfo=timezone.utc)
        self.step = step

    def __call__(self):
        self.current += self.step
        return self.current


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("OWNER_EMAIL", "owner@example.com")
    monkeypatch.setenv("OWNER_PASS", "secret")
    monkeypatch.setenv("OWNER_NAME", "Site Owner")
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.delenv("ADMIN_TOKEN", raising=False)
    return monkeypatch


@pytest.fixture
def settings(env):
    return Settings()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def notifier(settings, transport):
    return NotificationSender.from_settings(settings, transport=transport)


@pytest.fixture
def app(settings, notifier):
    return create_app(settings=settings, notifier=notifier, rate_limiter=RateLimiter())


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
