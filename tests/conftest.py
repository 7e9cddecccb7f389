"""
Pytest configuration file.
"""
import pytest
from unittest.mock import Mock, patch
from datetime import datetime, timedelta, timezone
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.core.database import Base
from app.models.verification_code import VerificationCode  # noqa: F401
from app.services.verification_store import (
    DatabaseVerificationCodeStore,
    InMemoryVerificationCodeStore,
)
from main import app

SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime = None):
        self.now = start or datetime(2025, 9, 21, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(scope="function")
def session_factory():
    """Create test database."""
    Base.metadata.create_all(bind=engine)
    yield TestingSessionLocal
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(params=["memory", "database"])
def store(request, clock):
    """Verification store for each backend, driven by the fake clock."""
    if request.param == "memory":
        yield InMemoryVerificationCodeStore("password_reset", clock=clock)
    else:
        session_factory = request.getfixturevalue("session_factory")
        yield DatabaseVerificationCodeStore(session_factory, "password_reset", clock=clock)


@pytest.fixture(autouse=True)
def mock_email_service():
    """Mock email service to avoid actual email sending."""
    with patch('app.core.dependencies.EmailService') as mock_email:
        mock_instance = Mock()
        mock_instance.send_verification_code.return_value = None
        mock_instance.send_ticket.return_value = None
        mock_instance.send_welcome.return_value = None
        mock_email.return_value = mock_instance
        yield mock_instance


@pytest.fixture(scope="function")
def client():
    """Create test client."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def last_sent_code(mock_email_service):
    """Return the code handed to the (mocked) email service most recently."""
    def _last_sent_code() -> str:
        return mock_email_service.send_verification_code.call_args.kwargs["code"]
    return _last_sent_code
