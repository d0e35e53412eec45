"""Shared fixtures: in-memory database, fake clock, fake notifier."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from care4u.database.repository import IdentityStore
from care4u.models.otp import OTPChallenge  # noqa: F401
from care4u.models.user import Base
from care4u.services.auth_service import AuthService
from care4u.services.otp_manager import OTPManager
from care4u.services.token_issuer import TokenIssuer

OTP_TTL = timedelta(minutes=1)


class FakeClock:
    """Controllable replacement for ``datetime.now(UTC)``."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


class ScriptedCodes:
    """Hands out predetermined OTP codes in order."""

    def __init__(self, *codes: str) -> None:
        self._codes = list(codes)
        self.issued: list[str] = []

    def __call__(self) -> str:
        code = self._codes.pop(0)
        self.issued.append(code)
        return code


# ── In-memory test database ─────────────────────────────

@pytest_asyncio.fixture
async def db_session():
    """Create tables in a fresh in-memory DB and yield a session."""
    engine = create_async_engine("sqlite+aiosqlite://", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def store(db_session) -> IdentityStore:
    return IdentityStore(db_session)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 3, 1, 9, 0, tzinfo=UTC))


@pytest.fixture
def codes() -> ScriptedCodes:
    return ScriptedCodes("123456", "654321", "000042", "999999", "314159")


@pytest.fixture
def notifier():
    """Mocked notifier — never actually sends emails."""
    mock = AsyncMock()
    mock.send_otp.return_value = True
    return mock


@pytest.fixture
def otp_manager(store, notifier, clock, codes) -> OTPManager:
    return OTPManager(store, notifier, ttl=OTP_TTL, clock=clock, code_factory=codes)


@pytest.fixture
def token_issuer(clock) -> TokenIssuer:
    return TokenIssuer(
        secret="test-secret-key-for-session-tokens-0001",
        temporary_ttl=timedelta(hours=1),
        permanent_ttl=timedelta(days=30),
        clock=clock,
    )


@pytest.fixture
def auth_service(store, otp_manager, token_issuer) -> AuthService:
    return AuthService(store, otp_manager, token_issuer)
