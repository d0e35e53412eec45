"""Database engine and async session factory construction.

Nothing here is created at import time: the process entry point builds
the engine and session factory and owns their lifecycle.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from care4u.models.otp import OTPChallenge  # noqa: F401  (registers the table)
from care4u.models.user import Base


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine for *database_url*."""
    return create_async_engine(database_url, echo=echo)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Return a session factory bound to *engine*."""
    return async_sessionmaker(engine, expire_on_commit=False)


async def init_db(engine: AsyncEngine) -> None:
    """Create all tables that don't yet exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
