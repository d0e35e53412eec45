"""FastAPI dependencies — per-request services built from app state."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import timedelta

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from care4u.database.repository import IdentityStore
from care4u.services.auth_service import AuthService
from care4u.services.otp_manager import OTPManager
from care4u.services.result import InvalidTokenError
from care4u.services.token_issuer import TokenClaims, TokenIssuer

bearer_scheme = HTTPBearer(auto_error=False)


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """One session per request; closing it discards anything uncommitted."""
    async with request.app.state.session_factory() as session:
        yield session


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_auth_service(
    request: Request, session: AsyncSession = Depends(get_db_session)
) -> AuthService:
    """Wire an ``AuthService`` around this request's database session."""
    state = request.app.state
    store = IdentityStore(session)
    otp_manager = OTPManager(
        store,
        state.notifier,
        ttl=timedelta(minutes=state.settings.otp_ttl_minutes),
    )
    return AuthService(store, otp_manager, state.token_issuer)


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No token provided")
    return credentials.credentials


def get_current_claims(
    token: str = Depends(get_bearer_token),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
) -> TokenClaims:
    """Identity of the caller; any token problem is a plain 401."""
    try:
        return token_issuer.validate_token(token)
    except InvalidTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
