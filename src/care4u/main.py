"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from care4u.api.auth_router import router as auth_router
from care4u.config import Settings, settings
from care4u.database.engine import build_engine, build_session_factory, init_db
from care4u.database.repository import IdentityStore
from care4u.services.email_service import Notifier, build_notifier
from care4u.services.otp_manager import utcnow
from care4u.services.token_issuer import TokenIssuer

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)

logger = logging.getLogger(__name__)


def create_app(
    config: Settings | None = None,
    notifier: Notifier | None = None,
    token_issuer: TokenIssuer | None = None,
) -> FastAPI:
    """Build the application.

    The lifespan owns the database engine; the notifier and token issuer
    are built from *config* unless supplied.
    """
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup / shutdown lifecycle hook."""
        logger.info("Starting %s …", config.app_name)
        engine = build_engine(config.database_url, echo=False)
        await init_db(engine)
        app.state.settings = config
        app.state.session_factory = build_session_factory(engine)
        app.state.notifier = notifier or build_notifier(config)
        app.state.token_issuer = token_issuer or TokenIssuer.from_settings(config)

        async with app.state.session_factory() as session:
            purged = await IdentityStore(session).purge_expired_challenges(utcnow())
        logger.info("Database initialised (%d expired OTPs purged)", purged)
        yield
        logger.info("Shutting down %s …", config.app_name)
        await engine.dispose()

    app = FastAPI(
        title=config.app_name,
        description="Passwordless OTP login and profile completion for Care4U",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.detail},
            headers=exc.headers,
        )

    @app.get("/health")
    async def health_check():
        """Simple liveness probe."""
        return {"status": "healthy", "app": config.app_name}

    app.include_router(auth_router)
    return app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn (``care4u`` console script)."""
    import uvicorn

    uvicorn.run("care4u.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
