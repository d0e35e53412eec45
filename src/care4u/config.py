"""Care4U backend — configuration loaded from environment."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, loaded from .env or environment variables."""

    # ── Database ──────────────────────────────────────────
    database_url: str = "sqlite+aiosqlite:///./care4u.db"

    # ── Session tokens ────────────────────────────────────
    jwt_secret: str = "changeme"
    jwt_algorithm: str = "HS256"
    temp_token_expire_minutes: int = 60
    permanent_token_expire_days: int = 30

    # ── One-time codes ────────────────────────────────────
    # The mobile client tells users the code lasts 10 minutes; the server
    # has always issued 1-minute codes. Kept configurable until product
    # settles on one value.
    otp_ttl_minutes: int = 1

    # ── Outbound email (empty host → codes are only logged) ─
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    email_from: str = "no-reply@care4u.app"

    # ── App ───────────────────────────────────────────────
    app_name: str = "Care4U"
    debug: bool = True

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton settings instance
settings = Settings()
