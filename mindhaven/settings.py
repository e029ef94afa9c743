"""Centralized environment-driven settings.

Keep this module lightweight: stdlib only, no app imports, to avoid circular deps.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from urllib.parse import quote_plus


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def get_database_url() -> str:
    """Get the database URL, either explicit or composed from DB_* components."""
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    db_user = os.getenv("DB_USER")
    db_pass = os.getenv("DB_PASSWORD")
    db_name = os.getenv("DB_NAME")
    db_host = os.getenv("DB_HOST", "localhost")
    db_port = os.getenv("DB_PORT", "5432")

    if db_user and db_pass and db_name:
        # URL-encode the password in case it contains special characters
        encoded_pass = quote_plus(db_pass)
        return f"postgresql+psycopg://{db_user}:{encoded_pass}@{db_host}:{db_port}/{db_name}"

    raise RuntimeError(
        "DATABASE_URL must be set, or DB_USER, DB_PASSWORD, and DB_NAME must all be set."
    )


@dataclass
class Settings:
    database_url: str
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    # Tokens are valid for one day
    access_token_expire_minutes: int = 60 * 24
    db_pool_size: int = 20
    db_pool_timeout_s: int = 2
    db_pool_recycle_s: int = 30
    db_echo: bool = False
    run_migrations: bool = True
    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:8081", "http://localhost:19006"])
    # Goal assigned at signup
    default_water_goal_ml: int = 2000
    # Goal used when a user has none recorded
    fallback_water_goal_ml: int = 3700

    def __post_init__(self) -> None:
        if not self.jwt_secret_key:
            raise RuntimeError(
                "JWT_SECRET_KEY environment variable must be set. "
                "Generate a secure random key with: openssl rand -hex 32"
            )
        if len(self.jwt_secret_key) < 32:
            raise RuntimeError(
                "JWT_SECRET_KEY must be at least 32 characters long for security. "
                "Generate a secure random key with: openssl rand -hex 32"
            )

    @classmethod
    def from_env(cls) -> "Settings":
        cors_origins_str = os.getenv("CORS_ORIGINS", "http://localhost:8081,http://localhost:19006")
        return cls(
            database_url=get_database_url(),
            jwt_secret_key=os.getenv("JWT_SECRET_KEY", ""),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            access_token_expire_minutes=_int_env("JWT_ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24),
            db_pool_size=_int_env("DB_POOL_SIZE", 20),
            db_pool_timeout_s=_int_env("DB_POOL_TIMEOUT_S", 2),
            db_pool_recycle_s=_int_env("DB_POOL_RECYCLE_S", 30),
            db_echo=_bool_env("DB_ECHO", False),
            run_migrations=_bool_env("RUN_MIGRATIONS", True),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            cors_origins=[origin.strip() for origin in cors_origins_str.split(",")],
            default_water_goal_ml=_int_env("DEFAULT_WATER_GOAL_ML", 2000),
            fallback_water_goal_ml=_int_env("FALLBACK_WATER_GOAL_ML", 3700),
        )
