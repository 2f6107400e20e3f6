import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

SESSION_TTL_SECONDS = 3600
SESSION_COOKIE_NAME = "token"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


@dataclass(frozen=True)
class Settings:
    """Application settings, loaded once at process start"""
    jwt_secret_key: str
    database_url: str
    environment: str = "development"
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000"])
    bcrypt_rounds: int = 12
    sql_echo: bool = False
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cookie_secure(self) -> bool:
        return self.is_production

    @property
    def cookie_samesite(self) -> str:
        # SameSite=None is only accepted by browsers together with Secure
        return "none" if self.is_production else "lax"


def load_settings() -> Settings:
    """
    Build Settings from the environment (and a local .env file)

    Raises:
        ValueError: If a required variable is not set
    """
    load_dotenv()

    secret = os.getenv("JWT_SECRET_KEY")
    if not secret:
        raise ValueError("JWT_SECRET_KEY environment variable is not set")

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        raise ValueError("DATABASE_URL environment variable is not set")

    cors_origins = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
        if origin.strip()
    ]

    return Settings(
        jwt_secret_key=secret,
        database_url=database_url,
        environment=os.getenv("APP_ENV", "development").strip().lower(),
        cors_origins=cors_origins,
        bcrypt_rounds=_env_int("BCRYPT_ROUNDS", 12),
        sql_echo=_env_bool("SQL_ECHO", False),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
        log_file=os.getenv("LOG_FILE") or None,
    )
