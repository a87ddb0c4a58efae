"""
Configuration helpers for the fintrack backend.

Routers/services read a typed Settings object instead of fetching os.environ
directly (token signing, password hashing, database URL, logging).
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    jwt_secret: str
    jwt_issuer: str
    jwt_algorithm: str
    jwt_expires_seconds: int
    password_scheme: str
    bcrypt_rounds: int
    log_level: str
    cors_origins: tuple[str, ...]
    predefined_categories_path: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _list(value: str | None) -> tuple[str, ...]:
        return tuple(item.strip().rstrip("/") for item in (value or "").split(",") if item.strip())

    scheme = (os.getenv("PASSWORD_SCHEME") or "bcrypt").strip().lower()
    if scheme not in {"bcrypt", "argon2"}:
        scheme = "bcrypt"

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./fintrack.db").strip(),
        jwt_secret=os.getenv("JWT_SECRET", "change-me"),
        jwt_issuer=os.getenv("JWT_ISSUER", "fintrack"),
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        jwt_expires_seconds=max(0, _int(os.getenv("JWT_EXPIRES_SECONDS", "0"), 0)),
        password_scheme=scheme,
        bcrypt_rounds=_int(os.getenv("BCRYPT_ROUNDS", "10"), 10),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        cors_origins=_list(os.getenv("CORS_ORIGINS")),
        predefined_categories_path=os.getenv("PREDEFINED_CATEGORIES_PATH", ""),
    )
