from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _int_or_none(name: str) -> int | None:
    value = _env(name)
    if value is None or not value.strip():
        return None
    return int(value)


def _bool(name: str, default: str = "false") -> bool:
    return (_env(name, default) or "").strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    postgres_dsn: str
    db_auto_create: bool
    jwt_access_secret: str
    jwt_refresh_secret: str
    recovery_token_secret: str
    jwt_access_ttl_minutes: int | None
    jwt_refresh_ttl_days: int | None
    recovery_token_ttl_minutes: int | None
    public_base_url: str
    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_password: str
    smtp_use_tls: bool
    email_from: str
    avatars_dir: str
    avatar_size_px: int
    avatar_max_bytes: int
    cors_origins: list[str]
    log_level: str


def get_settings() -> Settings:
    smtp_user = _env("SMTP_USER", "")
    return Settings(
        postgres_dsn=_env("POSTGRES_DSN", ""),
        db_auto_create=_bool("DB_AUTO_CREATE"),
        jwt_access_secret=_env("JWT_ACCESS_SECRET", ""),
        jwt_refresh_secret=_env("JWT_REFRESH_SECRET", ""),
        recovery_token_secret=_env("RECOVERY_TOKEN_SECRET", ""),
        jwt_access_ttl_minutes=_int_or_none("JWT_ACCESS_TTL_MINUTES"),
        jwt_refresh_ttl_days=_int_or_none("JWT_REFRESH_TTL_DAYS"),
        recovery_token_ttl_minutes=_int_or_none("RECOVERY_TOKEN_TTL_MINUTES"),
        public_base_url=_env("PUBLIC_BASE_URL", "http://localhost:8000"),
        smtp_host=_env("SMTP_HOST", ""),
        smtp_port=int(_env("SMTP_PORT", "587")),
        smtp_user=smtp_user,
        smtp_password=_env("SMTP_PASSWORD", ""),
        smtp_use_tls=_bool("SMTP_USE_TLS", "true"),
        email_from=_env("EMAIL_FROM", smtp_user),
        avatars_dir=_env("AVATARS_DIR", "public/avatars"),
        avatar_size_px=int(_env("AVATAR_SIZE_PX", "250")),
        avatar_max_bytes=int(_env("AVATAR_MAX_BYTES", "1000000")),
        cors_origins=[origin.strip() for origin in _env("CORS_ORIGINS", "*").split(",") if origin.strip()],
        log_level=_env("LOG_LEVEL", "INFO").upper(),
    )
