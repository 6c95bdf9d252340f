from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    api_key: str | None
    rate_limit: str
    rate_limit_enabled: bool
    tools_rate_limit: str
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    apify_api_token: str | None
    apify_base_url: str
    apify_poll_interval_s: float
    apify_max_attempts: int
    apify_timeout_s: float


settings = Settings(
    api_key=_get_env("API_KEY"),
    rate_limit=_get_env("RATE_LIMIT", "60/minute") or "60/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    tools_rate_limit=_get_env("TOOLS_RATE_LIMIT", "20/minute") or "20/minute",
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:8080",
            "http://localhost:3000",
        ],
    ),
    cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX", r"^https:\/\/[a-z0-9-]+\.lovable\.app$"),
    cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
    apify_api_token=_get_env("APIFY_API_TOKEN") or _get_env("APIFY_API_KEY"),
    apify_base_url=_get_env("APIFY_BASE_URL", "https://api.apify.com/v2") or "https://api.apify.com/v2",
    apify_poll_interval_s=_get_env_float("APIFY_POLL_INTERVAL_S", 2.0),
    apify_max_attempts=_get_env_int("APIFY_MAX_ATTEMPTS", 30),
    apify_timeout_s=_get_env_float("APIFY_TIMEOUT_S", 15.0),
)

if settings.apify_max_attempts < 1:
    raise RuntimeError("APIFY_MAX_ATTEMPTS must be at least 1.")

if settings.apify_poll_interval_s < 0:
    raise RuntimeError("APIFY_POLL_INTERVAL_S must not be negative.")
