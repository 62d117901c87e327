"""
Process settings and logging setup.

Settings are read from environment variables once, at app startup,
and handed to the rest of the code through `core.context.AppContext`.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

DEFAULT_GEOCODER_BASE_URL = "https://nominatim.openstreetmap.org"
DEFAULT_GEOCODER_USER_AGENT = "events-catalog-api/0.1"
DEFAULT_CORS_ORIGINS = ("http://localhost:5173", "http://127.0.0.1:5173")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Public Nominatim usage policy: at most one request per second.
PUBLIC_NOMINATIM_HOST = "nominatim.openstreetmap.org"
PUBLIC_NOMINATIM_MIN_INTERVAL_S = 1.0
DEFAULT_GEOCODE_CONCURRENCY = 8


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    items = tuple(item.strip() for item in raw.split(",") if item.strip())
    return items or default


def cors_origins_from_env() -> tuple[str, ...]:
    return _env_list("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)


def log_level_from_env() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()


def is_public_nominatim(base_url: str) -> bool:
    return (urlsplit(base_url.strip()).hostname or "").lower() == PUBLIC_NOMINATIM_HOST


def default_geocode_concurrency(base_url: str) -> int:
    return 1 if is_public_nominatim(base_url) else DEFAULT_GEOCODE_CONCURRENCY


def default_geocode_min_interval_s(base_url: str) -> float:
    return PUBLIC_NOMINATIM_MIN_INTERVAL_S if is_public_nominatim(base_url) else 0.0


def sanitize_database_url(url: str) -> str:
    # asyncpg does not understand libpq's sslmode parameter.
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


@dataclass(frozen=True)
class Settings:
    database_url: str
    db_pool_min_size: int = 1
    db_pool_max_size: int = 5
    db_command_timeout_s: float = 30.0
    geocoder_base_url: str = DEFAULT_GEOCODER_BASE_URL
    geocoder_api_key: str = ""
    geocoder_user_agent: str = DEFAULT_GEOCODER_USER_AGENT
    geocode_timeout_s: float = 5.0
    # Defaults suit the public Nominatim host; from_env() relaxes them for
    # self-hosted or keyed providers.
    geocode_concurrency: int = 1
    geocode_min_interval_s: float = PUBLIC_NOMINATIM_MIN_INTERVAL_S
    jwt_secret: str = "dev-change-this-secret"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        url = os.environ.get("DATABASE_URL", "").strip()
        if not url:
            raise RuntimeError("DATABASE_URL is not set.")

        geocoder_base_url = _env_str("GEOCODER_BASE_URL", DEFAULT_GEOCODER_BASE_URL)
        default_concurrency = default_geocode_concurrency(geocoder_base_url)
        concurrency = _env_int("GEOCODE_CONCURRENCY", default_concurrency)
        min_interval_s = _env_float("GEOCODE_MIN_INTERVAL_S", default_geocode_min_interval_s(geocoder_base_url))
        return cls(
            database_url=sanitize_database_url(url),
            db_pool_min_size=_env_int("DB_POOL_MIN_SIZE", 1),
            db_pool_max_size=_env_int("DB_POOL_MAX_SIZE", 5),
            db_command_timeout_s=_env_float("DB_COMMAND_TIMEOUT_S", 30.0),
            geocoder_base_url=geocoder_base_url,
            geocoder_api_key=os.environ.get("GEOCODER_API_KEY", "").strip(),
            geocoder_user_agent=_env_str("GEOCODER_USER_AGENT", DEFAULT_GEOCODER_USER_AGENT),
            geocode_timeout_s=_env_float("GEOCODE_TIMEOUT_S", 5.0),
            geocode_concurrency=concurrency if concurrency > 0 else default_concurrency,
            geocode_min_interval_s=max(0.0, min_interval_s),
            # Local default keeps development simple.
            # In production, set JWT_SECRET in environment.
            jwt_secret=_env_str("JWT_SECRET", "dev-change-this-secret"),
            jwt_algorithm=_env_str("JWT_ALG", "HS256"),
            access_token_expire_minutes=_env_int("ACCESS_TOKEN_EXPIRE_MIN", 60),
            cors_origins=cors_origins_from_env(),
            log_level=log_level_from_env(),
        )


def configure_logging(level: str = "INFO") -> None:
    """
    Install a basic stream handler on the root logger.

    If a handler is already installed (uvicorn, pytest) only the level changes.
    """
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
