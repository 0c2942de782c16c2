from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - REDIS_HOST: host of the Redis store (default: 'localhost')
    - REDIS_PORT: port of the Redis store (default: 6379)
    - REDIS_SOCKET_TIMEOUT: seconds before a store call is abandoned (default: 5)
    - PORT: HTTP listen port (default: 8080)
    - STORE_BACKEND: 'redis' (default) or 'memory'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: root log level name (default: 'INFO')
    """

    redis_host: str
    redis_port: int
    redis_socket_timeout: float
    port: int
    store_backend: str
    cors_allow_origins: List[str]
    log_level: str


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return default


def _parse_float(value: str, default: float) -> float:
    try:
        return float(value.strip())
    except ValueError:
        return default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("STORE_BACKEND", "redis").strip().lower()
    if backend not in {"redis", "memory"}:
        backend = "redis"

    log_level = _get_env("LOG_LEVEL", "INFO").strip().upper()
    if log_level not in _LOG_LEVELS:
        log_level = "INFO"

    return Settings(
        redis_host=_get_env("REDIS_HOST", "localhost").strip(),
        redis_port=_parse_int(_get_env("REDIS_PORT", "6379"), 6379),
        redis_socket_timeout=_parse_float(_get_env("REDIS_SOCKET_TIMEOUT", "5"), 5.0),
        port=_parse_int(_get_env("PORT", "8080"), 8080),
        store_backend=backend,
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=log_level,
    )
