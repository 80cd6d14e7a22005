from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, TypeVar

from dotenv import load_dotenv

N = TypeVar("N", int, float)

_TRUE_VALUES = {"1", "true", "yes", "on"}


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings for one back-office API deployment.

    ``bulk_import_timeout_seconds`` is ``None`` unless configured: the B2B
    product import runs one request per product code on the server and may
    legitimately take many minutes.
    """

    env_name: str
    api_base_url: str
    connect_timeout_seconds: float = 5.0
    read_timeout_seconds: float = 15.0
    retries: int = 3
    retry_backoff_seconds: float = 0.3
    max_connections: int = 20
    verify_ssl: bool = True
    bulk_import_timeout_seconds: float | None = None


def _number(
    name: str,
    default: N | None,
    cast: Callable[[str], N],
    *,
    minimum: N,
    inclusive: bool,
) -> N | None:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from exc
    if value < minimum or (value == minimum and not inclusive):
        bound = ">=" if inclusive else ">"
        raise ConfigError(f"Invalid {name}: expected {bound} {minimum}, got {value}")
    return value


def _base_url(env_name: str) -> str:
    # A profile-specific URL (RESTORAN_API_BASE_URL_STAGING) beats the plain one.
    for name in (f"RESTORAN_API_BASE_URL_{env_name.upper()}", "RESTORAN_API_BASE_URL"):
        value = (os.getenv(name) or "").strip()
        if value:
            return value.rstrip("/")
    raise ConfigError("Missing required config value: RESTORAN_API_BASE_URL")


def load_config(env_file: str | None = None) -> ClientConfig:
    """Load config from environment with optional .env override."""
    load_dotenv(env_file)
    defaults = ClientConfig(env_name="", api_base_url="")

    env_name = (os.getenv("RESTORAN_ENV") or "dev").strip()
    verify_raw = os.getenv("RESTORAN_VERIFY_SSL")

    return ClientConfig(
        env_name=env_name,
        api_base_url=_base_url(env_name),
        connect_timeout_seconds=_number(
            "RESTORAN_CONNECT_TIMEOUT_SECONDS",
            defaults.connect_timeout_seconds,
            float,
            minimum=0.0,
            inclusive=False,
        ),
        read_timeout_seconds=_number(
            "RESTORAN_READ_TIMEOUT_SECONDS",
            defaults.read_timeout_seconds,
            float,
            minimum=0.0,
            inclusive=False,
        ),
        retries=_number("RESTORAN_RETRIES", defaults.retries, int, minimum=0, inclusive=True),
        retry_backoff_seconds=_number(
            "RESTORAN_RETRY_BACKOFF_SECONDS",
            defaults.retry_backoff_seconds,
            float,
            minimum=0.0,
            inclusive=True,
        ),
        max_connections=_number(
            "RESTORAN_MAX_CONNECTIONS",
            defaults.max_connections,
            int,
            minimum=1,
            inclusive=True,
        ),
        verify_ssl=defaults.verify_ssl if verify_raw is None else verify_raw.strip().lower() in _TRUE_VALUES,
        bulk_import_timeout_seconds=_number(
            "RESTORAN_BULK_IMPORT_TIMEOUT_SECONDS",
            None,
            float,
            minimum=0.0,
            inclusive=False,
        ),
    )
