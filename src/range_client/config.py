"""
Configuration settings for the range client.

All settings are loaded from environment variables prefixed with ``RANGE_``
(e.g. ``RANGE_SERVERS='["range1:80", "range2:80"]'``). Use a .env file for
local development.

Values that decide whether a client can be built at all (server list, retry
parameters) are checked by RangeClient, which raises the client's own error
types rather than pydantic validation errors.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


# Queries whose GET URI is longer than this are sent with PUT first.
DEFAULT_URI_LENGTH_THRESHOLD = 4096

# Used when no transport is provided.
DEFAULT_QUERY_TIMEOUT = 30.0  # seconds a query may stay in flight
DEFAULT_DIAL_TIMEOUT = 5.0  # seconds to establish a connection
DEFAULT_KEEPALIVE_EXPIRY = 30.0  # seconds an idle connection is kept
DEFAULT_MAX_IDLE_CONNS_PER_HOST = 1

PUT_CONTENT_TYPE = "application/x-www-form-urlencoded"
RANGE_EXCEPTION_HEADER = "RangeException"


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RANGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Servers ===
    SERVERS: list[str] = []  # "host:port" strings, at least one required

    # === Retry ===
    RETRY_COUNT: int = 0  # 0 = never retry
    RETRY_PAUSE: float = 0.0  # seconds between attempts

    # === Transport ===
    QUERY_TIMEOUT: float = DEFAULT_QUERY_TIMEOUT
    DIAL_TIMEOUT: float = DEFAULT_DIAL_TIMEOUT
    KEEPALIVE_EXPIRY: float = DEFAULT_KEEPALIVE_EXPIRY
    MAX_IDLE_CONNS_PER_HOST: int = DEFAULT_MAX_IDLE_CONNS_PER_HOST
    URI_LENGTH_THRESHOLD: int = DEFAULT_URI_LENGTH_THRESHOLD
    USER_AGENT: Optional[str] = None  # prefix; program name when unset

    # === Logging ===
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True
