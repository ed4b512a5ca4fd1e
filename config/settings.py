"""
Central configuration using Pydantic BaseSettings.

Validates all env vars at startup (fail-fast). Every group has working
defaults so the proxy starts against a local birdc without any .env file.

Usage:
    from config.settings import get_settings

    settings = get_settings()
    print(settings.bird.cmd)

Lazy initialization: get_settings() creates the singleton on first call.
Tests can reset via get_settings.cache_clear().
"""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings

DEFAULT_CACHE_TTL_MINUTES = 5

ReconfigSource = Literal["bird", "config_modified", "config_regex"]


# =============================================================================
# Nested Settings Groups
# =============================================================================


class BirdSettings(BaseSettings):
    """Daemon client location and cache lifetime."""

    model_config = {"env_prefix": "BIRD_", "extra": "ignore"}

    cmd: str = "birdc"
    cache_ttl: int = 5  # minutes, <= 0 means the default
    config_filename: str = "/etc/bird/bird.conf"
    query_timeout: float = 30.0  # seconds per birdc invocation

    @property
    def cache_ttl_minutes(self) -> int:
        """Effective TTL, falling back to the default for non-positive values."""
        if self.cache_ttl > 0:
            return self.cache_ttl
        return DEFAULT_CACHE_TTL_MINUTES


class ParserSettings(BaseSettings):
    """Routing table topology of the daemon."""

    model_config = {"env_prefix": "", "extra": "ignore"}

    per_peer_tables: bool = False
    peer_protocol_prefix: str = "ID_"
    pipe_protocol_prefix: str = "P_"


class StatusSettings(BaseSettings):
    """How the status payload is shaped before it is cached."""

    model_config = {"env_prefix": "", "extra": "ignore"}

    reconfig_timestamp_source: ReconfigSource = "bird"
    reconfig_timestamp_match: str = r"# Created: (.*)"
    filter_fields: list[str] = []


class RateLimitSettings(BaseSettings):
    """Token bucket refilled once per second."""

    model_config = {"env_prefix": "RATELIMIT_", "extra": "ignore"}

    enabled: bool = False
    requests_per_second: int = 10

    @field_validator("requests_per_second")
    @classmethod
    def _non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("requests_per_second must be >= 0")
        return v


# =============================================================================
# Root Settings
# =============================================================================


class AppSettings(BaseSettings):
    """Root application settings composing all sub-settings."""

    model_config = {"env_prefix": "", "extra": "ignore", "env_file": ".env", "env_file_encoding": "utf-8"}

    # Address family used for the channel filter on multi-channel daemons
    ip_version: str = "4"

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"
    log_file: str = ""

    # Nested groups (initialized separately to support env_prefix)
    bird: BirdSettings = None  # type: ignore[assignment]
    parser: ParserSettings = None  # type: ignore[assignment]
    status: StatusSettings = None  # type: ignore[assignment]
    rate_limit: RateLimitSettings = None  # type: ignore[assignment]

    @field_validator("ip_version")
    @classmethod
    def _valid_ip_version(cls, v: str) -> str:
        if v not in ("4", "6"):
            raise ValueError(f"ip_version must be '4' or '6', got {v!r}")
        return v

    @model_validator(mode="before")
    @classmethod
    def _init_nested(cls, values):
        """Initialize nested settings from environment."""
        if values.get("bird") is None:
            values["bird"] = BirdSettings()
        if values.get("parser") is None:
            values["parser"] = ParserSettings()
        if values.get("status") is None:
            values["status"] = StatusSettings()
        if values.get("rate_limit") is None:
            values["rate_limit"] = RateLimitSettings()
        return values


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """
    Get the application settings singleton.

    Lazy-initialized on first call. Validates all env vars (fail-fast).
    Tests can reset via: get_settings.cache_clear()
    """
    return AppSettings()
