"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_int, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .osu import (
    OSU_API_BASE_URL,
    OSU_RATELIMIT,
    OSU_TOKEN_URL,
    OsuConfig,
    default_osu_resilience,
    get_osu_config,
)
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "OSU_API_BASE_URL",
    "OSU_RATELIMIT",
    "OSU_TOKEN_URL",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "OsuConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "default_osu_resilience",
    "get_database_config",
    "get_osu_config",
    "get_storage_config",
    "optional_env_int",
    "require_env_var",
    "require_env_vars",
]
