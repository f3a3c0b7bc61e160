"""osu! API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_int, require_env_vars
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

OSU_API_BASE_URL = "https://osu.ppy.sh/api/v2"
OSU_TOKEN_URL = "https://osu.ppy.sh/oauth/token"
OSU_TIMEOUT_SECONDS = 30.0

# osu! asks API consumers to stay at or below 60 requests per minute.
OSU_RATELIMIT = RateLimit(max_calls=60, per_seconds=60.0)


@dataclass(frozen=True, slots=True)
class OsuConfig:
    client_id: int
    client_secret: str
    resilience: ResilienceConfig
    token_url: str = OSU_TOKEN_URL


def default_osu_resilience(*, retry: RetryPolicy | None = None) -> ResilienceConfig:
    return ResilienceConfig(
        name="osu",
        base_url=OSU_API_BASE_URL,
        timeout_seconds=OSU_TIMEOUT_SECONDS,
        retry=retry or RetryPolicy(),
        ratelimit=OSU_RATELIMIT,
        default_headers={"Accept": "application/json", "Content-Type": "application/json"},
    )


def get_osu_config(*, resilience: ResilienceConfig | None = None) -> OsuConfig:
    values = require_env_vars(("OSU_API_CLIENT_ID", "OSU_API_CLIENT_SECRET"))
    raw_client_id = values["OSU_API_CLIENT_ID"]
    try:
        client_id = int(raw_client_id)
    except ValueError as exc:
        raise ConfigurationError(
            f"OSU_API_CLIENT_ID must be an integer, got {raw_client_id!r}"
        ) from exc

    if resilience is None:
        max_retries = optional_env_int("OSU_API_MAX_RETRIES")
        retry = RetryPolicy(max_retries=max_retries)
        resilience = default_osu_resilience(retry=retry)

    return OsuConfig(
        client_id=client_id,
        client_secret=values["OSU_API_CLIENT_SECRET"],
        resilience=resilience,
    )
