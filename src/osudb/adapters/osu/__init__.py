"""osu! API v2 adapter."""

from __future__ import annotations

from .auth import BearerCredential, BearerToken
from .client import OsuClient, interpret_response
from .errors import CredentialError, OsuAPIError, UnhandledResponseError

__all__ = [
    "BearerCredential",
    "BearerToken",
    "CredentialError",
    "OsuAPIError",
    "OsuClient",
    "UnhandledResponseError",
    "interpret_response",
]
