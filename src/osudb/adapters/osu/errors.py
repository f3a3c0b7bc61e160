"""Errors raised by the osu! API adapter."""

from __future__ import annotations


class OsuAPIError(RuntimeError):
    """Base class for failures talking to the osu! API."""


class UnhandledResponseError(OsuAPIError):
    """Raised for a status code the client has no policy for (not 200/404/429/5xx)."""

    def __init__(self, status_code: int, reason: str, *, url: str | None = None) -> None:
        target = f" from {url}" if url else ""
        super().__init__(f"Unhandled response{target}: {status_code} {reason}")
        self.status_code = status_code
        self.reason = reason
        self.url = url


class CredentialError(OsuAPIError):
    """Raised when the client-credentials exchange does not yield an access token."""
