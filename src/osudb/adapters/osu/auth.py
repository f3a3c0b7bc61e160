"""Bearer credential lifecycle for the osu! API."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from osudb.domain.model import TokenState

from .errors import CredentialError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from .schema import OAuthToken

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BearerToken:
    access_token: str
    expires_in: int
    issued_at: float
    token_type: str = "Bearer"

    def is_expired(self, now: float) -> bool:
        return now > self.issued_at + self.expires_in


class BearerCredential:
    """Owns the access token and decides when it must be re-issued.

    ``ensure_valid`` is the only entry point: it returns a usable token, issuing
    one when the credential is UNISSUED or EXPIRED. Refreshes are serialised so
    concurrent callers trigger a single exchange.
    """

    def __init__(
        self,
        *,
        exchange: Callable[[], Awaitable[OAuthToken | None]],
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._exchange = exchange
        self._clock = clock
        self._token: BearerToken | None = None
        self._lock = asyncio.Lock()
        self.exchanges = 0

    @property
    def state(self) -> TokenState:
        if self._token is None:
            return TokenState.UNISSUED
        if self._token.is_expired(self._clock()):
            return TokenState.EXPIRED
        return TokenState.VALID

    async def ensure_valid(self) -> str:
        token = self._token
        if token is not None and not token.is_expired(self._clock()):
            return token.access_token

        async with self._lock:
            token = self._token
            if token is not None and not token.is_expired(self._clock()):
                return token.access_token
            if token is not None:
                log.info("osu! access token expired; requesting a new one")
            token = await self._issue()
            self._token = token
            return token.access_token

    async def _issue(self) -> BearerToken:
        issued_at = self._clock()
        payload = await self._exchange()
        self.exchanges += 1
        if payload is None or not payload.access_token:
            raise CredentialError("osu! token exchange did not return an access token")
        log.debug("Issued osu! access token valid for %s seconds", payload.expires_in)
        return BearerToken(
            access_token=payload.access_token,
            expires_in=payload.expires_in,
            issued_at=issued_at,
            token_type=payload.token_type,
        )
