"""HTTP client for the osu! API v2."""

from __future__ import annotations

import time
from logging import getLogger
from typing import TYPE_CHECKING

from osudb.adapters.http_resilience import ResilienceConfig, ResilientClient
from osudb.config import get_osu_config
from osudb.domain.model import SUPPORTED_RULESET
from osudb.domain.ports import NOT_FOUND, NotFound, OsuApi

from .auth import BearerCredential
from .errors import CredentialError, UnhandledResponseError
from .schema import (
    BeatmapAttributesResponse,
    BeatmapPayload,
    BeatmapSetPayload,
    MatchResponse,
    OAuthToken,
    UserPayload,
)
from .translator import (
    parse_attributes,
    parse_beatmap,
    parse_beatmapset,
    parse_match_page,
    parse_user,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    import httpx

    from osudb.config import OsuConfig
    from osudb.domain.model import (
        BeatmapInfo,
        BeatmapSetInfo,
        DifficultyAttributes,
        MatchEvent,
        MatchPage,
        TokenState,
        UserProfile,
    )
    from osudb.domain.ports import Fetched, UserLookupKey

log = getLogger(__name__)

_HTTP_OK = 200
_HTTP_NOT_FOUND = 404


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def interpret_response(response: httpx.Response) -> object | NotFound:
    """Map a final response to its JSON body, ``NOT_FOUND`` or an error."""

    if response.status_code == _HTTP_OK:
        return response.json()
    if response.status_code == _HTTP_NOT_FOUND:
        return NOT_FOUND
    raise UnhandledResponseError(
        response.status_code,
        response.reason_phrase,
        url=str(response.request.url),
    )


class OsuClient:
    """Authenticated, paced access to the osu! API.

    Holds one bearer credential for its whole lifetime; every request asks the
    credential for a valid token first, so an expired token is renewed before
    the call goes out.
    """

    def __init__(
        self,
        config: OsuConfig | None = None,
        *,
        client_factory: Callable[[ResilienceConfig], ResilientClient] = _default_client_factory,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config or get_osu_config()
        self._http = client_factory(self.config.resilience)
        self._credential = BearerCredential(exchange=self._exchange_credentials, clock=clock)

    @property
    def token_state(self) -> TokenState:
        return self._credential.state

    @property
    def token_exchanges(self) -> int:
        return self._credential.exchanges

    async def start(self) -> OsuClient:
        """Issue the initial access token."""

        await self._credential.ensure_valid()
        return self

    async def __aenter__(self) -> OsuClient:
        return await self.start()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def get_user(self, user: int | str, key: UserLookupKey = "id") -> Fetched[UserProfile]:
        payload = await self._get(f"users/{user}/osu", params={"key": key})
        if payload is NOT_FOUND:
            log.debug("osu! user %s (%s) not found", user, key)
            return NOT_FOUND
        return parse_user(UserPayload.model_validate(payload))

    async def get_beatmapset(self, beatmapset_id: int) -> Fetched[BeatmapSetInfo]:
        payload = await self._get(f"beatmapsets/{beatmapset_id}")
        if payload is NOT_FOUND:
            return NOT_FOUND
        return parse_beatmapset(BeatmapSetPayload.model_validate(payload))

    async def get_beatmap(self, beatmap_id: int) -> Fetched[BeatmapInfo]:
        payload = await self._get(f"beatmaps/{beatmap_id}")
        if payload is NOT_FOUND:
            return NOT_FOUND
        return parse_beatmap(BeatmapPayload.model_validate(payload))

    async def get_beatmap_attributes(self, beatmap_id: int) -> Fetched[DifficultyAttributes]:
        payload = await self._request(
            "POST",
            f"beatmaps/{beatmap_id}/attributes",
            json={"mods": [], "ruleset": SUPPORTED_RULESET.value},
        )
        if payload is NOT_FOUND:
            return NOT_FOUND
        return parse_attributes(BeatmapAttributesResponse.model_validate(payload))

    async def get_match(self, match_id: int, before: int | None = None) -> Fetched[MatchPage]:
        params = {"before": before} if before is not None else None
        payload = await self._get(f"matches/{match_id}", params=params)
        if payload is NOT_FOUND:
            return NOT_FOUND
        return parse_match_page(MatchResponse.model_validate(payload))

    async def get_match_events(self, match_id: int) -> Fetched[list[MatchEvent]]:
        """Return every event of a match in chronological order.

        The API serves the newest page first; older pages are requested with
        ``before`` set to the oldest id seen so far until a page comes back empty.
        """

        page = await self.get_match(match_id)
        if page is NOT_FOUND:
            return NOT_FOUND

        pages = [page.events]
        oldest: int | None = None
        while page.events:
            page_oldest = min(event.event_id for event in page.events)
            if oldest is not None and page_oldest >= oldest:
                log.warning("Match %s paging stopped advancing at event %s", match_id, oldest)
                break
            oldest = page_oldest
            older = await self.get_match(match_id, before=oldest)
            if older is NOT_FOUND:
                break
            page = older
            pages.append(page.events)

        events: list[MatchEvent] = []
        for chunk in reversed(pages):
            events.extend(sorted(chunk, key=lambda event: event.event_id))
        log.debug("Fetched %s events across %s pages for match %s", len(events), len(pages), match_id)
        return events

    async def _get(
        self,
        path: str,
        *,
        params: dict[str, str | int] | None = None,
    ) -> object | NotFound:
        return await self._request("GET", path, params=params)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str | int] | None = None,
        json: object = None,
    ) -> object | NotFound:
        access_token = await self._credential.ensure_valid()
        response = await self._http.request(
            method,
            path,
            params=params,
            json=json,
            headers={"Authorization": f"Bearer {access_token}"},
        )
        return interpret_response(response)

    async def _exchange_credentials(self) -> OAuthToken | None:
        log.info("Requesting osu! access token for client %s", self.config.client_id)
        response = await self._http.post(
            self.config.token_url,
            json={
                "client_id": self.config.client_id,
                "client_secret": self.config.client_secret,
                "grant_type": "client_credentials",
                "scope": "public",
            },
        )
        if response.status_code != _HTTP_OK:
            raise CredentialError(
                f"osu! token exchange failed: {response.status_code} {response.reason_phrase}"
            )
        return OAuthToken.model_validate(response.json())


if TYPE_CHECKING:
    _api_check: OsuApi = OsuClient()
