from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING

import httpx
import pytest

from osudb.adapters.http_resilience import ResilienceConfig, ResilientClient, RetryPolicy
from osudb.adapters.osu import CredentialError, OsuClient, UnhandledResponseError
from osudb.config import OSU_API_BASE_URL, OsuConfig
from osudb.domain.model import MatchEvent, Ruleset, TokenState
from osudb.domain.ports import NOT_FOUND
from tests.helpers.payloads import (
    Payload,
    attributes_payload,
    beatmap_payload,
    beatmapset_payload,
    game_event_payload,
    match_payload,
    plain_event_payload,
    token_payload,
    user_payload,
)

if TYPE_CHECKING:
    from collections.abc import Callable

type Route = Callable[[httpx.Request], httpx.Response]


class FakeOsuServer:
    """Route requests by path; the token endpoint is always served."""

    def __init__(self, routes: dict[str, Route] | None = None) -> None:
        self.routes = routes or {}
        self.requests: list[httpx.Request] = []
        self.tokens_issued = 0
        self.token_status = 200
        self.expires_in = 86400

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/oauth/token":
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"error": "invalid_client"})
            self.tokens_issued += 1
            return httpx.Response(
                200,
                json=token_payload(f"token-{self.tokens_issued}", expires_in=self.expires_in),
            )
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"error": None})
        return route(request)

    def api_requests(self) -> list[httpx.Request]:
        return [request for request in self.requests if request.url.path != "/oauth/token"]


def _json(payload: Payload, status: int = 200) -> Route:
    def route(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=payload)

    return route


def _make_client(server: FakeOsuServer, *, clock: Callable[[], float] | None = None) -> OsuClient:
    resilience = ResilienceConfig(
        name="osu",
        base_url=OSU_API_BASE_URL,
        retry=RetryPolicy(max_retries=3),
    )
    config = OsuConfig(client_id=1234, client_secret="secret", resilience=resilience)

    async def no_sleep(_delay: float) -> None:
        return None

    def factory(resilience_config: ResilienceConfig) -> ResilientClient:
        return ResilientClient(
            resilience_config,
            transport=httpx.MockTransport(server),
            sleep=no_sleep,
            jitter=lambda: 0.0,
        )

    if clock is None:
        return OsuClient(config, client_factory=factory)
    return OsuClient(config, client_factory=factory, clock=clock)


def test_start_exchanges_client_credentials() -> None:
    server = FakeOsuServer()
    client = _make_client(server)

    assert client.token_state is TokenState.UNISSUED

    async def run() -> None:
        async with client:
            assert client.token_state is TokenState.VALID

    asyncio.run(run())

    token_request = server.requests[0]
    assert token_request.method == "POST"
    assert str(token_request.url) == "https://osu.ppy.sh/oauth/token"
    assert json.loads(token_request.content) == {
        "client_id": 1234,
        "client_secret": "secret",
        "grant_type": "client_credentials",
        "scope": "public",
    }


def test_failed_token_exchange_raises_credential_error() -> None:
    server = FakeOsuServer()
    server.token_status = 401
    client = _make_client(server)

    async def run() -> None:
        async with client:
            pass

    with pytest.raises(CredentialError):
        asyncio.run(run())


def test_get_user_sends_bearer_token_and_parses_profile() -> None:
    server = FakeOsuServer({"/api/v2/users/2/osu": _json(user_payload())})
    client = _make_client(server)

    async def run() -> object:
        async with client:
            return await client.get_user(2)

    user = asyncio.run(run())

    assert user is not NOT_FOUND
    assert user.user_id == 2  # type: ignore[union-attr]
    assert user.country_name == "Australia"  # type: ignore[union-attr]
    assert user.global_rank == 12345  # type: ignore[union-attr]
    (request,) = server.api_requests()
    assert request.headers["Authorization"] == "Bearer token-1"
    assert request.url.params["key"] == "id"


def test_missing_resource_returns_not_found_sentinel() -> None:
    server = FakeOsuServer()
    client = _make_client(server)

    async def run() -> object:
        async with client:
            return await client.get_user("nobody", key="username")

    assert asyncio.run(run()) is NOT_FOUND


def test_unhandled_status_raises() -> None:
    server = FakeOsuServer({"/api/v2/beatmaps/75": _json({"error": "teapot"}, status=418)})
    client = _make_client(server)

    async def run() -> object:
        async with client:
            return await client.get_beatmap(75)

    with pytest.raises(UnhandledResponseError) as excinfo:
        asyncio.run(run())

    assert excinfo.value.status_code == 418
    assert len(server.api_requests()) == 1


def test_rate_limited_request_is_retried() -> None:
    responses = [httpx.Response(429), httpx.Response(200, json=beatmapset_payload())]
    server = FakeOsuServer({"/api/v2/beatmapsets/1": lambda _request: responses.pop(0)})
    client = _make_client(server)

    async def run() -> object:
        async with client:
            return await client.get_beatmapset(1)

    beatmapset = asyncio.run(run())

    assert beatmapset.title == "DISCO PRINCE"  # type: ignore[union-attr]
    assert beatmapset.bpm == pytest.approx(119.999)  # type: ignore[union-attr]
    assert beatmapset.genre == "Video Game"  # type: ignore[union-attr]
    assert len(server.api_requests()) == 2


def test_get_beatmap_uses_set_owner_as_mapper() -> None:
    server = FakeOsuServer({"/api/v2/beatmaps/75": _json(beatmap_payload(mode="taiko"))})
    client = _make_client(server)

    async def run() -> object:
        async with client:
            return await client.get_beatmap(75)

    beatmap = asyncio.run(run())

    assert beatmap.ruleset is Ruleset.TAIKO  # type: ignore[union-attr]
    assert beatmap.mapper_id == 2  # type: ignore[union-attr]
    assert beatmap.circle_size == 4.0  # type: ignore[union-attr]


def test_get_beatmap_attributes_posts_standard_ruleset_without_mods() -> None:
    server = FakeOsuServer({"/api/v2/beatmaps/75/attributes": _json(attributes_payload())})
    client = _make_client(server)

    async def run() -> object:
        async with client:
            return await client.get_beatmap_attributes(75)

    attributes = asyncio.run(run())

    assert attributes.max_combo == 314  # type: ignore[union-attr]
    (request,) = server.api_requests()
    assert request.method == "POST"
    assert json.loads(request.content) == {"mods": [], "ruleset": "osu"}


def test_match_events_are_paged_backwards_and_returned_chronologically() -> None:
    pages = {
        None: [game_event_payload(5, 500), plain_event_payload(6), game_event_payload(7, 700)],
        "5": [plain_event_payload(2), game_event_payload(3, 300), plain_event_payload(4)],
        "2": [plain_event_payload(1, "match-created")],
        "1": [],
    }

    def route(request: httpx.Request) -> httpx.Response:
        before = request.url.params.get("before")
        return httpx.Response(200, json=match_payload(42, pages[before]))

    server = FakeOsuServer({"/api/v2/matches/42": route})
    client = _make_client(server)

    async def run() -> object:
        async with client:
            return await client.get_match_events(42)

    events = asyncio.run(run())

    assert isinstance(events, list)
    assert [event.event_id for event in events] == [1, 2, 3, 4, 5, 6, 7]
    games = [event.game for event in events if isinstance(event, MatchEvent) and event.game]
    assert [game.game_id for game in games] == [300, 500, 700]
    assert games[0].scores[0].mods == ("HD", "HR")
    assert [request.url.params.get("before") for request in server.api_requests()] == [
        None,
        "5",
        "2",
        "1",
    ]


def test_match_events_for_unknown_match_are_not_found() -> None:
    client = _make_client(FakeOsuServer())

    async def run() -> object:
        async with client:
            return await client.get_match_events(404)

    assert asyncio.run(run()) is NOT_FOUND


def test_expired_token_is_renewed_before_request() -> None:
    now = [0.0]
    server = FakeOsuServer({"/api/v2/users/2/osu": _json(user_payload())})
    server.expires_in = 60
    client = _make_client(server, clock=lambda: now[0])

    async def run() -> None:
        async with client:
            await client.get_user(2)
            now[0] = 61.0
            assert client.token_state is TokenState.EXPIRED
            await client.get_user(2)

    asyncio.run(run())

    assert server.tokens_issued == 2
    authorizations = [request.headers["Authorization"] for request in server.api_requests()]
    assert authorizations == ["Bearer token-1", "Bearer token-2"]
