from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import httpx
import pytest

from osudb.adapters.http_resilience import (
    PacedRetry,
    ResilienceConfig,
    ResilientClient,
    RetriesExhaustedError,
    RetryPolicy,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

BASE_URL = "https://osu.test/api/v2"


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def _scripted(statuses: Sequence[int]) -> Callable[[httpx.Request], httpx.Response]:
    remaining = list(statuses)

    def handler(request: httpx.Request) -> httpx.Response:
        status = remaining.pop(0) if remaining else 200
        return httpx.Response(status, json={"path": request.url.path}, request=request)

    return handler


def _client(
    handler: Callable[[httpx.Request], httpx.Response],
    sleep: SleepRecorder,
    *,
    retry: RetryPolicy | None = None,
) -> ResilientClient:
    config = ResilienceConfig(name="test", base_url=BASE_URL, retry=retry or RetryPolicy())
    return ResilientClient(
        config,
        transport=httpx.MockTransport(handler),
        sleep=sleep,
        jitter=lambda: 0.5,
    )


def test_backoff_grows_until_cap_and_resets_after_success() -> None:
    sleep = SleepRecorder()
    client = _client(_scripted([429] * 5 + [503] * 4), sleep)

    async def run() -> tuple[httpx.Response, httpx.Response]:
        async with client:
            first = await client.get("beatmaps/1")
            second = await client.get("beatmaps/2")
        return first, second

    first, second = asyncio.run(run())

    assert first.status_code == 200
    assert second.status_code == 200
    assert sleep.delays == [0.1, 1.5, 2.5, 4.5, 8.5, 16.5, 32.5, 64.5, 64.5, 64.5, 0.1]
    backoff = sleep.delays[:10]
    assert all(later >= earlier for earlier, later in zip(backoff, backoff[1:], strict=False))


def test_post_requests_are_retried() -> None:
    sleep = SleepRecorder()
    client = _client(_scripted([502]), sleep)

    async def run() -> httpx.Response:
        async with client:
            return await client.post("beatmaps/1/attributes", json={"mods": []})

    assert asyncio.run(run()).status_code == 200
    assert sleep.delays == [0.1, 1.5]


def test_non_retryable_status_is_returned_after_one_attempt() -> None:
    sleep = SleepRecorder()
    client = _client(_scripted([418]), sleep)

    async def run() -> httpx.Response:
        async with client:
            return await client.get("beatmaps/1")

    response = asyncio.run(run())

    assert response.status_code == 418
    assert sleep.delays == [0.1]


def test_not_found_is_not_retried() -> None:
    sleep = SleepRecorder()
    client = _client(_scripted([404]), sleep)

    async def run() -> httpx.Response:
        async with client:
            return await client.get("users/1/osu")

    assert asyncio.run(run()).status_code == 404
    assert sleep.delays == [0.1]


def test_transport_errors_are_retried() -> None:
    sleep = SleepRecorder()
    attempts: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request.url.path)
        if len(attempts) == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json={}, request=request)

    client = _client(handler, sleep)

    async def run() -> httpx.Response:
        async with client:
            return await client.get("matches/1")

    assert asyncio.run(run()).status_code == 200
    assert len(attempts) == 2
    assert sleep.delays == [0.1, 1.5]


def test_retry_cap_raises_retries_exhausted() -> None:
    sleep = SleepRecorder()
    client = _client(_scripted([503] * 10), sleep, retry=RetryPolicy(max_retries=2))

    async def run() -> httpx.Response:
        async with client:
            return await client.get("beatmaps/1")

    with pytest.raises(RetriesExhaustedError) as excinfo:
        asyncio.run(run())

    assert excinfo.value.attempts == 3
    assert excinfo.value.response is not None
    assert excinfo.value.response.status_code == 503
    assert sleep.delays == [0.1, 1.5, 2.5]


def test_retry_cap_wraps_persistent_transport_errors() -> None:
    attempts: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request.url.path)
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler, SleepRecorder(), retry=RetryPolicy(max_retries=1))

    async def run() -> httpx.Response:
        async with client:
            return await client.get("matches/1")

    with pytest.raises(RetriesExhaustedError) as excinfo:
        asyncio.run(run())

    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)
    assert excinfo.value.response is None
    assert len(attempts) == 2


def _backoff_after(retry: PacedRetry, retries: int) -> float:
    for _ in range(retries):
        retry = retry.increment()
    return retry.backoff_strategy()


def test_paced_retry_backoff_respects_factor_and_cap() -> None:
    policy = RetryPolicy(backoff_factor=0.5, max_backoff_wait=10.0, backoff_jitter=2.0)
    retry = PacedRetry(policy, name="test", jitter=lambda: 0.25)

    assert _backoff_after(retry, 0) == 0.0
    assert _backoff_after(retry, 1) == pytest.approx(0.75)
    assert _backoff_after(retry, 4) == pytest.approx(4.25)
    assert _backoff_after(retry, 8) == pytest.approx(10.5)


def test_paced_retry_increment_keeps_budget() -> None:
    retry = PacedRetry(RetryPolicy(max_retries=1), name="test")

    incremented = retry.increment()

    assert isinstance(incremented, PacedRetry)
    assert retry.attempts_made == 0
    assert not retry.is_exhausted()
    assert incremented.is_exhausted()


def test_unbounded_policy_backoff_stays_finite() -> None:
    retry = PacedRetry(RetryPolicy(), name="test", jitter=lambda: 0.0)

    assert _backoff_after(retry, 5000) == pytest.approx(64.0)
