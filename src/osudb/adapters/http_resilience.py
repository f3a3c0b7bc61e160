from __future__ import annotations

import asyncio
import copy
import random
import sys
from logging import getLogger
from typing import (
    TYPE_CHECKING,
    TypedDict,
    Unpack,
)

import httpx
from aiolimiter import AsyncLimiter
from httpx_retries import Retry, RetryTransport

from osudb.config.http_resilience import RateLimit, ResilienceConfig, RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from types import TracebackType

    from httpx._types import (
        HeaderTypes,
        QueryParamTypes,
        RequestContent,
        TimeoutTypes,
        URLTypes,
    )

type Sleep = Callable[[float], Awaitable[None]]
type Jitter = Callable[[], float]

log = getLogger(__name__)

__all__ = [
    "PacedRetry",
    "RateLimit",
    "ResilienceConfig",
    "ResilientClient",
    "RetriesExhaustedError",
    "RetryPolicy",
]

# Keeps ``2 ** n`` representable as a float when retrying without a cap.
_MAX_EXPONENT = 62


class RetriesExhaustedError(httpx.HTTPError):
    """Raised when a request keeps failing after the policy's retry budget."""

    def __init__(
        self,
        message: str,
        *,
        attempts: int,
        response: httpx.Response | None = None,
    ) -> None:
        super().__init__(message)
        self.attempts = attempts
        self.response = response


class PacedRetry(Retry):
    """``httpx_retries.Retry`` with additive jitter and an injectable sleep.

    The wait before retry ``n`` is ``(2 ** (n - 1) + jitter) * backoff_factor``,
    capped at ``max_backoff_wait + jitter``.
    """

    def __init__(
        self,
        policy: RetryPolicy,
        *,
        name: str,
        sleep: Sleep = asyncio.sleep,
        jitter: Jitter = random.random,
    ) -> None:
        super().__init__(
            total=sys.maxsize if policy.max_retries is None else policy.max_retries,
            backoff_factor=policy.backoff_factor,
            max_backoff_wait=policy.max_backoff_wait,
            respect_retry_after_header=False,
            allowed_methods=tuple(policy.allowed_methods),
            status_forcelist=tuple(policy.status_forcelist),
            retry_on_exceptions=policy.retry_on_exceptions,
            backoff_jitter=policy.backoff_jitter,
        )
        self.policy = policy
        self.name = name
        self._sleep = sleep
        self._jitter = jitter

    def increment(self) -> PacedRetry:
        incremented = copy.copy(self)
        incremented.attempts_made = self.attempts_made + 1
        return incremented

    def backoff_strategy(self) -> float:
        if self.attempts_made == 0:
            return 0.0
        policy = self.policy
        jitter = self._jitter() * policy.backoff_jitter
        exponent = min(self.attempts_made - 1, _MAX_EXPONENT)
        delay = (2**exponent + jitter) * policy.backoff_factor
        return min(delay, policy.max_backoff_wait + jitter)

    async def asleep(self, response: httpx.Response | httpx.HTTPError) -> None:
        delay = self.backoff_strategy()
        if isinstance(response, httpx.Response):
            reason = f"{response.status_code} {response.reason_phrase}"
        else:
            reason = f"{type(response).__name__}: {response}"
        log.warning(
            "%s: received %s; retrying in %.2f seconds (retry %s)",
            self.name,
            reason,
            delay,
            self.attempts_made,
        )
        await self._sleep(delay)


class RequestOptions(TypedDict, total=False):
    content: RequestContent | None
    json: object
    params: QueryParamTypes | None
    headers: HeaderTypes | None
    timeout: TimeoutTypes


class AsyncClientOptions(TypedDict, total=False):
    base_url: str
    timeout: TimeoutTypes
    headers: HeaderTypes
    transport: httpx.AsyncBaseTransport


class ResilientClient:
    """``httpx.AsyncClient`` wrapper that paces, rate limits and retries requests.

    Every request waits ``initial_delay`` first, so even successful calls are
    spaced out. Retries run inside a ``RetryTransport``; a retryable response or
    transport error that survives the retry budget raises
    :class:`RetriesExhaustedError`. Every other response is returned as is for
    the caller to interpret.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep = asyncio.sleep,
        jitter: Jitter = random.random,
    ) -> None:
        self.config = config
        self._policy = config.retry
        self._sleep = sleep
        self._limiter: AsyncLimiter | None = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit
            else None
        )

        retry = PacedRetry(config.retry, name=config.name, sleep=sleep, jitter=jitter)
        retry_transport = (
            RetryTransport(retry=retry)
            if transport is None
            else RetryTransport(transport=transport, retry=retry)
        )

        client_kwargs: AsyncClientOptions = {
            "timeout": config.timeout_seconds,
            "transport": retry_transport,
        }
        if config.base_url is not None:
            client_kwargs["base_url"] = config.base_url
        if config.default_headers is not None:
            client_kwargs["headers"] = dict(config.default_headers)

        self._client = httpx.AsyncClient(**client_kwargs)

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: URLTypes,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        policy = self._policy
        await self._sleep(policy.initial_delay)
        try:
            response = await self._send(method, url, **kwargs)
        except policy.retry_on_exceptions as exc:
            raise self._exhausted(method, url, f"{type(exc).__name__}: {exc}") from exc
        log.debug(
            "%s %s %s -> %s %s",
            self.config.name,
            method,
            response.request.url,
            response.status_code,
            response.reason_phrase,
        )
        if response.status_code in policy.status_forcelist:
            raise self._exhausted(
                method,
                url,
                f"{response.status_code} {response.reason_phrase}",
                response=response,
            )
        return response

    async def get(
        self,
        url: URLTypes,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(
        self,
        url: URLTypes,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def _send(
        self,
        method: str,
        url: URLTypes,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        if self._limiter is None:
            return await self._client.request(method, url, **kwargs)
        async with self._limiter:
            return await self._client.request(method, url, **kwargs)

    def _exhausted(
        self,
        method: str,
        url: URLTypes,
        reason: str,
        *,
        response: httpx.Response | None = None,
    ) -> RetriesExhaustedError:
        retries = self._policy.max_retries or 0
        return RetriesExhaustedError(
            f"{self.config.name}: {method} {url} still failing after {retries} retries ({reason})",
            attempts=retries + 1,
            response=response,
        )
