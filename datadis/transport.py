"""HTTP transport used by the Datadis client."""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

import aiohttp
import async_timeout
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
)

from .const import API_TIMEOUT, BASE_URL

_LOGGER = logging.getLogger(__name__)


class TransportError(Exception):
    """Raised by a transport when an exchange fails.

    ``status`` is 0 when no response was received.
    """

    def __init__(self, message: str, status: int = 0, data: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.data = data


@dataclass(frozen=True, slots=True)
class TransportResponse:
    status: int
    data: Any


class Transport(Protocol):
    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        data: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> TransportResponse:
        ...

    async def close(self) -> None:
        ...


def default_should_retry(err: BaseException) -> bool:
    """Retry network failures and server errors, never rate limiting."""
    if not isinstance(err, TransportError):
        return False
    if err.status == 0:
        return True
    return err.status >= 500


def default_delay(attempt: int) -> float:
    return float(attempt)


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Automatic retries applied by the transport.

    ``delay`` receives the number of the attempt that just failed (starting at 1)
    and returns the seconds to wait before the next one.
    """

    retries: int = 3
    delay: Callable[[int], float] = default_delay
    should_retry: Callable[[BaseException], bool] = default_should_retry


class AiohttpTransport:
    """Transport backed by an aiohttp session."""

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        *,
        base_url: str = BASE_URL,
        timeout: float = API_TIMEOUT,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self._session = session
        self._owns_session = session is None
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._retry_policy = retry_policy

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def retry_policy(self) -> RetryPolicy | None:
        return self._retry_policy

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the session if this transport created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        data: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> TransportResponse:
        """Perform a request, retrying according to the retry policy."""
        policy = self._retry_policy
        if policy is None or policy.retries <= 0:
            return await self._send(method, path, params=params, data=data, headers=headers)

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(policy.retries + 1),
            wait=_wait_from(policy),
            retry=retry_if_exception(policy.should_retry),
            before_sleep=before_sleep_log(_LOGGER, logging.DEBUG),
            reraise=True,
        ):
            with attempt:
                return await self._send(method, path, params=params, data=data, headers=headers)
        raise TransportError(f"Retries exhausted while calling {path}")

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        data: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> TransportResponse:
        url = f"{self._base_url}{path}"
        session = self._get_session()
        _LOGGER.debug("%s %s", method, path)

        try:
            async with async_timeout.timeout(self._timeout):
                async with session.request(
                    method,
                    url,
                    params=dict(params) if params else None,
                    data=dict(data) if data else None,
                    headers=dict(headers) if headers else None,
                ) as response:
                    payload = await _read_body(response)
                    status = response.status
        except asyncio.TimeoutError as err:
            raise TransportError(
                f"Request timed out after {self._timeout} seconds while calling {path}"
            ) from err
        except aiohttp.ClientError as err:
            raise TransportError(f"Failed to call {path}: {err}") from err

        if status >= 400:
            raise TransportError(f"HTTP {status} error for {path}", status=status, data=payload)
        return TransportResponse(status=status, data=payload)


def _wait_from(policy: RetryPolicy) -> Callable[[RetryCallState], float]:
    def wait(retry_state: RetryCallState) -> float:
        return policy.delay(retry_state.attempt_number)

    return wait


async def _read_body(response: aiohttp.ClientResponse) -> Any:
    """Decode JSON bodies, falling back to text for anything else."""
    text = await response.text()
    if response.content_type == "application/json" and text:
        try:
            return await response.json(content_type=None)
        except ValueError:
            _LOGGER.debug("Response declared JSON but could not be decoded")
    return text
