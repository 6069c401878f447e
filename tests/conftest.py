from __future__ import annotations

from typing import Any

import pytest

from datadis.transport import TransportError, TransportResponse


class FakeTransport:
    """Transport returning canned payloads per path and recording every call."""

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    async def request(self, method, path, *, params=None, data=None, headers=None):
        self.calls.append(
            {
                "method": method,
                "path": path,
                "params": dict(params or {}),
                "data": dict(data or {}),
                "headers": dict(headers or {}),
            }
        )
        response = self.responses.get(path, [])
        if isinstance(response, TransportError):
            raise response
        if isinstance(response, TransportResponse):
            return response
        return TransportResponse(status=200, data=response)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport({"/nikola-auth/tokens/login": "token-123"})
