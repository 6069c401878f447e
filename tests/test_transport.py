import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from datadis import DatadisAuthError, DatadisClient, DatadisClientError
from datadis.transport import (
    AiohttpTransport,
    RetryPolicy,
    TransportError,
    TransportResponse,
    default_should_retry,
)


class _FakeResponse:
    def __init__(self, status, body, content_type="application/json"):
        self.status = status
        self.content_type = content_type
        self._body = body

    async def text(self):
        return self._body

    async def json(self, content_type=None):
        return json.loads(self._body)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


def _session(response=None, error=None):
    session = MagicMock()
    session.closed = False
    if error is not None:
        session.request.side_effect = error
    else:
        session.request.return_value = response
    return session


def test_send_decodes_json():
    session = _session(_FakeResponse(200, '[{"cups": "ES1"}]'))
    transport = AiohttpTransport(session)

    response = asyncio.run(
        transport.request("GET", "/api-private/api/get-supplies", params={"cups": "ES1"})
    )

    assert response == TransportResponse(status=200, data=[{"cups": "ES1"}])
    args, kwargs = session.request.call_args
    assert args == ("GET", "https://datadis.es/api-private/api/get-supplies")
    assert kwargs["params"] == {"cups": "ES1"}


def test_send_returns_text_bodies():
    session = _session(_FakeResponse(200, "abc.def.ghi", content_type="text/plain"))
    response = asyncio.run(AiohttpTransport(session).request("POST", "/nikola-auth/tokens/login"))
    assert response.data == "abc.def.ghi"


def test_error_status_raises_with_body():
    session = _session(_FakeResponse(401, '{"message": "Unauthorized"}'))
    with pytest.raises(TransportError) as err:
        asyncio.run(AiohttpTransport(session).request("GET", "/x"))
    assert err.value.status == 401
    assert err.value.data == {"message": "Unauthorized"}


def test_network_error_has_no_status():
    session = _session(error=aiohttp.ClientConnectionError("down"))
    with pytest.raises(TransportError) as err:
        asyncio.run(AiohttpTransport(session).request("GET", "/x"))
    assert err.value.status == 0
    assert err.value.data is None


def test_close_leaves_external_session_open():
    session = _session(_FakeResponse(200, "[]"))
    session.close = AsyncMock()
    asyncio.run(AiohttpTransport(session).close())
    session.close.assert_not_called()


def test_default_should_retry():
    assert default_should_retry(TransportError("down"))
    assert default_should_retry(TransportError("boom", status=503))
    assert not default_should_retry(TransportError("slow down", status=429))
    assert not default_should_retry(TransportError("denied", status=401))
    assert not default_should_retry(ValueError())


def _retrying_transport(retries=2):
    return AiohttpTransport(
        MagicMock(), retry_policy=RetryPolicy(retries=retries, delay=lambda attempt: 0)
    )


def test_retry_until_success():
    transport = _retrying_transport()
    ok = TransportResponse(status=200, data="ok")
    send = AsyncMock(side_effect=[TransportError("down"), ok])

    with patch.object(transport, "_send", send):
        response = asyncio.run(transport.request("GET", "/x"))

    assert response is ok
    assert send.call_count == 2


def test_retry_gives_up_and_reraises():
    transport = _retrying_transport(retries=2)
    send = AsyncMock(side_effect=TransportError("boom", status=502))

    with patch.object(transport, "_send", send):
        with pytest.raises(TransportError) as err:
            asyncio.run(transport.request("GET", "/x"))

    assert err.value.status == 502
    assert send.call_count == 3


def test_rate_limited_requests_are_not_retried():
    transport = _retrying_transport()
    send = AsyncMock(side_effect=TransportError("slow down", status=429))

    with patch.object(transport, "_send", send):
        with pytest.raises(TransportError):
            asyncio.run(transport.request("GET", "/x"))

    assert send.call_count == 1


def test_custom_delay_receives_attempt_number():
    delays = []

    def delay(attempt):
        delays.append(attempt)
        return 0

    transport = AiohttpTransport(MagicMock(), retry_policy=RetryPolicy(retries=2, delay=delay))
    send = AsyncMock(side_effect=[TransportError("down"), TransportError("down"), TransportResponse(200, [])])

    with patch.object(transport, "_send", send):
        asyncio.run(transport.request("GET", "/x"))

    assert delays == [1, 2]


class _UndecodableResponse(_FakeResponse):
    async def text(self):
        return b"\xff\xfe".decode("utf-8")


class _SlowResponse(_FakeResponse):
    async def __aenter__(self):
        await asyncio.sleep(1)
        return self


def test_undecodable_login_body_is_auth_error():
    session = _session(_UndecodableResponse(200, "", content_type="text/plain"))
    client = DatadisClient("12345678Z", "secret", session=session)

    with pytest.raises(DatadisAuthError) as err:
        asyncio.run(client.async_login())

    assert err.value.status_code == 0
    assert client.token is None


def test_timeout_is_client_error():
    session = _session()
    session.request.side_effect = [
        _FakeResponse(200, "token-123", content_type="text/plain"),
        _SlowResponse(200, "[]"),
    ]
    client = DatadisClient("12345678Z", "secret", timeout=0.01, session=session)

    async def scenario():
        await client.async_login()
        await client.async_get_supplies()

    with pytest.raises(DatadisClientError) as err:
        asyncio.run(scenario())

    assert err.value.status_code == 0
    assert "timed out after 0.01 seconds" in err.value.message
