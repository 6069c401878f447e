"""Authenticated session against the Datadis API."""
from __future__ import annotations

import logging

from .const import LOGIN_PATH
from .errors import DatadisAuthError, DatadisClientError
from .models import Account, LoginResult
from .transport import Transport, TransportError

_LOGGER = logging.getLogger(__name__)


class DatadisSession:
    """Hold the account credentials and the bearer token obtained at login.

    Logging in twice concurrently on the same session is unsupported; the last
    login to finish wins.
    """

    def __init__(self, account: Account, transport: Transport) -> None:
        self._account = account
        self._transport = transport
        self._token: str | None = None

    @property
    def account(self) -> Account:
        return self._account

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    async def async_login(self) -> LoginResult:
        """Exchange the credentials for a token and keep it for later requests."""
        _LOGGER.debug("Logging in to Datadis as %s", self._account.username)
        payload = {
            "username": self._account.username,
            "password": self._account.password,
        }
        headers = {"Content-Type": "application/x-www-form-urlencoded"}

        try:
            response = await self._transport.request(
                "POST", LOGIN_PATH, data=payload, headers=headers
            )
        except TransportError as err:
            raise DatadisAuthError(err.message, err.status, err.data) from err
        except Exception as err:  # noqa: BLE001 - any login failure is an auth error
            raise DatadisAuthError(f"Unexpected error during login: {err}") from err

        token = response.data.strip() if isinstance(response.data, str) else None
        if not token:
            raise DatadisAuthError(
                "Login response did not contain a token", response.status, response.data
            )

        self._token = token
        _LOGGER.debug("Logged in to Datadis as %s", self._account.username)
        return LoginResult(account=self._account, token=token)

    def auth_headers(self) -> dict[str, str]:
        """Return the headers authorising a private API request."""
        if self._token is None:
            raise DatadisClientError("Not logged in; call async_login() first")
        return {"Authorization": f"Bearer {self._token}"}
