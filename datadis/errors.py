"""Errors raised by the Datadis client."""
from __future__ import annotations

from typing import Any


class DatadisError(Exception):
    """Base error raised by the Datadis client."""

    def __init__(self, message: str, status_code: int = 0, data: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code or 0
        self.data = data if data is not None else {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, status_code={self.status_code})"


class DatadisValidationError(DatadisError):
    """Raised when a call is missing the parameters that identify a supply."""


class DatadisAuthError(DatadisError):
    """Raised when authentication fails."""


class DatadisAPIError(DatadisError):
    """Raised when the API answers a data request with an error status."""


class DatadisClientError(DatadisError):
    """Raised for any other failure while talking to the API."""
