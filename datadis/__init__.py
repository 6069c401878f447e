"""Asynchronous client for the Datadis private API."""
from __future__ import annotations

from .api import DatadisClient
from .errors import (
    DatadisAPIError,
    DatadisAuthError,
    DatadisClientError,
    DatadisError,
    DatadisValidationError,
)
from .models import (
    Account,
    ConsumptionData,
    ConsumptionSeries,
    ContractDetail,
    Distributor,
    DistributorsWithSupplies,
    LoginResult,
    MaxPowerData,
    MeasurementType,
    Supply,
    SupplyTarget,
)
from .transport import AiohttpTransport, RetryPolicy, TransportError, TransportResponse

__all__ = [
    "Account",
    "AiohttpTransport",
    "ConsumptionData",
    "ConsumptionSeries",
    "ContractDetail",
    "DatadisAPIError",
    "DatadisAuthError",
    "DatadisClient",
    "DatadisClientError",
    "DatadisError",
    "DatadisValidationError",
    "Distributor",
    "DistributorsWithSupplies",
    "LoginResult",
    "MaxPowerData",
    "MeasurementType",
    "RetryPolicy",
    "Supply",
    "SupplyTarget",
    "TransportError",
    "TransportResponse",
]
