"""Client for interacting with the Datadis private API."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any

import aiohttp

from .const import (
    API_TIMEOUT,
    CONSUMPTION_DATA_PATH,
    CONTRACT_DETAIL_PATH,
    DISTRIBUTORS_WITH_SUPPLIES_PATH,
    MAX_POWER_PATH,
    PARAM_DISTRIBUTOR_CODE,
    PARAM_MEASUREMENT_TYPE,
    SUPPLIES_PATH,
)
from .data_validation import (
    build_params,
    validate_date_range,
    validate_measurement_type,
    validate_target,
)
from .errors import DatadisAPIError, DatadisClientError, DatadisError
from .models import (
    Account,
    ConsumptionData,
    ConsumptionSeries,
    ContractDetail,
    DistributorsWithSupplies,
    LoginResult,
    MaxPowerData,
    MeasurementType,
    Supply,
    SupplyTarget,
)
from .parsers import (
    parse_consumption_list,
    parse_contract_details,
    parse_distributors_with_supplies,
    parse_max_power_list,
    parse_supplies,
)
from .session import DatadisSession
from .transport import AiohttpTransport, RetryPolicy, Transport, TransportError

_LOGGER = logging.getLogger(__name__)


class DatadisClient:
    """Small wrapper around the Datadis HTTP API."""

    def __init__(
        self,
        username: str,
        password: str,
        *,
        name: str | None = None,
        timeout: float | None = None,
        retry_policy: RetryPolicy | None = None,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        """Initialise the client with credentials.

        ``timeout``, ``retry_policy`` and ``session`` configure the default
        aiohttp transport, so they cannot be combined with ``transport``.
        """
        if transport is not None:
            if timeout is not None or retry_policy is not None or session is not None:
                raise ValueError(
                    "timeout, retry_policy and session cannot be used with a custom transport"
                )
            self._transport: Transport = transport
        else:
            self._transport = AiohttpTransport(
                session,
                timeout=API_TIMEOUT if timeout is None else timeout,
                retry_policy=retry_policy,
            )
        self._session = DatadisSession(
            Account(username=username, password=password, name=name or ""),
            self._transport,
        )

    async def __aenter__(self) -> DatadisClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.async_close()

    @property
    def account(self) -> Account:
        return self._session.account

    @property
    def token(self) -> str | None:
        return self._session.token

    async def async_close(self) -> None:
        """Release the underlying HTTP resources."""
        await self._transport.close()

    async def async_login(self) -> LoginResult:
        """Authenticate and keep the token for the following requests."""
        return await self._session.async_login()

    async def async_get_supplies(
        self,
        *,
        authorized_nif: str | None = None,
        distributor_code: str | None = None,
    ) -> list[Supply]:
        """Return the supplies linked to the account."""
        params = build_params(
            authorized_nif=authorized_nif,
            **{PARAM_DISTRIBUTOR_CODE: distributor_code},
        )
        payload = await self._async_get(SUPPLIES_PATH, params)
        return parse_supplies(payload)

    async def async_get_contract_detail(
        self,
        supply: Supply | SupplyTarget,
        *,
        authorized_nif: str | None = None,
    ) -> list[ContractDetail]:
        """Return the contract periods of a supply."""
        target = validate_target(supply, "get_contract_detail")
        params = build_params(target, authorized_nif=authorized_nif)
        payload = await self._async_get(CONTRACT_DETAIL_PATH, params)
        return parse_contract_details(payload)

    async def async_get_consumption_data(
        self,
        supply: Supply | SupplyTarget,
        start_date: date | None = None,
        end_date: date | None = None,
        *,
        measurement_type: MeasurementType | int = MeasurementType.HOURLY,
        point_type: int | None = None,
        authorized_nif: str | None = None,
    ) -> list[ConsumptionData]:
        """Return consumption records for the months between both dates.

        Datadis only accepts one query per exact range and day, so repeating an
        identical request on the same day may be rejected.
        """
        series = await self.async_get_consumption_series(
            supply,
            start_date,
            end_date,
            measurement_type=measurement_type,
            point_type=point_type,
            authorized_nif=authorized_nif,
        )
        return list(series.data)

    async def async_get_consumption_series(
        self,
        supply: Supply | SupplyTarget,
        start_date: date | None = None,
        end_date: date | None = None,
        *,
        measurement_type: MeasurementType | int = MeasurementType.HOURLY,
        point_type: int | None = None,
        authorized_nif: str | None = None,
    ) -> ConsumptionSeries:
        """Return consumption records wrapped with the supply and the queried range."""
        target = validate_target(supply, "get_consumption_data")
        if point_type is not None:
            target = SupplyTarget(target.cups, target.distributor_code, point_type)
        start, end = validate_date_range(start_date, end_date, "get_consumption_data")
        measurement = validate_measurement_type(measurement_type)

        params = build_params(
            target,
            start_date=start,
            end_date=end,
            authorized_nif=authorized_nif,
            **{PARAM_MEASUREMENT_TYPE: int(measurement)},
        )
        payload = await self._async_get(CONSUMPTION_DATA_PATH, params)
        return ConsumptionSeries(
            supply=supply,
            start_date=start,
            end_date=end,
            measurement_type=measurement,
            data=tuple(parse_consumption_list(payload)),
        )

    async def async_get_max_power(
        self,
        supply: Supply | SupplyTarget,
        start_date: date | None = None,
        end_date: date | None = None,
        *,
        authorized_nif: str | None = None,
    ) -> list[MaxPowerData]:
        """Return the maximum power demanded per tariff period."""
        target = validate_target(supply, "get_max_power")
        start, end = validate_date_range(start_date, end_date, "get_max_power")
        params = build_params(
            SupplyTarget(target.cups, target.distributor_code),
            start_date=start,
            end_date=end,
            authorized_nif=authorized_nif,
        )
        payload = await self._async_get(MAX_POWER_PATH, params)
        return parse_max_power_list(payload)

    async def async_get_distributors_with_supplies(
        self, *, authorized_nif: str | None = None
    ) -> DistributorsWithSupplies:
        """Return the distributors that hold supplies of the account."""
        params = build_params(authorized_nif=authorized_nif)
        payload = await self._async_get(DISTRIBUTORS_WITH_SUPPLIES_PATH, params)
        return parse_distributors_with_supplies(payload)

    async def _async_get(self, path: str, params: Mapping[str, Any]) -> Any:
        try:
            headers = self._session.auth_headers()
            response = await self._transport.request(
                "GET", path, params=params, headers=headers
            )
        except DatadisError:
            raise
        except TransportError as err:
            if err.status:
                raise DatadisAPIError(err.message, err.status, err.data) from err
            raise DatadisClientError(err.message, 0, err.data) from err
        except Exception as err:  # noqa: BLE001 - surfaced as a client error
            raise DatadisClientError(f"Unexpected error calling {path}: {err}") from err
        return response.data
