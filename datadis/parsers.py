"""Helpers turning Datadis payloads into models."""
from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping
from datetime import date, datetime, timedelta
from typing import Any, TypeVar

from .const import DATE_FORMATS, DISTRIBUTORS, END_OF_DAY, QUERY_MONTH_FMT, TIME_FMT
from .models import (
    ConsumptionData,
    ContractDetail,
    Distributor,
    DistributorsWithSupplies,
    MaxPowerData,
    Supply,
)

_LOGGER = logging.getLogger(__name__)

_DISTRIBUTOR_NAMES: dict[str, str] = dict(DISTRIBUTORS)

_T = TypeVar("_T")


def distributor_name(code: Any) -> str | None:
    """Return the name of a distributor code, or None when it is unknown."""
    if code is None:
        return None
    key = str(code).strip().lstrip("0")
    return _DISTRIBUTOR_NAMES.get(key)


def get_distributor(code: Any) -> Distributor:
    """Build a Distributor for the given code."""
    return Distributor(code=str(code), name=distributor_name(code))


def format_month(value: date) -> str:
    """Format a date the way the API expects month bounds (YYYY/MM)."""
    return value.strftime(QUERY_MONTH_FMT)


def parse_date(value: Any) -> date | None:
    """Parse a Datadis date, returning None when missing or malformed."""
    if not value or not isinstance(value, str):
        return None
    value = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    _LOGGER.debug("Unable to parse date: %s", value)
    return None


def parse_timestamp(day: Any, time: Any) -> datetime | None:
    """Combine a Datadis date and HH:MM time, returning None if either is unusable."""
    parsed_day = parse_date(day)
    if parsed_day is None or not time or not isinstance(time, str):
        return None

    time = time.strip()
    # The last block of a day is reported as 24:00.
    if time == END_OF_DAY:
        return datetime.combine(parsed_day + timedelta(days=1), datetime.min.time())
    try:
        clock = datetime.strptime(time, TIME_FMT).time()
    except ValueError:
        _LOGGER.debug("Unable to parse time: %s", time)
        return None
    return datetime.combine(parsed_day, clock)


def _float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        _LOGGER.debug("Unable to parse number: %s", value)
        return None
    if not math.isfinite(number):
        _LOGGER.debug("Ignoring non-finite number: %s", value)
        return None
    return number


def _int(value: Any) -> int | None:
    number = _float(value)
    return int(number) if number is not None else None


def _str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def parse_supply(item: Mapping[str, Any]) -> Supply:
    code = _str(item.get("distributorCode"))
    return Supply(
        cups=str(item.get("cups") or ""),
        address=_str(item.get("address")),
        postal_code=_str(item.get("postalCode")),
        province=_str(item.get("province")),
        municipality=_str(item.get("municipality")),
        distributor=_str(item.get("distributor")),
        distributor_code=code,
        point_type=_int(item.get("pointType")),
        valid_date_from=_str(item.get("validDateFrom")),
        valid_date_to=_str(item.get("validDateTo")),
        valid_from=parse_date(item.get("validDateFrom")),
        valid_to=parse_date(item.get("validDateTo")),
        distributor_obj=get_distributor(code) if code else None,
    )


def parse_contract_detail(item: Mapping[str, Any]) -> ContractDetail:
    powers = item.get("contractedPowerkW")
    if not isinstance(powers, list):
        powers = []

    return ContractDetail(
        cups=str(item.get("cups") or ""),
        distributor=_str(item.get("distributor")),
        marketer=_str(item.get("marketer")),
        tension=_str(item.get("tension")),
        access_fare=_str(item.get("accessFare")),
        province=_str(item.get("province")),
        municipality=_str(item.get("municipality")),
        postal_code=_str(item.get("postalCode")),
        contracted_power_kw=tuple(_float(power) for power in powers),
        time_discrimination=_str(item.get("timeDiscrimination")),
        mode_power_control=_str(item.get("modePowerControl")),
        start_date_raw=_str(item.get("startDate")),
        end_date_raw=_str(item.get("endDate")),
        start_date=parse_date(item.get("startDate")),
        end_date=parse_date(item.get("endDate")),
        code_fare=_str(item.get("codeFare")),
        self_consumption_type_code=_str(item.get("selfConsumptionTypeCode")),
        self_consumption_type_desc=_str(item.get("selfConsumptionTypeDesc")),
        section=_str(item.get("section")),
        subsection=_str(item.get("subsection")),
        partition_coefficient=_float(item.get("partitionCoefficient")),
        cau=_str(item.get("cau")),
        installed_capacity=_float(item.get("installedCapacity")),
    )


def parse_consumption_data(item: Mapping[str, Any]) -> ConsumptionData:
    return ConsumptionData(
        cups=_str(item.get("cups")),
        date=_str(item.get("date")),
        time=_str(item.get("time")),
        consumption_kwh=_float(item.get("consumptionKWh")),
        surplus_energy_kwh=_float(item.get("surplusEnergyKWh")),
        obtain_method=_str(item.get("obtainMethod")),
        when=parse_timestamp(item.get("date"), item.get("time")),
    )


def parse_max_power(item: Mapping[str, Any]) -> MaxPowerData:
    return MaxPowerData(
        cups=_str(item.get("cups")),
        date=_str(item.get("date")),
        time=_str(item.get("time")),
        max_power=_float(item.get("maxPower")),
        period=_str(item.get("period")),
        when=parse_timestamp(item.get("date"), item.get("time")),
    )


def parse_distributors_with_supplies(payload: Any) -> DistributorsWithSupplies:
    """Map the distributors payload, which may be nested under distExistenceUser."""
    codes: Any = []
    if isinstance(payload, Mapping):
        nested = payload.get("distExistenceUser")
        source = nested if isinstance(nested, Mapping) else payload
        codes = source.get("distributorCodes") or []
    if not isinstance(codes, list):
        _LOGGER.debug("Unexpected distributor codes type: %s", type(codes))
        codes = []

    distributor_codes = tuple(str(code) for code in codes)
    return DistributorsWithSupplies(
        distributor_codes=distributor_codes,
        distributors=tuple(get_distributor(code) for code in distributor_codes),
    )


def _parse_list(payload: Any, parser: Callable[[Mapping[str, Any]], _T]) -> list[_T]:
    if not isinstance(payload, list):
        _LOGGER.debug("Unexpected payload type: %s", type(payload))
        return []

    items: list[_T] = []
    for item in payload:
        if not isinstance(item, Mapping):
            _LOGGER.debug("Skipping payload item: %s", item)
            continue
        items.append(parser(item))
    return items


def parse_supplies(payload: Any) -> list[Supply]:
    return _parse_list(payload, parse_supply)


def parse_contract_details(payload: Any) -> list[ContractDetail]:
    return _parse_list(payload, parse_contract_detail)


def parse_consumption_list(payload: Any) -> list[ConsumptionData]:
    return _parse_list(payload, parse_consumption_data)


def parse_max_power_list(payload: Any) -> list[MaxPowerData]:
    return _parse_list(payload, parse_max_power)
