"""Data models returned by the Datadis client."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import IntEnum


class MeasurementType(IntEnum):
    """Granularity of the consumption data."""

    HOURLY = 0
    QUARTER_HOURLY = 1


@dataclass(frozen=True, slots=True)
class Account:
    """Credentials of a Datadis user."""

    username: str
    password: str = field(repr=False)
    name: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            object.__setattr__(self, "name", self.username)


@dataclass(frozen=True, slots=True)
class LoginResult:
    """Outcome of a successful login."""

    account: Account
    token: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class Distributor:
    """A distribution company, identified by its Datadis code."""

    code: str
    name: str | None


@dataclass(frozen=True, slots=True)
class SupplyTarget:
    """Parameters identifying a supply point in a request."""

    cups: str
    distributor_code: str
    point_type: int | None = None


@dataclass(frozen=True, slots=True)
class Supply:
    """A metering point linked to the account."""

    cups: str
    address: str | None
    postal_code: str | None
    province: str | None
    municipality: str | None
    distributor: str | None
    distributor_code: str | None
    point_type: int | None
    valid_date_from: str | None
    valid_date_to: str | None
    valid_from: date | None
    valid_to: date | None
    distributor_obj: Distributor | None


@dataclass(frozen=True, slots=True)
class ContractDetail:
    """Contract conditions of a supply for one contract period."""

    cups: str
    distributor: str | None
    marketer: str | None
    tension: str | None
    access_fare: str | None
    province: str | None
    municipality: str | None
    postal_code: str | None
    contracted_power_kw: tuple[float | None, ...]
    time_discrimination: str | None
    mode_power_control: str | None
    start_date_raw: str | None
    end_date_raw: str | None
    start_date: date | None
    end_date: date | None
    code_fare: str | None
    self_consumption_type_code: str | None
    self_consumption_type_desc: str | None
    section: str | None
    subsection: str | None
    partition_coefficient: float | None
    cau: str | None
    installed_capacity: float | None


@dataclass(frozen=True, slots=True)
class ConsumptionData:
    """Consumption for a single time block."""

    cups: str | None
    date: str | None
    time: str | None
    consumption_kwh: float | None
    surplus_energy_kwh: float | None
    obtain_method: str | None
    when: datetime | None


@dataclass(frozen=True, slots=True)
class ConsumptionSeries:
    """Consumption records of a supply for a month range, in upstream order."""

    supply: Supply | SupplyTarget
    start_date: date
    end_date: date
    measurement_type: MeasurementType
    data: tuple[ConsumptionData, ...]

    @property
    def total_consumption_kwh(self) -> float:
        return round(sum(item.consumption_kwh or 0.0 for item in self.data), 3)


@dataclass(frozen=True, slots=True)
class MaxPowerData:
    """Maximum power demanded in a tariff period."""

    cups: str | None
    date: str | None
    time: str | None
    max_power: float | None
    period: str | None
    when: datetime | None


@dataclass(frozen=True, slots=True)
class DistributorsWithSupplies:
    """Distributors holding at least one supply of the account."""

    distributor_codes: tuple[str, ...]
    distributors: tuple[Distributor, ...]
