"""Validation and shaping of Datadis request parameters."""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

from .const import (
    PARAM_AUTHORIZED_NIF,
    PARAM_CUPS,
    PARAM_DISTRIBUTOR_CODE,
    PARAM_END_DATE,
    PARAM_POINT_TYPE,
    PARAM_START_DATE,
)
from .errors import DatadisValidationError
from .models import MeasurementType, Supply, SupplyTarget
from .parsers import format_month

_LOGGER = logging.getLogger(__name__)


def validate_target(supply: Supply | SupplyTarget | None, operation: str) -> SupplyTarget:
    """Check that a supply carries a CUPS and a distributor code."""
    cups = getattr(supply, "cups", None)
    distributor_code = getattr(supply, "distributor_code", None)
    point_type = getattr(supply, "point_type", None)

    cups = str(cups).strip() if cups is not None else ""
    distributor_code = str(distributor_code).strip() if distributor_code is not None else ""

    if not cups or not distributor_code:
        raise DatadisValidationError(
            f"{operation}: cups and distributor_code (or a Supply) are mandatory"
        )

    return SupplyTarget(cups=cups, distributor_code=distributor_code, point_type=point_type)


def validate_date_range(
    start_date: date | None, end_date: date | None, operation: str
) -> tuple[date, date]:
    """Default missing bounds to today and check their order at month level."""
    today = date.today()
    start = _as_date(start_date) if start_date is not None else today
    end = _as_date(end_date) if end_date is not None else today

    if (start.year, start.month) > (end.year, end.month):
        raise DatadisValidationError(
            f"{operation}: start month {format_month(start)} is after end month {format_month(end)}"
        )
    return start, end


def validate_measurement_type(value: Any) -> MeasurementType:
    try:
        return MeasurementType(int(value))
    except (TypeError, ValueError) as err:
        raise DatadisValidationError(
            f"measurement_type must be 0 (hourly) or 1 (quarter-hourly), got {value!r}"
        ) from err


def build_params(
    target: SupplyTarget | None = None,
    *,
    start_date: date | None = None,
    end_date: date | None = None,
    authorized_nif: str | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Assemble query parameters, leaving out the ones without a value."""
    params: dict[str, Any] = {}
    if target is not None:
        params[PARAM_CUPS] = target.cups
        params[PARAM_DISTRIBUTOR_CODE] = target.distributor_code
        params[PARAM_POINT_TYPE] = target.point_type
    if start_date is not None:
        params[PARAM_START_DATE] = format_month(start_date)
    if end_date is not None:
        params[PARAM_END_DATE] = format_month(end_date)
    params[PARAM_AUTHORIZED_NIF] = authorized_nif or None
    params.update(extra)

    cleaned = {key: value for key, value in params.items() if value is not None and value != ""}
    _LOGGER.debug("Request parameters: %s", cleaned)
    return cleaned


def _as_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    if not isinstance(value, date):
        raise DatadisValidationError(f"Expected a date, got {type(value).__name__}")
    return value
