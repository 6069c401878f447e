"""Constants for the Datadis client."""
from __future__ import annotations

from typing import Final

BASE_URL: Final = "https://datadis.es"

LOGIN_PATH: Final = "/nikola-auth/tokens/login"
SUPPLIES_PATH: Final = "/api-private/api/get-supplies"
CONTRACT_DETAIL_PATH: Final = "/api-private/api/get-contract-detail"
CONSUMPTION_DATA_PATH: Final = "/api-private/api/get-consumption-data"
MAX_POWER_PATH: Final = "/api-private/api/get-max-power"
DISTRIBUTORS_WITH_SUPPLIES_PATH: Final = "/api-private/api/get-distributors-with-supplies"

API_TIMEOUT: Final = 10

# Query parameters
PARAM_CUPS: Final = "cups"
PARAM_DISTRIBUTOR_CODE: Final = "distributorCode"
PARAM_POINT_TYPE: Final = "pointType"
PARAM_AUTHORIZED_NIF: Final = "authorizedNif"
PARAM_START_DATE: Final = "startDate"
PARAM_END_DATE: Final = "endDate"
PARAM_MEASUREMENT_TYPE: Final = "measurementType"

QUERY_MONTH_FMT: Final = "%Y/%m"
DATE_FORMATS: Final = ("%Y/%m/%d", "%d/%m/%Y")
TIME_FMT: Final = "%H:%M"
END_OF_DAY: Final = "24:00"

# Ordered (code, name) pairs of the distributors known to Datadis.
DISTRIBUTORS: Final = (
    ("1", "Viesgo"),
    ("2", "E-distribución"),
    ("3", "E-redes"),
    ("4", "ASEME"),
    ("5", "UFD"),
    ("6", "EOSA"),
    ("7", "CIDE"),
    ("8", "I-DE REDES ELÉCTRICAS INTELIGENTES, S.A.U."),
)
