"""API Pydantic models."""

from .requests import (
    CalendarEventIn,
    ClientIn,
    ConfirmMatchRequest,
    EmployeeIn,
    PayrollRequest,
    RejectMatchRequest,
    SupervisionConfigIn,
)
from .responses import (
    ConfirmationOut,
    ConfirmationResponse,
    ErrorCodes,
    ErrorResponse,
    HealthResponse,
    PayrollResponse,
    UncertainMatchOut,
)

__all__ = [
    "CalendarEventIn",
    "ClientIn",
    "ConfirmMatchRequest",
    "EmployeeIn",
    "PayrollRequest",
    "RejectMatchRequest",
    "SupervisionConfigIn",
    "ConfirmationOut",
    "ConfirmationResponse",
    "ErrorCodes",
    "ErrorResponse",
    "HealthResponse",
    "PayrollResponse",
    "UncertainMatchOut",
]
