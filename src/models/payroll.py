"""
Data models for the client roster and payroll reports.
"""

from dataclasses import dataclass, field
from datetime import datetime

from core.config import (
    SUPERVISION_COMPANY_PRICE,
    SUPERVISION_EMPLOYEE_PRICE,
    SUPERVISION_ENABLED,
    SUPERVISION_KEYWORDS,
    SUPERVISION_PRICE,
)
from models.events import CalendarEvent


@dataclass(frozen=True)
class Employee:
    """Practitioner whose calendar is being reconciled."""

    id: str
    name: str
    email: str = ""
    calendar_id: str = ""
    color: str = "#2196F3"


@dataclass(frozen=True)
class Client:
    """
    Client with a pre-agreed per-session price split.

    employee_price + company_price == price (within 0.01) is enforced at data
    entry by core.validation, not here.
    """

    id: str
    name: str
    price: float
    employee_price: float
    company_price: float
    employee_id: str
    pending_payment: bool = False


@dataclass(frozen=True)
class SupervisionConfig:
    """Pricing for supervision sessions, matched by keyword instead of client name."""

    enabled: bool = SUPERVISION_ENABLED
    price: float = SUPERVISION_PRICE
    employee_price: float = SUPERVISION_EMPLOYEE_PRICE
    company_price: float = SUPERVISION_COMPANY_PRICE
    keywords: tuple[str, ...] = tuple(SUPERVISION_KEYWORDS)


@dataclass(frozen=True)
class PayrollEntry:
    """One line item: a client's (or supervision keyword's) sessions in the period."""

    client_name: str
    client_price: float
    employee_price: float
    company_price: float
    sessions_count: int
    total_revenue: float
    employee_earnings: float
    company_earnings: float
    events: tuple[CalendarEvent, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PayrollSummary:
    total_sessions: int = 0
    total_revenue: float = 0.0
    employee_earnings: float = 0.0
    company_earnings: float = 0.0
    supervision_sessions: int = 0
    supervision_revenue: float = 0.0


@dataclass(frozen=True)
class PayrollReport:
    """Complete payroll report for one employee and period. Never mutated."""

    employee: Employee
    period_start: datetime
    period_end: datetime
    entries: tuple[PayrollEntry, ...]
    supervision_entries: tuple[PayrollEntry, ...]
    summary: PayrollSummary
