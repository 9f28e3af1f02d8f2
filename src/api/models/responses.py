"""Pydantic response models for API endpoints."""

from datetime import datetime

from pydantic import BaseModel

from models.matching import UncertainMatch
from models.payroll import PayrollEntry, PayrollReport


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    database_available: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNKNOWN_CLIENT = "UNKNOWN_CLIENT"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class MatchResultOut(BaseModel):
    client_name: str
    strategy: str
    matched_text: str


class UncertainMatchOut(BaseModel):
    event_id: str
    event_title: str
    normalized_title: str
    employee_id: str
    event_start: datetime | None
    suggested_match: str | None
    candidates: list[MatchResultOut]

    @classmethod
    def from_domain(cls, match: UncertainMatch) -> "UncertainMatchOut":
        return cls(
            event_id=match.event_id,
            event_title=match.event_title,
            normalized_title=match.normalized_title,
            employee_id=match.employee_id,
            event_start=match.event_start,
            suggested_match=match.suggested_match,
            candidates=[
                MatchResultOut(
                    client_name=c.client_name,
                    strategy=c.strategy.value,
                    matched_text=c.matched_text,
                )
                for c in match.candidates
            ],
        )


class PayrollEntryOut(BaseModel):
    client_name: str
    price_per_session: float
    employee_price_per_session: float
    company_price_per_session: float
    sessions: int
    total_revenue: float
    employee_earnings: float
    company_earnings: float
    event_ids: list[str]

    @classmethod
    def from_domain(cls, entry: PayrollEntry) -> "PayrollEntryOut":
        return cls(
            client_name=entry.client_name,
            price_per_session=entry.client_price,
            employee_price_per_session=entry.employee_price,
            company_price_per_session=entry.company_price,
            sessions=entry.sessions_count,
            total_revenue=entry.total_revenue,
            employee_earnings=entry.employee_earnings,
            company_earnings=entry.company_earnings,
            event_ids=[e.id for e in entry.events],
        )


class PayrollSummaryOut(BaseModel):
    total_sessions: int
    total_revenue: float
    employee_earnings: float
    company_earnings: float
    supervision_sessions: int
    supervision_revenue: float


class PayrollResponse(BaseModel):
    employee_id: str
    employee_name: str
    period_start: datetime
    period_end: datetime
    entries: list[PayrollEntryOut]
    supervision_entries: list[PayrollEntryOut]
    summary: PayrollSummaryOut
    uncertain_matches: list[UncertainMatchOut]

    @classmethod
    def from_domain(
        cls, report: PayrollReport, uncertain: tuple[UncertainMatch, ...]
    ) -> "PayrollResponse":
        summary = report.summary
        return cls(
            employee_id=report.employee.id,
            employee_name=report.employee.name,
            period_start=report.period_start,
            period_end=report.period_end,
            entries=[PayrollEntryOut.from_domain(e) for e in report.entries],
            supervision_entries=[PayrollEntryOut.from_domain(e) for e in report.supervision_entries],
            summary=PayrollSummaryOut(
                total_sessions=summary.total_sessions,
                total_revenue=summary.total_revenue,
                employee_earnings=summary.employee_earnings,
                company_earnings=summary.company_earnings,
                supervision_sessions=summary.supervision_sessions,
                supervision_revenue=summary.supervision_revenue,
            ),
            uncertain_matches=[UncertainMatchOut.from_domain(m) for m in uncertain],
        )


class ConfirmationResponse(BaseModel):
    status: str  # "confirmed", "rejected" or "cleared"
    employee_id: str
    event_title: str | None = None
    client_name: str | None = None


class ConfirmationOut(BaseModel):
    normalized_title: str
    client_name: str
    rejected: bool
    created_at: datetime
