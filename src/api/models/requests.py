"""Pydantic request models for API endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from core.config import SUPERVISION_KEYWORDS
from models.events import CalendarEvent
from models.payroll import Client, Employee, SupervisionConfig
from services.calendar import to_local_naive


class EmployeeIn(BaseModel):
    id: str
    name: str
    email: str = ""
    calendar_id: str = ""

    def to_domain(self) -> Employee:
        return Employee(id=self.id, name=self.name, email=self.email, calendar_id=self.calendar_id)


class ClientIn(BaseModel):
    id: str = ""
    name: str
    price: float
    employee_price: float
    company_price: float
    employee_id: str
    pending_payment: bool = False

    def to_domain(self) -> Client:
        return Client(**self.model_dump())


class CalendarEventIn(BaseModel):
    id: str
    title: str
    start_time: datetime
    end_time: datetime
    color_id: str | None = None
    is_cancelled: bool = False
    is_pending_payment: bool = False
    attendees: list[str] = []

    @field_validator("start_time", "end_time")
    @classmethod
    def as_local_time(cls, value: datetime) -> datetime:
        return to_local_naive(value)

    def to_domain(self) -> CalendarEvent:
        data = self.model_dump()
        data["attendees"] = tuple(self.attendees)
        return CalendarEvent(**data)


class SupervisionConfigIn(BaseModel):
    enabled: bool = True
    price: float = 0.0
    employee_price: float = 0.0
    company_price: float = 0.0
    keywords: list[str] = Field(default_factory=lambda: list(SUPERVISION_KEYWORDS))

    def to_domain(self) -> SupervisionConfig:
        return SupervisionConfig(
            enabled=self.enabled,
            price=self.price,
            employee_price=self.employee_price,
            company_price=self.company_price,
            keywords=tuple(self.keywords),
        )


class PayrollRequest(BaseModel):
    """Everything needed for one calculation; calendars and roster are fetched by the caller."""

    employee: EmployeeIn
    clients: list[ClientIn]
    events: list[CalendarEventIn]
    period_start: datetime
    period_end: datetime
    supervision: SupervisionConfigIn | None = None

    @field_validator("period_start", "period_end")
    @classmethod
    def as_local_time(cls, value: datetime) -> datetime:
        # Events are compared in local naive time; periods must match
        return to_local_naive(value)

    @model_validator(mode="after")
    def check_period(self) -> "PayrollRequest":
        if self.period_end <= self.period_start:
            raise ValueError("period_end must be after period_start")
        return self


class ConfirmMatchRequest(BaseModel):
    employee_id: str
    event_title: str = Field(min_length=1)
    client_name: str = Field(min_length=1)
    clients: list[ClientIn]
    supervision_keywords: list[str] = Field(default_factory=lambda: list(SUPERVISION_KEYWORDS))


class RejectMatchRequest(BaseModel):
    employee_id: str
    event_title: str = Field(min_length=1)
