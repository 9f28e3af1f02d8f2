"""
Payroll calculation from matched calendar events.

Pure functions: no I/O, no mutation of inputs. Every monetary value is
rounded to cents after each multiplication and accumulation.
"""

from collections.abc import Mapping, Sequence
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from models.events import CalendarEvent
from models.payroll import (
    Client,
    Employee,
    PayrollEntry,
    PayrollReport,
    PayrollSummary,
    SupervisionConfig,
)

CENTS = Decimal("0.01")


def round_to_cents(value: float | Decimal) -> float:
    """Round half-up to two decimals (3 * 15.50 -> 46.5, never 46.50000000001)."""
    return float(Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP))


def multiply_money(price: float, count: int) -> float:
    return round_to_cents(Decimal(str(price)) * count)


def add_money(a: float, b: float) -> float:
    return round_to_cents(Decimal(str(a)) + Decimal(str(b)))


def is_event_in_period(event: CalendarEvent, period_start: datetime, period_end: datetime) -> bool:
    """Start time must lie strictly inside (period_start, period_end)."""
    return period_start < event.start_time < period_end


def billable_events(
    events: Sequence[CalendarEvent], period_start: datetime, period_end: datetime
) -> tuple[CalendarEvent, ...]:
    return tuple(
        e for e in events if is_event_in_period(e, period_start, period_end) and e.is_billable
    )


def build_entry(
    name: str,
    price: float,
    employee_price: float,
    company_price: float,
    events: tuple[CalendarEvent, ...],
) -> PayrollEntry:
    count = len(events)
    return PayrollEntry(
        client_name=name,
        client_price=price,
        employee_price=employee_price,
        company_price=company_price,
        sessions_count=count,
        total_revenue=multiply_money(price, count),
        employee_earnings=multiply_money(employee_price, count),
        company_earnings=multiply_money(company_price, count),
        events=events,
    )


class PayrollCalculator:
    """Turns a client-name -> events mapping into a PayrollReport."""

    def calculate(
        self,
        employee: Employee,
        clients: Sequence[Client],
        client_events: Mapping[str, Sequence[CalendarEvent]],
        period_start: datetime,
        period_end: datetime,
        supervision_config: SupervisionConfig | None = None,
    ) -> PayrollReport:
        entries: list[PayrollEntry] = []
        supervision_keywords = set(supervision_config.keywords) if supervision_config else set()

        for client in clients:
            # Supervision buckets are priced from the config, never as a client
            if client.name in supervision_keywords:
                continue
            valid = billable_events(client_events.get(client.name, ()), period_start, period_end)
            if not valid:
                continue
            entries.append(
                build_entry(
                    client.name,
                    client.price,
                    client.employee_price,
                    client.company_price,
                    valid,
                )
            )

        supervision_entries: list[PayrollEntry] = []
        if supervision_config is not None and supervision_config.enabled:
            for keyword in dict.fromkeys(supervision_config.keywords):
                valid = billable_events(client_events.get(keyword, ()), period_start, period_end)
                if not valid:
                    continue
                supervision_entries.append(
                    build_entry(
                        keyword,
                        supervision_config.price,
                        supervision_config.employee_price,
                        supervision_config.company_price,
                        valid,
                    )
                )

        return PayrollReport(
            employee=employee,
            period_start=period_start,
            period_end=period_end,
            entries=tuple(entries),
            supervision_entries=tuple(supervision_entries),
            summary=summarize(entries, supervision_entries),
        )


def summarize(
    entries: Sequence[PayrollEntry], supervision_entries: Sequence[PayrollEntry]
) -> PayrollSummary:
    total_sessions = 0
    total_revenue = 0.0
    employee_earnings = 0.0
    company_earnings = 0.0
    supervision_sessions = 0
    supervision_revenue = 0.0

    for entry in list(entries) + list(supervision_entries):
        total_sessions += entry.sessions_count
        total_revenue = add_money(total_revenue, entry.total_revenue)
        employee_earnings = add_money(employee_earnings, entry.employee_earnings)
        company_earnings = add_money(company_earnings, entry.company_earnings)

    for entry in supervision_entries:
        supervision_sessions += entry.sessions_count
        supervision_revenue = add_money(supervision_revenue, entry.total_revenue)

    return PayrollSummary(
        total_sessions=total_sessions,
        total_revenue=total_revenue,
        employee_earnings=employee_earnings,
        company_earnings=company_earnings,
        supervision_sessions=supervision_sessions,
        supervision_revenue=supervision_revenue,
    )
