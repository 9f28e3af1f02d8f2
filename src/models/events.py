"""
Data models for calendar events.

Events are immutable once fetched; one list lives for one calculation pass.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class CalendarEvent:
    """A therapy session as recorded in an employee's calendar."""

    id: str
    title: str
    start_time: datetime
    end_time: datetime
    color_id: str | None = None
    is_cancelled: bool = False
    is_pending_payment: bool = False
    attendees: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_billable(self) -> bool:
        """Cancelled sessions only count when the client still owes them."""
        return not self.is_cancelled or self.is_pending_payment

    @property
    def status(self) -> str:
        if self.is_pending_payment:
            return "pending_payment"
        if self.is_cancelled:
            return "cancelled"
        return "completed"

    @property
    def duration_minutes(self) -> int:
        return int((self.end_time - self.start_time).total_seconds() // 60)
