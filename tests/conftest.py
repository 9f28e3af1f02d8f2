"""
Pytest configuration and shared fixtures.
"""

import sys
from datetime import datetime
from itertools import count
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from models.events import CalendarEvent  # noqa: E402
from models.payroll import Client, Employee, SupervisionConfig  # noqa: E402
from services.confirmations import InMemoryMatchConfirmationStore  # noqa: E402

PERIOD_START = datetime(2025, 11, 1, 0, 0, 0)
PERIOD_END = datetime(2025, 11, 30, 23, 59, 59)


@pytest.fixture
def employee():
    """Sample employee."""
    return Employee(id="emp-1", name="Ελένη Γεωργίου", email="eleni@example.com")


@pytest.fixture
def period():
    return PERIOD_START, PERIOD_END


@pytest.fixture
def clients():
    """Roster for emp-1 plus one client of another employee."""
    return [
        Client("c1", "Ζωή Κουσουλού", 50.0, 22.5, 27.5, "emp-1"),
        Client("c2", "Ndrekaj Ornela - Ντρεκαι Ορνελα", 40.0, 20.0, 20.0, "emp-1"),
        Client("c3", "Γιάννης Δημητρίου", 15.5, 7.75, 7.75, "emp-1"),
        Client("c4", "Μαρία Παπαδοπούλου", 60.0, 30.0, 30.0, "emp-2"),
    ]


@pytest.fixture
def make_event():
    """Factory for calendar events inside the November 2025 period."""
    ids = count(1)

    def _make(
        title: str,
        day: int = 3,
        hour: int = 10,
        cancelled: bool = False,
        pending: bool = False,
        start: datetime | None = None,
    ) -> CalendarEvent:
        start_time = start or datetime(2025, 11, day, hour, 0)
        return CalendarEvent(
            id=f"evt-{next(ids)}",
            title=title,
            start_time=start_time,
            end_time=start_time.replace(minute=50),
            is_cancelled=cancelled,
            is_pending_payment=pending,
        )

    return _make


@pytest.fixture
def supervision_config():
    return SupervisionConfig(
        enabled=True,
        price=30.0,
        employee_price=15.0,
        company_price=15.0,
        keywords=("Εποπτεία", "Supervision"),
    )


@pytest.fixture
def store():
    return InMemoryMatchConfirmationStore()
