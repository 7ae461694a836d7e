"""Pytest configuration and shared fixtures.

Every test gets its own in-memory SQLite database and a fixed clock, so
billing dates are deterministic.
"""

import itertools
import string
from datetime import date, timedelta
from decimal import Decimal

import pytest

from hostel.services import (
    AssignmentService,
    BillingService,
    ComplaintService,
    PaymentService,
    ResidentService,
    RoomService,
    StatsService,
    create_db_engine,
    create_session_factory,
    init_db,
)

START_DATE = date(2025, 1, 1)


class FixedClock:
    """Callable clock returning a settable date."""

    def __init__(self, today: date):
        self.today = today

    def __call__(self) -> date:
        return self.today

    def advance(self, days: int) -> date:
        self.today += timedelta(days=days)
        return self.today


@pytest.fixture
def engine():
    """In-memory database with all tables created."""
    engine = create_db_engine("sqlite:///:memory:")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    """Session factory bound to the test database."""
    return create_session_factory(engine)


@pytest.fixture
def clock():
    """Clock frozen at START_DATE."""
    return FixedClock(START_DATE)


@pytest.fixture
def resident_service(session_factory):
    return ResidentService(session_factory)


@pytest.fixture
def room_service(session_factory):
    return RoomService(session_factory)


@pytest.fixture
def assignment_service(session_factory, clock):
    return AssignmentService(session_factory, clock=clock)


@pytest.fixture
def billing_service(session_factory, clock):
    return BillingService(session_factory, clock=clock)


@pytest.fixture
def payment_service(session_factory, clock):
    return PaymentService(session_factory, clock=clock)


@pytest.fixture
def complaint_service(session_factory):
    return ComplaintService(session_factory)


@pytest.fixture
def stats_service(session_factory):
    return StatsService(session_factory)


@pytest.fixture
def make_resident(resident_service):
    """Factory creating residents with unique CNICs."""
    counter = itertools.count()

    def _make(name: str | None = None, **overrides):
        n = next(counter)
        payload = {
            "name": name or f"Resident {string.ascii_uppercase[n % 26]}",
            "cnic": f"35202-{1000000 + n:07d}-1",
            "department": "Computer Science",
            "phone": "0300-1234567",
            "address": "House 12 Street 4 Lahore",
        }
        payload.update(overrides)
        return resident_service.create_resident(payload)

    return _make


@pytest.fixture
def make_room(room_service):
    """Factory creating rooms with unique numbers."""
    counter = itertools.count(101)

    def _make(capacity: int = 2, monthly_fee=Decimal("5000"), **overrides):
        payload = {
            "room_number": str(next(counter)),
            "capacity": capacity,
            "monthly_fee": monthly_fee,
            "room_type": "Shared",
        }
        payload.update(overrides)
        return room_service.create_room(payload)

    return _make
