"""Billing derivation: a resident's payment status computed from history.

Nothing here is stored. A snapshot is rebuilt from the active assignment, the
room's current fee and the most recent payment every time it is requested.

Cycle rules:
- No payment yet: PaymentPending, nothing due date-wise, pay the monthly fee.
- Otherwise the next payment is due 30 days after the last one. Every whole
  day past the due date adds a fixed fine of 100.

Status by days late (first matching row of STATUS_TABLE wins):

    days_late <= 0   Paid
    1 .. 5           Late
    6 .. 30          Defaulter
    > 30             CriticalDefaulter
"""

import logging
from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Callable, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from hostel.models import Assignment, Payment, Resident
from hostel.services.db import unit_of_work
from hostel.services.errors import NotFoundError, PreconditionError

logger = logging.getLogger(__name__)

BILLING_CYCLE_DAYS = 30
FINE_PER_DAY = Decimal("100")


class FeeStatus(str, Enum):
    """Derived payment status of a resident."""

    PAYMENT_PENDING = "PaymentPending"
    PAID = "Paid"
    LATE = "Late"
    DEFAULTER = "Defaulter"
    CRITICAL_DEFAULTER = "CriticalDefaulter"


# (inclusive upper bound on days late, status); None means unbounded
STATUS_TABLE: tuple[tuple[Optional[int], FeeStatus], ...] = (
    (0, FeeStatus.PAID),
    (5, FeeStatus.LATE),
    (30, FeeStatus.DEFAULTER),
    (None, FeeStatus.CRITICAL_DEFAULTER),
)


def today_utc() -> date:
    """Current calendar date on the UTC clock."""
    return datetime.now(timezone.utc).date()


def classify_days_late(days_late: int) -> FeeStatus:
    """Map days past the due date to a status using STATUS_TABLE."""
    for upper_bound, status in STATUS_TABLE:
        if upper_bound is None or days_late <= upper_bound:
            return status
    raise AssertionError("STATUS_TABLE must end with an unbounded row")


@dataclass(frozen=True)
class BillingSnapshot:
    """Derived, never persisted view of a resident's billing state."""

    monthly_fee: Decimal
    room_type: Optional[str]
    assigned_since: date
    last_payment_date: Optional[date]
    due_date: Optional[date]
    days_late: int
    fine: Decimal
    total_payable: Decimal
    status: FeeStatus
    today: date

    def to_dict(self) -> dict:
        return asdict(self)


def compute_snapshot(
    assignment: Optional[Assignment],
    monthly_fee: Decimal,
    last_payment_date: Optional[date],
    today: date,
    room_type: Optional[str] = None,
) -> BillingSnapshot:
    """
    Compute the billing snapshot for one resident. Pure function.

    Args:
        assignment: Active assignment of the resident, or None
        monthly_fee: Current fee of the assigned room
        last_payment_date: Date of the most recent payment, or None if never paid
        today: Reference UTC date
        room_type: Optional room type, copied into the snapshot

    Returns:
        BillingSnapshot

    Raises:
        PreconditionError: Resident has no active assignment
    """
    if assignment is None:
        raise PreconditionError("Resident must be assigned to a room before billing applies")

    monthly_fee = Decimal(monthly_fee)

    if last_payment_date is None:
        return BillingSnapshot(
            monthly_fee=monthly_fee,
            room_type=room_type,
            assigned_since=assignment.since,
            last_payment_date=None,
            due_date=None,
            days_late=0,
            fine=Decimal("0"),
            total_payable=monthly_fee,
            status=FeeStatus.PAYMENT_PENDING,
            today=today,
        )

    due_date = last_payment_date + timedelta(days=BILLING_CYCLE_DAYS)
    days_late = max(0, (today - due_date).days)
    fine = FINE_PER_DAY * days_late

    return BillingSnapshot(
        monthly_fee=monthly_fee,
        room_type=room_type,
        assigned_since=assignment.since,
        last_payment_date=last_payment_date,
        due_date=due_date,
        days_late=days_late,
        fine=fine,
        total_payable=monthly_fee + fine,
        status=classify_days_late(days_late),
        today=today,
    )


def load_snapshot(session: Session, resident_id: int, today: date) -> BillingSnapshot:
    """
    Gather billing inputs from the store and compute the snapshot.

    Runs inside the caller's unit of work so PaymentService can validate and
    insert against the same view of the data.

    Raises:
        NotFoundError: Resident does not exist
        PreconditionError: No active assignment, or the room has no positive fee
    """
    if session.get(Resident, resident_id) is None:
        raise NotFoundError("Resident does not exist")

    assignment = session.scalar(select(Assignment).where(Assignment.resident_id == resident_id))
    last_payment_date = session.scalar(
        select(func.max(Payment.payment_date)).where(Payment.resident_id == resident_id)
    )

    if assignment is None:
        return compute_snapshot(None, Decimal("0"), last_payment_date, today)

    room = assignment.room
    if room.monthly_fee is None or room.monthly_fee <= 0:
        raise PreconditionError("Room fee is not configured for this assignment")

    return compute_snapshot(
        assignment,
        room.monthly_fee,
        last_payment_date,
        today,
        room_type=room.room_type,
    )


class BillingService:
    """Read-only access to billing snapshots."""

    def __init__(self, session_factory: sessionmaker, clock: Callable[[], date] = today_utc):
        """Initialize billing service.

        Args:
            session_factory: Factory for sessions bound to the store
            clock: Returns the reference date (UTC today by default)
        """
        self.session_factory = session_factory
        self.clock = clock

    def get_billing_status(self, resident_id: int) -> BillingSnapshot:
        """Compute the current snapshot for a resident (no locks, no writes)."""
        with unit_of_work(self.session_factory) as session:
            snapshot = load_snapshot(session, resident_id, self.clock())
        logger.debug(
            f"Billing status for resident {resident_id}: {snapshot.status.value}, "
            f"days_late={snapshot.days_late}, total_payable={snapshot.total_payable}"
        )
        return snapshot


__all__ = [
    "BILLING_CYCLE_DAYS",
    "FINE_PER_DAY",
    "FeeStatus",
    "STATUS_TABLE",
    "BillingSnapshot",
    "BillingService",
    "classify_days_late",
    "compute_snapshot",
    "load_snapshot",
    "today_utc",
]
