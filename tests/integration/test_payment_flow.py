"""Integration tests for billing status and payment acceptance over time."""

from decimal import Decimal

import pytest

from hostel.services.billing_service import FeeStatus
from hostel.services.errors import (
    NotFoundError,
    PaymentMismatchError,
    PreconditionError,
    ValidationError,
)


@pytest.fixture
def assigned_resident(make_resident, make_room, assignment_service):
    """Resident assigned to a room with a 5000 monthly fee."""
    resident = make_resident()
    room = make_room(monthly_fee=Decimal("5000"))
    assignment_service.assign(resident.id, room.id)
    return resident


class TestFirstPayment:
    """Payments before any history exists."""

    def test_pending_before_first_payment(self, billing_service, assigned_resident):
        snapshot = billing_service.get_billing_status(assigned_resident.id)

        assert snapshot.status == FeeStatus.PAYMENT_PENDING
        assert snapshot.total_payable == Decimal("5000")
        assert snapshot.due_date is None

    def test_first_payment_must_equal_fee(
        self, make_resident, make_room, assignment_service, payment_service, billing_service
    ):
        resident = make_resident()
        room = make_room(monthly_fee=Decimal("3000"))
        assignment_service.assign(resident.id, room.id)

        with pytest.raises(PaymentMismatchError) as exc_info:
            payment_service.record_payment(resident.id, 2500)

        error = exc_info.value
        assert error.expected == Decimal("3000.00")
        assert error.message == (
            "Expected payment is PKR 3000. First payment must match the monthly fee. "
            "Partial or extra payments are not allowed."
        )
        assert payment_service.list_payments(resident.id) == []

        receipt = payment_service.record_payment(resident.id, "3000")

        assert receipt.payment_id > 0
        assert receipt.snapshot.status == FeeStatus.PAID
        assert receipt.snapshot.last_payment_date.isoformat() == "2025-01-01"
        assert receipt.snapshot.due_date.isoformat() == "2025-01-31"
        assert billing_service.get_billing_status(resident.id) == receipt.snapshot


class TestCycle:
    """Payments within and after a billing cycle."""

    @pytest.mark.parametrize("amount", [4000, 5100])
    def test_partial_or_extra_rejected(self, payment_service, clock, assigned_resident, amount):
        payment_service.record_payment(assigned_resident.id, 5000)
        clock.advance(20)

        with pytest.raises(PaymentMismatchError) as exc_info:
            payment_service.record_payment(assigned_resident.id, amount)

        assert exc_info.value.expected == Decimal("5000.00")
        assert "must match the monthly fee for this billing cycle" in exc_info.value.message
        assert len(payment_service.list_payments(assigned_resident.id)) == 1

    def test_late_payment_includes_fine(self, payment_service, billing_service, clock, assigned_resident):
        payment_service.record_payment(assigned_resident.id, 5000)
        clock.advance(33)  # three days past the due date

        snapshot = billing_service.get_billing_status(assigned_resident.id)
        assert snapshot.status == FeeStatus.LATE
        assert snapshot.days_late == 3
        assert snapshot.total_payable == Decimal("5300")

        with pytest.raises(PaymentMismatchError) as exc_info:
            payment_service.record_payment(assigned_resident.id, 5000)
        assert exc_info.value.message == (
            "Expected payment is PKR 5300. Includes PKR 300 late fee for 3 day(s). "
            "Partial or extra payments are not allowed."
        )

        receipt = payment_service.record_payment(assigned_resident.id, Decimal("5300.00"))

        assert receipt.snapshot.status == FeeStatus.PAID
        assert receipt.snapshot.fine == 0
        assert receipt.snapshot.due_date == clock() + (snapshot.due_date - snapshot.last_payment_date)

    def test_status_escalates_with_time(self, payment_service, billing_service, clock, assigned_resident):
        payment_service.record_payment(assigned_resident.id, 5000)

        seen = []
        for offset in (30, 1, 4, 1, 24, 1, 30):
            clock.advance(offset)
            seen.append(billing_service.get_billing_status(assigned_resident.id).status)

        assert seen == [
            FeeStatus.PAID,
            FeeStatus.LATE,
            FeeStatus.LATE,
            FeeStatus.DEFAULTER,
            FeeStatus.DEFAULTER,
            FeeStatus.CRITICAL_DEFAULTER,
            FeeStatus.CRITICAL_DEFAULTER,
        ]

    def test_payment_amount_stored_as_expected(self, payment_service, assigned_resident):
        payment_service.record_payment(assigned_resident.id, "5000.004")

        (payment,) = payment_service.list_payments(assigned_resident.id)
        assert payment.amount == Decimal("5000.00")

    def test_reads_are_idempotent(self, payment_service, billing_service, clock, assigned_resident):
        payment_service.record_payment(assigned_resident.id, 5000)
        clock.advance(40)

        first = billing_service.get_billing_status(assigned_resident.id)
        second = billing_service.get_billing_status(assigned_resident.id)

        assert first == second
        assert len(payment_service.list_payments(assigned_resident.id)) == 1


class TestRejections:
    """Payments that never reach the comparison."""

    @pytest.mark.parametrize("amount", [0, -50, "abc", None, "NaN", True])
    def test_invalid_amount(self, payment_service, assigned_resident, amount):
        with pytest.raises(ValidationError, match="positive number"):
            payment_service.record_payment(assigned_resident.id, amount)

    def test_missing_resident(self, payment_service, billing_service):
        with pytest.raises(NotFoundError):
            payment_service.record_payment(999, 5000)
        with pytest.raises(NotFoundError):
            billing_service.get_billing_status(999)

    def test_unassigned_resident(self, payment_service, billing_service, make_resident):
        resident = make_resident()

        with pytest.raises(PreconditionError, match="must be assigned"):
            billing_service.get_billing_status(resident.id)
        with pytest.raises(PreconditionError):
            payment_service.record_payment(resident.id, 5000)

    def test_room_without_fee(self, billing_service, assignment_service, make_resident, make_room):
        resident = make_resident()
        room = make_room(monthly_fee=0)
        assignment_service.assign(resident.id, room.id)

        with pytest.raises(PreconditionError, match="Room fee is not configured"):
            billing_service.get_billing_status(resident.id)


class TestListPayments:
    """PaymentService.list_payments."""

    def test_filters_by_resident(self, payment_service, make_resident, make_room, assignment_service):
        room = make_room(capacity=2)
        first, second = make_resident(), make_resident()
        assignment_service.assign(first.id, room.id)
        assignment_service.assign(second.id, room.id)
        payment_service.record_payment(first.id, 5000)
        payment_service.record_payment(second.id, 5000)

        assert len(payment_service.list_payments()) == 2
        assert [p.resident_id for p in payment_service.list_payments(first.id)] == [first.id]
