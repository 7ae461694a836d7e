"""Payment acceptance: validate a payment against the live snapshot, then record it.

A payment is accepted only when it equals the total payable exactly (monthly
fee, plus the fine when late). There are no partial payments, credits or
reversals; the payments table is append-only.
"""

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, List, NamedTuple, Optional

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from hostel.models import Payment, Resident
from hostel.services.billing_service import BillingSnapshot, load_snapshot, today_utc
from hostel.services.config import settings
from hostel.services.db import unit_of_work
from hostel.services.errors import NotFoundError, PaymentMismatchError, ValidationError
from hostel.services.validators import parse_decimal

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


class PaymentReceipt(NamedTuple):
    """Recorded payment ID and the billing snapshot after the payment."""

    payment_id: int
    snapshot: BillingSnapshot


def _to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def _format_amount(value: Decimal) -> str:
    # 5000.00 -> "5000", 5000.50 -> "5000.5"
    normalized = _to_cents(value).normalize()
    return f"{normalized:f}"


def mismatch_reason(snapshot: BillingSnapshot, currency: str) -> str:
    """Explain what the expected amount is made of."""
    if snapshot.last_payment_date is None:
        return "First payment must match the monthly fee."
    if snapshot.days_late > 0:
        return (
            f"Includes {currency} {_format_amount(snapshot.fine)} late fee "
            f"for {snapshot.days_late} day(s)."
        )
    return "Payment must match the monthly fee for this billing cycle."


class PaymentService:
    """Guards and records fee payments."""

    def __init__(
        self,
        session_factory: sessionmaker,
        clock: Callable[[], date] = today_utc,
        currency: str | None = None,
    ):
        """Initialize payment service.

        Args:
            session_factory: Factory for sessions bound to the store
            clock: Returns the payment date (UTC today by default)
            currency: Label used in error messages (default: settings.currency)
        """
        self.session_factory = session_factory
        self.clock = clock
        self.currency = currency or settings.currency

    def record_payment(self, resident_id: int, amount: Any) -> PaymentReceipt:
        """
        Accept a payment equal to the current total payable.

        The snapshot read, the comparison and the insert happen in one unit
        of work holding the resident's lock, so two concurrent payments cannot
        both validate against the same pre-payment snapshot.

        Args:
            resident_id: Paying resident
            amount: Offered amount (Decimal, int, float or numeric string)

        Returns:
            PaymentReceipt with the new payment ID and the post-payment snapshot

        Raises:
            ValidationError: Amount not a positive number
            PaymentMismatchError: Amount differs from total payable
            NotFoundError: Resident missing
            PreconditionError: Resident has no assignment
        """
        offered = parse_decimal(amount)
        if offered is None or offered <= 0:
            raise ValidationError("Payment amount must be a positive number")
        offered = _to_cents(offered)

        today = self.clock()
        with unit_of_work(self.session_factory) as session:
            resident = session.scalar(
                select(Resident).where(Resident.id == resident_id).with_for_update()
            )
            if resident is None:
                raise NotFoundError("Resident does not exist")

            snapshot = load_snapshot(session, resident_id, today)
            expected = _to_cents(snapshot.total_payable)
            if offered != expected:
                logger.warning(
                    f"Payment rejected for resident {resident_id}: offered={offered}, "
                    f"expected={expected}, status={snapshot.status.value}"
                )
                raise PaymentMismatchError(
                    f"Expected payment is {self.currency} {_format_amount(expected)}. "
                    f"{mismatch_reason(snapshot, self.currency)} "
                    "Partial or extra payments are not allowed.",
                    expected=expected,
                )

            payment = Payment(resident_id=resident_id, amount=expected, payment_date=today)
            session.add(payment)
            session.flush()

            updated = load_snapshot(session, resident_id, today)
            logger.info(
                f"Recorded payment {payment.id}: resident={resident_id}, amount={expected}, "
                f"next due {updated.due_date}"
            )
            return PaymentReceipt(payment_id=payment.id, snapshot=updated)

    def list_payments(self, resident_id: Optional[int] = None) -> List[Payment]:
        """List payments, newest first, optionally for one resident."""
        stmt = select(Payment).order_by(Payment.payment_date.desc(), Payment.id.desc())
        if resident_id is not None:
            stmt = stmt.where(Payment.resident_id == resident_id)
        with unit_of_work(self.session_factory) as session:
            return list(session.scalars(stmt).all())


__all__ = ["PaymentReceipt", "PaymentService", "mismatch_reason"]
