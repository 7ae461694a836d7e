"""Payment ORM model: the append-only billing history."""

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from hostel.models import Base, BaseModel


class Payment(Base, BaseModel):
    """Model representing a fee payment.

    Rows are inserted by PaymentService.record_payment and never updated.
    Billing state is derived from the latest payment_date per resident.
    """

    __tablename__ = "payments"

    resident_id: Mapped[int] = mapped_column(
        ForeignKey("residents.id"),
        nullable=False,
        index=True,
        comment="Resident who made the payment",
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        comment="Amount paid (monthly fee plus any fine)",
    )
    payment_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        index=True,
        comment="UTC calendar date of payment",
    )

    __table_args__ = (Index("idx_resident_payment_date", "resident_id", "payment_date"),)

    def __repr__(self) -> str:
        return (
            f"<Payment(id={self.id}, resident_id={self.resident_id}, "
            f"amount={self.amount}, payment_date={self.payment_date})>"
        )


__all__ = ["Payment"]
