"""Complaint ORM model (free-text complaints filed by residents)."""

from enum import Enum as PyEnum

from sqlalchemy import Enum, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column

from hostel.models import Base, BaseModel


class ComplaintStatus(PyEnum):
    """Enumeration for complaint status."""

    PENDING = "Pending"
    RESOLVED = "Resolved"


class Complaint(Base, BaseModel):
    """A complaint raised by a resident.

    Written by ComplaintService. Removing a resident deletes its complaints
    in the same transaction.
    """

    __tablename__ = "complaints"

    resident_id: Mapped[int] = mapped_column(
        ForeignKey("residents.id"),
        nullable=False,
        index=True,
    )
    complaint_text: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[ComplaintStatus] = mapped_column(
        Enum(
            ComplaintStatus,
            native_enum=False,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        default=ComplaintStatus.PENDING,
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Complaint(id={self.id}, resident_id={self.resident_id}, status={self.status})>"


__all__ = ["Complaint", "ComplaintStatus"]
