"""ORM models for residents, rooms, assignments, payments and complaints."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, MetaData
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

# Deterministic constraint names, so CHECK/UNIQUE violations are recognizable in logs
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

Base = declarative_base(metadata=MetaData(naming_convention=NAMING_CONVENTION))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel:
    """Surrogate key plus audit timestamps shared by every table."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )


# Model modules import Base from here, so they are loaded last
from hostel.models.assignment import Assignment  # noqa: E402
from hostel.models.complaint import Complaint, ComplaintStatus  # noqa: E402
from hostel.models.payment import Payment  # noqa: E402
from hostel.models.resident import Resident  # noqa: E402
from hostel.models.room import Room  # noqa: E402

__all__ = [
    "Base",
    "BaseModel",
    "Assignment",
    "Complaint",
    "ComplaintStatus",
    "Payment",
    "Resident",
    "Room",
]
