"""Room ORM model with capacity and occupancy counters."""

from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hostel.models import Base, BaseModel


class Room(Base, BaseModel):
    """Model representing a bookable room.

    The occupancy counter is written only by OccupancyLedger. It must always
    equal the number of assignments pointing at the room and stay within
    0..capacity; the CHECK constraints back that up at the storage level.
    """

    __tablename__ = "rooms"

    room_number: Mapped[str] = mapped_column(
        String(12),
        nullable=False,
        unique=True,
        comment="Human-facing room identifier",
    )
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    occupancy: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        comment="Beds currently filled",
    )
    monthly_fee: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        comment="Fee charged per 30-day cycle",
    )
    room_type: Mapped[str] = mapped_column(String(50), default="Standard", nullable=False)
    floor_level: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    wifi_available: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    assignments: Mapped[list["Assignment"]] = relationship(  # noqa: F821
        "Assignment",
        back_populates="room",
    )

    __table_args__ = (
        CheckConstraint("occupancy >= 0", name="ck_rooms_occupancy_non_negative"),
        CheckConstraint("occupancy <= capacity", name="ck_rooms_occupancy_within_capacity"),
    )

    @property
    def free_beds(self) -> int:
        return self.capacity - self.occupancy

    def __repr__(self) -> str:
        return (
            f"<Room(id={self.id}, room_number={self.room_number!r}, "
            f"occupancy={self.occupancy}/{self.capacity}, monthly_fee={self.monthly_fee})>"
        )


__all__ = ["Room"]
