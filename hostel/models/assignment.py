"""Assignment ORM model binding one resident to one room."""

from datetime import date

from sqlalchemy import Date, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hostel.models import Base, BaseModel


class Assignment(Base, BaseModel):
    """The active room binding of a resident.

    resident_id is unique: a resident has at most one row here. A transfer
    rewrites room_id and since in place instead of inserting a second row.
    """

    __tablename__ = "assignments"

    resident_id: Mapped[int] = mapped_column(
        ForeignKey("residents.id"),
        nullable=False,
        unique=True,
    )
    room_id: Mapped[int] = mapped_column(
        ForeignKey("rooms.id"),
        nullable=False,
        index=True,
    )
    since: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment="Assignment (or latest transfer) date",
    )

    resident: Mapped["Resident"] = relationship(  # noqa: F821
        "Resident",
        back_populates="assignment",
    )
    room: Mapped["Room"] = relationship(  # noqa: F821
        "Room",
        back_populates="assignments",
    )

    __table_args__ = (Index("idx_assignment_room_since", "room_id", "since"),)

    def __repr__(self) -> str:
        return (
            f"<Assignment(id={self.id}, resident_id={self.resident_id}, "
            f"room_id={self.room_id}, since={self.since})>"
        )


__all__ = ["Assignment"]
