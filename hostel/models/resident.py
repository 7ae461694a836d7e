"""Resident ORM model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hostel.models import Base, BaseModel


class Resident(Base, BaseModel):
    """A person living (or registered to live) in the hostel.

    Demographic fields only. Room binding lives in Assignment, billing history
    in Payment.
    """

    __tablename__ = "residents"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    cnic: Mapped[str] = mapped_column(
        String(15),
        nullable=False,
        unique=True,
        comment="National identity number (12345-1234567-1)",
    )
    department: Mapped[str] = mapped_column(String(100), nullable=False)
    # Phone is not unique: siblings or guardians may share a contact number
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    address: Mapped[str | None] = mapped_column(String(100), nullable=True)

    assignment: Mapped["Assignment | None"] = relationship(  # noqa: F821
        "Assignment",
        back_populates="resident",
        uselist=False,
    )

    def __repr__(self) -> str:
        return f"<Resident(id={self.id}, name={self.name!r}, cnic={self.cnic!r})>"


__all__ = ["Resident"]
