"""Resident registry (create, update, search).

Removing a resident is not here: it changes occupancy and must go through
AssignmentService.release.
"""

import logging
from typing import List

from sqlalchemy import or_, select
from sqlalchemy.orm import Session, sessionmaker

from hostel.models import Resident
from hostel.services.db import unit_of_work
from hostel.services.errors import ConflictError, NotFoundError
from hostel.services.validators import validate_resident_payload

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "name": Resident.name,
    "department": Resident.department,
    "cnic": Resident.cnic,
    "id": Resident.id,
    "phone": Resident.phone,
}


class ResidentService:
    """Service for resident records."""

    def __init__(self, session_factory: sessionmaker):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    @staticmethod
    def _ensure_unique_cnic(session: Session, cnic: str, exclude_id: int | None = None) -> None:
        stmt = select(Resident.id).where(Resident.cnic == cnic)
        if exclude_id is not None:
            stmt = stmt.where(Resident.id != exclude_id)
        if session.scalar(stmt) is not None:
            raise ConflictError("CNIC already exists")

    def create_resident(self, payload: dict) -> Resident:
        """
        Register a resident.

        Args:
            payload: name, cnic, department, phone, address

        Returns:
            Created Resident

        Raises:
            ValidationError: Invalid fields
            ConflictError: CNIC already registered
        """
        clean = validate_resident_payload(payload)
        with unit_of_work(self.session_factory) as session:
            self._ensure_unique_cnic(session, clean["cnic"])
            resident = Resident(**clean)
            session.add(resident)
            session.flush()
            logger.info(f"Created resident {resident.name} (ID={resident.id})")
            return resident

    def update_resident(self, resident_id: int, payload: dict) -> Resident:
        """Replace a resident's demographic fields (all fields required)."""
        clean = validate_resident_payload(payload)
        with unit_of_work(self.session_factory) as session:
            resident = session.get(Resident, resident_id)
            if resident is None:
                raise NotFoundError("Resident not found")
            self._ensure_unique_cnic(session, clean["cnic"], exclude_id=resident_id)
            for field, value in clean.items():
                setattr(resident, field, value)
            session.flush()
            logger.info(f"Updated resident {resident_id}")
            return resident

    def get_resident(self, resident_id: int) -> Resident:
        """Get a resident by ID or raise NotFoundError."""
        with unit_of_work(self.session_factory) as session:
            resident = session.get(Resident, resident_id)
            if resident is None:
                raise NotFoundError("Resident not found")
            return resident

    def list_residents(self, search: str = "", sort_by: str = "name", order: str = "asc") -> List[Resident]:
        """
        List residents with optional substring search and sorting.

        Args:
            search: Matched against name, cnic, department, phone and address
            sort_by: One of SORTABLE_FIELDS (unknown values fall back to name)
            order: "asc" or "desc"
        """
        column = SORTABLE_FIELDS.get(sort_by, Resident.name)
        stmt = select(Resident).order_by(column.desc() if order.lower() == "desc" else column.asc())
        if search:
            like = f"%{search}%"
            stmt = stmt.where(
                or_(
                    Resident.name.ilike(like),
                    Resident.cnic.ilike(like),
                    Resident.department.ilike(like),
                    Resident.phone.ilike(like),
                    Resident.address.ilike(like),
                )
            )
        with unit_of_work(self.session_factory) as session:
            return list(session.scalars(stmt).all())


__all__ = ["ResidentService"]
