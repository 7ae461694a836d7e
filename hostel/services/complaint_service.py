"""Complaints filed by residents: submit, list, update status/text, delete.

New complaints start as Pending. Complaints of a removed resident are deleted
by AssignmentService.release, not here.
"""

import logging
from typing import Any, List

from sqlalchemy import String, cast, or_, select
from sqlalchemy.orm import sessionmaker

from hostel.models import Complaint, ComplaintStatus, Resident
from hostel.services.db import unit_of_work
from hostel.services.errors import NotFoundError, ValidationError
from hostel.services.validators import validate_complaint_text

logger = logging.getLogger(__name__)


def parse_status(value: Any) -> ComplaintStatus:
    """Map "Pending"/"Resolved" to ComplaintStatus or raise ValidationError."""
    try:
        return ComplaintStatus(value)
    except ValueError:
        raise ValidationError("Status must be Pending or Resolved") from None


class ComplaintService:
    """Service for resident complaints."""

    def __init__(self, session_factory: sessionmaker):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def submit_complaint(self, resident_id: int | None, complaint_text: Any) -> Complaint:
        """
        File a Pending complaint for a resident.

        Raises:
            ValidationError: Missing resident/text, or text outside 3..500 characters
            NotFoundError: Resident missing
        """
        if not resident_id or complaint_text is None:
            raise ValidationError("Resident and complaint are required")
        text = validate_complaint_text(complaint_text)

        with unit_of_work(self.session_factory) as session:
            if session.get(Resident, resident_id) is None:
                raise NotFoundError("Resident does not exist")
            complaint = Complaint(
                resident_id=resident_id,
                complaint_text=text,
                status=ComplaintStatus.PENDING,
            )
            session.add(complaint)
            session.flush()
            logger.info(f"Complaint {complaint.id} submitted by resident {resident_id}")
            return complaint

    def list_complaints(self, search: str = "") -> List[tuple[Complaint, str]]:
        """
        List complaints with the resident name, Pending first, newest first.

        Args:
            search: Substring matched against resident name, text and status
        """
        stmt = (
            select(Complaint, Resident.name)
            .join(Resident, Resident.id == Complaint.resident_id)
            .order_by(cast(Complaint.status, String).asc(), Complaint.id.desc())
        )
        if search:
            like = f"%{search}%"
            stmt = stmt.where(
                or_(
                    Resident.name.ilike(like),
                    Complaint.complaint_text.ilike(like),
                    cast(Complaint.status, String).ilike(like),
                )
            )
        with unit_of_work(self.session_factory) as session:
            return [tuple(row) for row in session.execute(stmt).all()]

    def update_complaint(
        self,
        complaint_id: int,
        status: Any = None,
        complaint_text: Any = None,
    ) -> Complaint:
        """
        Change a complaint's status and/or text.

        Raises:
            ValidationError: Nothing to update, unknown status, or bad text
            NotFoundError: Complaint missing
        """
        if status is None and complaint_text is None:
            raise ValidationError("Nothing to update")
        new_status = parse_status(status) if status is not None else None
        new_text = validate_complaint_text(complaint_text) if complaint_text is not None else None

        with unit_of_work(self.session_factory) as session:
            complaint = session.get(Complaint, complaint_id)
            if complaint is None:
                raise NotFoundError("Complaint not found")
            if new_status is not None:
                complaint.status = new_status
            if new_text is not None:
                complaint.complaint_text = new_text
            session.flush()
            logger.info(f"Updated complaint {complaint_id} (status={complaint.status.value})")
            return complaint

    def delete_complaint(self, complaint_id: int) -> None:
        """Delete a complaint or raise NotFoundError."""
        with unit_of_work(self.session_factory) as session:
            complaint = session.get(Complaint, complaint_id)
            if complaint is None:
                raise NotFoundError("Complaint not found")
            session.delete(complaint)
        logger.info(f"Deleted complaint {complaint_id}")


__all__ = ["ComplaintService", "parse_status"]
