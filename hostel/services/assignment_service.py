"""Assignment manager: binds residents to rooms.

Per-resident state machine:

    Unassigned --assign--> Assigned
    Assigned --transfer--> Assigned (different room)
    Assigned --release--> Unassigned (resident removed)

Each operation is a single unit of work. The rooms and the resident involved
are locked first, then the ledger and the assignment row are mutated; any
error rolls the whole unit back, so callers never see a half-applied change.
"""

import logging
from datetime import date
from typing import Callable, List, NamedTuple

from sqlalchemy import cast, delete, or_, select, String
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from hostel.models import Assignment, Complaint, Payment, Resident, Room
from hostel.services.billing_service import today_utc
from hostel.services.db import unit_of_work
from hostel.services.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
)
from hostel.services.occupancy_ledger import OccupancyLedger

logger = logging.getLogger(__name__)


class TransferResult(NamedTuple):
    """Rooms involved in a completed transfer."""

    from_room_id: int
    to_room_id: int


class ReleaseResult(NamedTuple):
    """What a resident removal cleaned up."""

    resident_id: int
    released_room_id: int | None
    payments_deleted: int
    complaints_deleted: int


class AssignmentService:
    """Creates, transfers and releases resident-to-room assignments."""

    def __init__(self, session_factory: sessionmaker, clock: Callable[[], date] = today_utc):
        """Initialize assignment service.

        Args:
            session_factory: Factory for sessions bound to the store
            clock: Returns the date stamped on new and transferred assignments
        """
        self.session_factory = session_factory
        self.clock = clock

    @staticmethod
    def _lock_resident(session: Session, resident_id: int) -> Resident:
        resident = session.scalar(
            select(Resident).where(Resident.id == resident_id).with_for_update()
        )
        if resident is None:
            raise NotFoundError("Resident does not exist")
        return resident

    @staticmethod
    def _active_assignment(session: Session, resident_id: int) -> Assignment | None:
        return session.scalar(select(Assignment).where(Assignment.resident_id == resident_id))

    def assign(self, resident_id: int, room_id: int) -> Assignment:
        """
        Assign an unassigned resident to a room with a free bed.

        Returns:
            The new Assignment

        Raises:
            NotFoundError: Resident or room missing
            ConflictError: Resident already has an assignment
            CapacityError: Room is full
        """
        with unit_of_work(self.session_factory) as session:
            self._lock_resident(session, resident_id)
            if self._active_assignment(session, resident_id) is not None:
                logger.warning(f"Assign rejected: resident {resident_id} is already assigned")
                raise ConflictError("Resident is already allocated to a room")

            ledger = OccupancyLedger(session)
            ledger.lock_rooms(room_id)
            ledger.reserve_bed(room_id)

            assignment = Assignment(resident_id=resident_id, room_id=room_id, since=self.clock())
            session.add(assignment)
            try:
                session.flush()
            except IntegrityError as e:
                # Unique resident_id: a concurrent assign won the race
                raise ConflictError("Resident is already allocated to a room") from e

            logger.info(f"Assigned resident {resident_id} to room {room_id} (assignment_id={assignment.id})")
            return assignment

    def transfer(self, resident_id: int, new_room_id: int) -> TransferResult:
        """
        Move an assigned resident to a different room.

        Releases the old bed, reserves the new one and repoints the assignment
        (since reset to today) as one all-or-nothing unit.

        Raises:
            NotFoundError: Resident or target room missing
            InvalidStateError: No active assignment, or target is the current room
            CapacityError: Target room is full
        """
        with unit_of_work(self.session_factory) as session:
            self._lock_resident(session, resident_id)
            assignment = self._active_assignment(session, resident_id)
            if assignment is None:
                raise InvalidStateError("Resident is not allocated to any room")

            old_room_id = assignment.room_id
            ledger = OccupancyLedger(session)
            locked = ledger.lock_rooms(old_room_id, new_room_id)
            if new_room_id not in locked:
                raise NotFoundError(f"Room ID {new_room_id} does not exist")
            if old_room_id == new_room_id:
                logger.warning(f"Transfer rejected: resident {resident_id} is already in room {new_room_id}")
                raise InvalidStateError("Resident is already in this room")

            ledger.release_bed(old_room_id)
            ledger.reserve_bed(new_room_id)

            assignment.room_id = new_room_id
            assignment.since = self.clock()
            session.flush()

            logger.info(f"Transferred resident {resident_id} from room {old_room_id} to room {new_room_id}")
            return TransferResult(from_room_id=old_room_id, to_room_id=new_room_id)

    def release(self, resident_id: int) -> ReleaseResult:
        """
        Remove a resident together with everything that references it.

        Frees the bed of the active assignment (the one-assignment invariant
        means there is at most one), deletes the assignment, the resident's
        payment history and complaints, then the resident record. One unit of
        work covers all of it.

        Raises:
            NotFoundError: Resident missing
        """
        with unit_of_work(self.session_factory) as session:
            resident = self._lock_resident(session, resident_id)
            assignment = self._active_assignment(session, resident_id)

            released_room_id = None
            if assignment is not None:
                released_room_id = assignment.room_id
                ledger = OccupancyLedger(session)
                ledger.lock_rooms(released_room_id)
                ledger.release_bed(released_room_id)
                session.delete(assignment)
                session.flush()

            payments = session.execute(delete(Payment).where(Payment.resident_id == resident_id))
            complaints = session.execute(delete(Complaint).where(Complaint.resident_id == resident_id))
            session.delete(resident)
            session.flush()

            result = ReleaseResult(
                resident_id=resident_id,
                released_room_id=released_room_id,
                payments_deleted=payments.rowcount,
                complaints_deleted=complaints.rowcount,
            )
            logger.info(
                f"Removed resident {resident_id}: room={released_room_id}, "
                f"payments={result.payments_deleted}, complaints={result.complaints_deleted}"
            )
            return result

    def get_assignment(self, resident_id: int) -> Assignment | None:
        """Return the active assignment of a resident, or None."""
        with unit_of_work(self.session_factory) as session:
            return self._active_assignment(session, resident_id)

    def list_assignments(self, search: str = "") -> List[tuple[Assignment, Resident, Room]]:
        """
        List assignments joined with resident and room, newest first.

        Args:
            search: Substring matched against resident name, room number and date
        """
        stmt = (
            select(Assignment, Resident, Room)
            .join(Resident, Resident.id == Assignment.resident_id)
            .join(Room, Room.id == Assignment.room_id)
            .order_by(Assignment.since.desc(), Assignment.id.desc())
        )
        if search:
            like = f"%{search}%"
            stmt = stmt.where(
                or_(
                    Resident.name.ilike(like),
                    Room.room_number.ilike(like),
                    cast(Assignment.since, String).ilike(like),
                )
            )
        with unit_of_work(self.session_factory) as session:
            return [tuple(row) for row in session.execute(stmt).all()]


__all__ = ["AssignmentService", "TransferResult", "ReleaseResult"]
