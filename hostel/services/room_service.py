"""Room catalogue: creating, editing, listing and removing rooms.

Capacity changes and deletions go through OccupancyLedger so the
occupancy invariant is checked under the room's lock.
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from hostel.models import Assignment, Resident, Room
from hostel.services.db import unit_of_work
from hostel.services.errors import ConflictError, NotFoundError, ValidationError
from hostel.services.occupancy_ledger import OccupancyLedger
from hostel.services.validators import validate_room_payload

logger = logging.getLogger(__name__)


class RoomService:
    """Room CRUD on top of the occupancy ledger."""

    def __init__(
        self,
        session_factory: sessionmaker,
        max_capacity: int | None = None,
        max_monthly_fee: int | None = None,
    ):
        """Initialize room service.

        Args:
            session_factory: Factory for sessions bound to the store
            max_capacity: Override for settings.max_room_capacity
            max_monthly_fee: Override for settings.max_monthly_fee
        """
        self.session_factory = session_factory
        self.max_capacity = max_capacity
        self.max_monthly_fee = max_monthly_fee

    def _validate(self, payload: dict, require_all: bool) -> dict:
        return validate_room_payload(
            payload,
            require_all=require_all,
            max_capacity=self.max_capacity,
            max_monthly_fee=self.max_monthly_fee,
        )

    @staticmethod
    def _ensure_unique_number(session: Session, room_number: str, exclude_id: int | None = None) -> None:
        stmt = select(Room.id).where(Room.room_number == room_number)
        if exclude_id is not None:
            stmt = stmt.where(Room.id != exclude_id)
        if session.scalar(stmt) is not None:
            raise ConflictError("Room number already exists")

    def create_room(self, payload: dict) -> Room:
        """Create an empty room.

        Raises:
            ValidationError: Missing or out-of-range fields
            ConflictError: Room number already used
        """
        clean = self._validate(payload, require_all=True)
        with unit_of_work(self.session_factory) as session:
            self._ensure_unique_number(session, clean["room_number"])
            room = Room(occupancy=0, **clean)
            session.add(room)
            session.flush()
            logger.info(
                f"Created room {room.room_number} (ID={room.id}, capacity={room.capacity}, "
                f"monthly_fee={room.monthly_fee})"
            )
            return room

    def update_room(self, room_id: int, payload: dict) -> Room:
        """Apply a partial update.

        Raises:
            ValidationError: Bad values or nothing to update
            NotFoundError: Room missing
            ConflictError: New room number already used
            InvalidStateError: Capacity below current occupancy
        """
        clean = self._validate(payload, require_all=False)
        if not clean:
            raise ValidationError("No updates provided")

        with unit_of_work(self.session_factory) as session:
            ledger = OccupancyLedger(session)
            capacity = clean.pop("capacity", None)
            if capacity is not None:
                room = ledger.resize_capacity(room_id, capacity)
            else:
                room = ledger.lock_rooms(room_id).get(room_id)
                if room is None:
                    raise NotFoundError(f"Room ID {room_id} does not exist")

            if "room_number" in clean:
                self._ensure_unique_number(session, clean["room_number"], exclude_id=room_id)
            for field, value in clean.items():
                setattr(room, field, value)
            session.flush()
            logger.info(f"Updated room {room_id}")
            return room

    def delete_room(self, room_id: int) -> None:
        """Delete an empty room (see OccupancyLedger.delete_room)."""
        with unit_of_work(self.session_factory) as session:
            OccupancyLedger(session).delete_room(room_id)
        logger.info(f"Deleted room {room_id}")

    def get_room(self, room_id: int) -> tuple[Room, List[Resident]]:
        """Get a room and the residents currently assigned to it."""
        with unit_of_work(self.session_factory) as session:
            room = OccupancyLedger(session).get_room(room_id)
            residents = session.scalars(
                select(Resident)
                .join(Assignment, Assignment.resident_id == Resident.id)
                .where(Assignment.room_id == room_id)
                .order_by(Resident.name)
            ).all()
            return room, list(residents)

    def list_rooms(self) -> List[Room]:
        """List all rooms ordered by room number."""
        with unit_of_work(self.session_factory) as session:
            return list(session.scalars(select(Room).order_by(Room.room_number)).all())


__all__ = ["RoomService"]
