"""Occupancy ledger: the only writer of room occupancy counters.

Invariant kept here: 0 <= occupancy <= capacity for every room, at all times.
All methods run inside a caller-owned unit of work; nothing is committed here.
"""

import logging

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from hostel.models import Room
from hostel.services.errors import (
    CapacityError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class OccupancyLedger:
    """Capacity/occupancy bookkeeping for rooms."""

    def __init__(self, session: Session):
        """Initialize ledger.

        Args:
            session: Session of the enclosing unit of work
        """
        self.session = session

    def get_room(self, room_id: int) -> Room:
        """Load a room or raise NotFoundError."""
        room = self.session.get(Room, room_id, populate_existing=True)
        if room is None:
            raise NotFoundError(f"Room ID {room_id} does not exist")
        return room

    def lock_rooms(self, *room_ids: int) -> dict[int, Room]:
        """Take row locks on the given rooms for the rest of the transaction.

        Locks are acquired in ascending id order so two transfers crossing the
        same pair of rooms cannot deadlock. Missing ids are simply absent from
        the result.

        Returns:
            Dict mapping room_id to the locked Room
        """
        ids = sorted(set(room_ids))
        stmt = (
            select(Room)
            .where(Room.id.in_(ids))
            .order_by(Room.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return {room.id: room for room in self.session.scalars(stmt)}

    def reserve_bed(self, room_id: int) -> Room:
        """Fill one bed.

        The increment is a single guarded UPDATE, so two concurrent callers
        racing for the last bed cannot both get a row back.

        Raises:
            NotFoundError: Room does not exist
            CapacityError: Room is full
        """
        result = self.session.execute(
            update(Room)
            .where(Room.id == room_id, Room.occupancy < Room.capacity)
            .values(occupancy=Room.occupancy + 1)
            .execution_options(synchronize_session=False)
        )
        room = self.get_room(room_id)
        if result.rowcount == 0:
            logger.warning(f"Reservation rejected, room {room_id} is full ({room.occupancy}/{room.capacity})")
            raise CapacityError(f"Room {room.room_number} is full")

        logger.debug(f"Reserved bed in room {room_id}: {room.occupancy}/{room.capacity}")
        return room

    def release_bed(self, room_id: int) -> Room:
        """Free one bed. Occupancy never drops below zero.

        Raises:
            NotFoundError: Room does not exist
        """
        result = self.session.execute(
            update(Room)
            .where(Room.id == room_id, Room.occupancy > 0)
            .values(occupancy=Room.occupancy - 1)
            .execution_options(synchronize_session=False)
        )
        room = self.get_room(room_id)
        if result.rowcount == 0:
            logger.warning(f"Release on empty room {room_id} ignored, occupancy already 0")
        else:
            logger.debug(f"Released bed in room {room_id}: {room.occupancy}/{room.capacity}")
        return room

    def resize_capacity(self, room_id: int, new_capacity: int) -> Room:
        """Change a room's capacity.

        Raises:
            NotFoundError: Room does not exist
            ValidationError: new_capacity is not positive
            InvalidStateError: new_capacity is below current occupancy
        """
        if new_capacity < 1:
            raise ValidationError("Capacity must be a positive number of beds")

        room = self.lock_rooms(room_id).get(room_id)
        if room is None:
            raise NotFoundError(f"Room ID {room_id} does not exist")
        if new_capacity < room.occupancy:
            raise InvalidStateError(
                f"Capacity cannot be less than current occupancy ({room.occupancy})"
            )

        room.capacity = new_capacity
        self.session.flush()
        return room

    def delete_room(self, room_id: int) -> None:
        """Delete an empty room.

        Raises:
            NotFoundError: Room does not exist
            ConflictError: Room still has residents assigned
        """
        room = self.lock_rooms(room_id).get(room_id)
        if room is None:
            raise NotFoundError(f"Room ID {room_id} does not exist")
        if room.occupancy > 0:
            raise ConflictError("Cannot delete a room with allocated residents")

        self.session.delete(room)
        self.session.flush()


__all__ = ["OccupancyLedger"]
