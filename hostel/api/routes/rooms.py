"""Room API routes."""

from fastapi import APIRouter, Depends, status

from hostel.api.deps import get_room_service
from hostel.api.schemas import (
    MessageResponse,
    RoomDetailResponse,
    RoomPayload,
    RoomResidentItem,
    RoomResponse,
)
from hostel.services import RoomService

router = APIRouter(prefix="/rooms", tags=["rooms"])


@router.post("", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(
    payload: RoomPayload,
    service: RoomService = Depends(get_room_service),
) -> RoomResponse:
    """
    Create a room.

    Returns:
        201: Created room (occupancy 0)
        400: Validation error
        409: Room number already exists
    """
    room = service.create_room(payload.model_dump(exclude_none=True))
    return RoomResponse.model_validate(room)


@router.get("", response_model=list[RoomResponse])
def list_rooms(service: RoomService = Depends(get_room_service)) -> list[RoomResponse]:
    """List all rooms."""
    return [RoomResponse.model_validate(room) for room in service.list_rooms()]


@router.get("/{room_id}", response_model=RoomDetailResponse)
def get_room(room_id: int, service: RoomService = Depends(get_room_service)) -> RoomDetailResponse:
    """Get a room with its current residents."""
    room, residents = service.get_room(room_id)
    detail = RoomDetailResponse.model_validate(room)
    detail.residents = [RoomResidentItem.model_validate(r) for r in residents]
    return detail


@router.put("/{room_id}", response_model=RoomResponse)
def update_room(
    room_id: int,
    payload: RoomPayload,
    service: RoomService = Depends(get_room_service),
) -> RoomResponse:
    """
    Partially update a room.

    Returns:
        200: Updated room
        400: Validation error, or capacity below current occupancy
        404: Room not found
        409: Room number already exists
    """
    room = service.update_room(room_id, payload.model_dump(exclude_none=True))
    return RoomResponse.model_validate(room)


@router.delete("/{room_id}", response_model=MessageResponse)
def delete_room(room_id: int, service: RoomService = Depends(get_room_service)) -> MessageResponse:
    """Delete an empty room (409 while residents are assigned)."""
    service.delete_room(room_id)
    return MessageResponse(message="Room deleted successfully")
