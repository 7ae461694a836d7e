"""Assignment API routes (assign, transfer, list)."""

from fastapi import APIRouter, Depends, status

from hostel.api.deps import get_assignment_service
from hostel.api.schemas import (
    AssignmentListItem,
    AssignmentResponse,
    AssignPayload,
    TransferPayload,
    TransferResponse,
)
from hostel.services import AssignmentService

router = APIRouter(prefix="/assignments", tags=["assignments"])


@router.post("", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
def assign_resident(
    payload: AssignPayload,
    service: AssignmentService = Depends(get_assignment_service),
) -> AssignmentResponse:
    """
    Assign a resident to a room.

    Returns:
        201: Assignment created
        400: Room is full
        404: Resident or room not found
        409: Resident already assigned
    """
    assignment = service.assign(payload.resident_id, payload.room_id)
    return AssignmentResponse(
        assignment_id=assignment.id,
        resident_id=assignment.resident_id,
        room_id=assignment.room_id,
        since=assignment.since,
    )


@router.post("/transfer", response_model=TransferResponse)
def transfer_resident(
    payload: TransferPayload,
    service: AssignmentService = Depends(get_assignment_service),
) -> TransferResponse:
    """
    Move a resident to another room.

    Returns:
        200: from_room_id / to_room_id
        400: Not assigned, same room, or target room full
        404: Resident or room not found
    """
    result = service.transfer(payload.resident_id, payload.new_room_id)
    return TransferResponse(from_room_id=result.from_room_id, to_room_id=result.to_room_id)


@router.get("", response_model=list[AssignmentListItem])
def list_assignments(
    search: str = "",
    service: AssignmentService = Depends(get_assignment_service),
) -> list[AssignmentListItem]:
    """List current assignments, newest first."""
    return [
        AssignmentListItem(
            assignment_id=assignment.id,
            resident_id=resident.id,
            resident_name=resident.name,
            room_id=room.id,
            room_number=room.room_number,
            room_type=room.room_type,
            monthly_fee=room.monthly_fee,
            since=assignment.since,
        )
        for assignment, resident, room in service.list_assignments(search=search)
    ]
