"""Resident API routes, including billing status and removal."""

from fastapi import APIRouter, Depends, status

from hostel.api.deps import (
    get_assignment_service,
    get_billing_service,
    get_resident_service,
)
from hostel.api.schemas import (
    BillingSnapshotResponse,
    ResidentPayload,
    ResidentRemovedResponse,
    ResidentResponse,
)
from hostel.services import AssignmentService, BillingService, BillingSnapshot, ResidentService

router = APIRouter(prefix="/residents", tags=["residents"])


def snapshot_response(snapshot: BillingSnapshot) -> BillingSnapshotResponse:
    """Convert a BillingSnapshot into its response schema."""
    data = snapshot.to_dict()
    data["status"] = snapshot.status.value
    return BillingSnapshotResponse(**data)


@router.post("", response_model=ResidentResponse, status_code=status.HTTP_201_CREATED)
def create_resident(
    payload: ResidentPayload,
    service: ResidentService = Depends(get_resident_service),
) -> ResidentResponse:
    """
    Register a resident.

    Returns:
        201: Created resident
        400: Validation error (all problems joined by "; ")
        409: CNIC already exists
    """
    resident = service.create_resident(payload.model_dump())
    return ResidentResponse.model_validate(resident)


@router.get("", response_model=list[ResidentResponse])
def list_residents(
    search: str = "",
    sort_by: str = "name",
    order: str = "asc",
    service: ResidentService = Depends(get_resident_service),
) -> list[ResidentResponse]:
    """List residents with optional search and sorting."""
    residents = service.list_residents(search=search, sort_by=sort_by, order=order)
    return [ResidentResponse.model_validate(r) for r in residents]


@router.get("/{resident_id}", response_model=ResidentResponse)
def get_resident(
    resident_id: int,
    service: ResidentService = Depends(get_resident_service),
) -> ResidentResponse:
    """Get a single resident."""
    return ResidentResponse.model_validate(service.get_resident(resident_id))


@router.put("/{resident_id}", response_model=ResidentResponse)
def update_resident(
    resident_id: int,
    payload: ResidentPayload,
    service: ResidentService = Depends(get_resident_service),
) -> ResidentResponse:
    """Replace a resident's details."""
    resident = service.update_resident(resident_id, payload.model_dump())
    return ResidentResponse.model_validate(resident)


@router.delete("/{resident_id}", response_model=ResidentRemovedResponse)
def delete_resident(
    resident_id: int,
    service: AssignmentService = Depends(get_assignment_service),
) -> ResidentRemovedResponse:
    """Remove a resident, freeing its bed and deleting its payments and complaints."""
    result = service.release(resident_id)
    return ResidentRemovedResponse(
        released_room_id=result.released_room_id,
        payments_deleted=result.payments_deleted,
        complaints_deleted=result.complaints_deleted,
    )


@router.get("/{resident_id}/billing", response_model=BillingSnapshotResponse)
def get_billing_status(
    resident_id: int,
    service: BillingService = Depends(get_billing_service),
) -> BillingSnapshotResponse:
    """
    Current billing snapshot.

    Returns:
        200: Snapshot (monthly_fee, room_type, assigned_since, last_payment_date,
             due_date, days_late, fine, total_payable, status, today)
        400: Resident not assigned to a room
        404: Resident not found
    """
    return snapshot_response(service.get_billing_status(resident_id))
