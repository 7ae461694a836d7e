"""Complaint API routes."""

from fastapi import APIRouter, Depends, status

from hostel.api.deps import get_complaint_service
from hostel.api.schemas import (
    ComplaintPayload,
    ComplaintResponse,
    ComplaintUpdatePayload,
    MessageResponse,
)
from hostel.models import Complaint
from hostel.services import ComplaintService

router = APIRouter(prefix="/complaints", tags=["complaints"])


def complaint_response(complaint: Complaint, resident_name: str | None = None) -> ComplaintResponse:
    return ComplaintResponse(
        id=complaint.id,
        resident_id=complaint.resident_id,
        resident_name=resident_name,
        complaint_text=complaint.complaint_text,
        status=complaint.status.value,
    )


@router.post("", response_model=ComplaintResponse, status_code=status.HTTP_201_CREATED)
def submit_complaint(
    payload: ComplaintPayload,
    service: ComplaintService = Depends(get_complaint_service),
) -> ComplaintResponse:
    """
    File a complaint (status Pending).

    Returns:
        201: Created complaint
        400: Missing fields or text outside 3..500 characters
        404: Resident not found
    """
    complaint = service.submit_complaint(payload.resident_id, payload.complaint_text)
    return complaint_response(complaint)


@router.get("", response_model=list[ComplaintResponse])
def list_complaints(
    search: str = "",
    service: ComplaintService = Depends(get_complaint_service),
) -> list[ComplaintResponse]:
    """List complaints, Pending first."""
    return [complaint_response(c, name) for c, name in service.list_complaints(search=search)]


@router.put("/{complaint_id}", response_model=ComplaintResponse)
def update_complaint(
    complaint_id: int,
    payload: ComplaintUpdatePayload,
    service: ComplaintService = Depends(get_complaint_service),
) -> ComplaintResponse:
    """Change status (Pending/Resolved) and/or text."""
    complaint = service.update_complaint(
        complaint_id,
        status=payload.status,
        complaint_text=payload.complaint_text,
    )
    return complaint_response(complaint)


@router.delete("/{complaint_id}", response_model=MessageResponse)
def delete_complaint(
    complaint_id: int,
    service: ComplaintService = Depends(get_complaint_service),
) -> MessageResponse:
    """Delete a complaint."""
    service.delete_complaint(complaint_id)
    return MessageResponse(message="Complaint deleted")
