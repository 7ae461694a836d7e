"""Pydantic schemas for the HTTP API.

Resident and room payload fields are loosely typed on purpose: the service
validators own the rules and report every problem in one 400 response.
"""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


class ResidentPayload(BaseModel):
    """Request payload for POST/PUT /residents."""

    name: str | None = None
    cnic: str | None = None
    department: str | None = None
    phone: str | None = None
    address: str | None = None


class ResidentResponse(BaseModel):
    """Resident record."""

    id: int
    name: str
    cnic: str
    department: str
    phone: str
    address: str | None = None

    model_config = ConfigDict(from_attributes=True)


class RoomPayload(BaseModel):
    """Request payload for POST/PUT /rooms."""

    room_number: Any = None
    capacity: Any = None
    monthly_fee: Any = None
    room_type: str | None = None
    floor_level: Any = None
    wifi_available: Any = None


class RoomResponse(BaseModel):
    """Room record with live occupancy."""

    id: int
    room_number: str
    capacity: int
    occupancy: int
    monthly_fee: float
    room_type: str
    floor_level: int
    wifi_available: bool

    model_config = ConfigDict(from_attributes=True)


class RoomResidentItem(BaseModel):
    """Resident listed under a room."""

    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class RoomDetailResponse(RoomResponse):
    """Room with the residents currently assigned to it."""

    residents: list[RoomResidentItem] = Field(default_factory=list)


class AssignPayload(BaseModel):
    """Request payload for POST /assignments."""

    resident_id: int
    room_id: int


class AssignmentResponse(BaseModel):
    """Created assignment."""

    message: str = "Resident allocated successfully"
    assignment_id: int
    resident_id: int
    room_id: int
    since: date


class AssignmentListItem(BaseModel):
    """Assignment joined with resident and room details."""

    assignment_id: int
    resident_id: int
    resident_name: str
    room_id: int
    room_number: str
    room_type: str
    monthly_fee: float
    since: date


class TransferPayload(BaseModel):
    """Request payload for POST /assignments/transfer."""

    resident_id: int
    new_room_id: int


class TransferResponse(BaseModel):
    """Completed transfer."""

    message: str = "Room transfer successful"
    from_room_id: int
    to_room_id: int


class BillingSnapshotResponse(BaseModel):
    """Derived billing state of a resident."""

    monthly_fee: float
    room_type: str | None = None
    assigned_since: date
    last_payment_date: date | None = None
    due_date: date | None = None
    days_late: int
    fine: float
    total_payable: float
    status: str
    today: date


class PaymentPayload(BaseModel):
    """Request payload for POST /payments."""

    resident_id: int
    amount: Any = None


class PaymentResponse(BaseModel):
    """Recorded payment."""

    id: int
    resident_id: int
    amount: float
    payment_date: date

    model_config = ConfigDict(from_attributes=True)


class PaymentReceiptResponse(BaseModel):
    """Recorded payment ID plus the refreshed billing snapshot."""

    message: str = "Payment recorded"
    payment_id: int
    snapshot: BillingSnapshotResponse


class ResidentRemovedResponse(BaseModel):
    """Outcome of removing a resident."""

    message: str = "Resident and related records deleted successfully"
    released_room_id: int | None = None
    payments_deleted: int
    complaints_deleted: int


class ComplaintPayload(BaseModel):
    """Request payload for POST /complaints."""

    resident_id: int | None = None
    complaint_text: Any = None


class ComplaintUpdatePayload(BaseModel):
    """Request payload for PUT /complaints/{id}; at least one field."""

    status: str | None = None
    complaint_text: Any = None


class ComplaintResponse(BaseModel):
    """Complaint with the filing resident's name."""

    id: int
    resident_id: int
    resident_name: str | None = None
    complaint_text: str
    status: str


class DashboardMetricsResponse(BaseModel):
    """Headline counters."""

    total_residents: int
    total_rooms: int
    total_assignments: int
    vacant_rooms: int
    pending_complaints: int
    total_payments: float


class FloorOverviewResponse(BaseModel):
    """Per-floor room summary."""

    floor: int
    rooms: int
    beds: int
    vacancies: int
    wifi_available: bool
    avg_fee: float
    avg_capacity: int
    room_types: list[str]
