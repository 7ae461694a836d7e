"""Payment API routes."""

from fastapi import APIRouter, Depends, status

from hostel.api.deps import get_payment_service
from hostel.api.routes.residents import snapshot_response
from hostel.api.schemas import PaymentPayload, PaymentReceiptResponse, PaymentResponse
from hostel.services import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("", response_model=PaymentReceiptResponse, status_code=status.HTTP_201_CREATED)
def record_payment(
    payload: PaymentPayload,
    service: PaymentService = Depends(get_payment_service),
) -> PaymentReceiptResponse:
    """
    Record a payment equal to the resident's current total payable.

    Returns:
        201: payment_id and the refreshed snapshot (status Paid)
        400: Amount mismatch (message states the expected amount) or resident unassigned
        404: Resident not found
    """
    receipt = service.record_payment(payload.resident_id, payload.amount)
    return PaymentReceiptResponse(
        payment_id=receipt.payment_id,
        snapshot=snapshot_response(receipt.snapshot),
    )


@router.get("", response_model=list[PaymentResponse])
def list_payments(
    resident_id: int | None = None,
    service: PaymentService = Depends(get_payment_service),
) -> list[PaymentResponse]:
    """List payments, optionally for one resident."""
    return [PaymentResponse.model_validate(p) for p in service.list_payments(resident_id)]
