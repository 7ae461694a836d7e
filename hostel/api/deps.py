"""FastAPI dependencies building services from the application state."""

from datetime import date
from typing import Callable

from fastapi import Depends, Request
from sqlalchemy.orm import sessionmaker

from hostel.services import (
    AssignmentService,
    BillingService,
    ComplaintService,
    PaymentService,
    ResidentService,
    RoomService,
    StatsService,
)


def get_session_factory(request: Request) -> sessionmaker:
    """Session factory wired in by create_app."""
    return request.app.state.session_factory


def get_clock(request: Request) -> Callable[[], date]:
    """Reference-date callable wired in by create_app."""
    return request.app.state.clock


def get_resident_service(session_factory: sessionmaker = Depends(get_session_factory)) -> ResidentService:
    return ResidentService(session_factory)


def get_room_service(session_factory: sessionmaker = Depends(get_session_factory)) -> RoomService:
    return RoomService(session_factory)


def get_assignment_service(
    session_factory: sessionmaker = Depends(get_session_factory),
    clock: Callable[[], date] = Depends(get_clock),
) -> AssignmentService:
    return AssignmentService(session_factory, clock=clock)


def get_billing_service(
    session_factory: sessionmaker = Depends(get_session_factory),
    clock: Callable[[], date] = Depends(get_clock),
) -> BillingService:
    return BillingService(session_factory, clock=clock)


def get_payment_service(
    session_factory: sessionmaker = Depends(get_session_factory),
    clock: Callable[[], date] = Depends(get_clock),
) -> PaymentService:
    return PaymentService(session_factory, clock=clock)


def get_complaint_service(session_factory: sessionmaker = Depends(get_session_factory)) -> ComplaintService:
    return ComplaintService(session_factory)


def get_stats_service(session_factory: sessionmaker = Depends(get_session_factory)) -> StatsService:
    return StatsService(session_factory)
