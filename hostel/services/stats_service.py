"""Read-only aggregates over rooms, residents, assignments, complaints and payments."""

import logging
from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from typing import List, NamedTuple

from sqlalchemy import case, func, select
from sqlalchemy.orm import sessionmaker

from hostel.models import Assignment, Complaint, ComplaintStatus, Payment, Resident, Room
from hostel.services.db import unit_of_work

logger = logging.getLogger(__name__)


class DashboardMetrics(NamedTuple):
    """Headline counters for the dashboard."""

    total_residents: int
    total_rooms: int
    total_assignments: int
    vacant_rooms: int
    pending_complaints: int
    total_payments: Decimal


class FloorOverview(NamedTuple):
    """Capacity summary of one floor."""

    floor: int
    rooms: int
    beds: int
    vacancies: int
    wifi_available: bool
    avg_fee: Decimal
    avg_capacity: int
    room_types: List[str]


def _round_whole(value) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)


class StatsService:
    """Dashboard counters and per-floor occupancy summary."""

    def __init__(self, session_factory: sessionmaker):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def dashboard_metrics(self) -> DashboardMetrics:
        """Count residents, rooms, assignments, rooms with a free bed, pending
        complaints, and sum all payments."""
        with unit_of_work(self.session_factory) as session:
            metrics = DashboardMetrics(
                total_residents=session.scalar(select(func.count(Resident.id))),
                total_rooms=session.scalar(select(func.count(Room.id))),
                total_assignments=session.scalar(select(func.count(Assignment.id))),
                vacant_rooms=session.scalar(
                    select(func.count(Room.id)).where(Room.occupancy < Room.capacity)
                ),
                pending_complaints=session.scalar(
                    select(func.count(Complaint.id)).where(Complaint.status == ComplaintStatus.PENDING)
                ),
                total_payments=Decimal(
                    str(session.scalar(select(func.coalesce(func.sum(Payment.amount), 0))))
                ),
            )
        logger.debug(f"Dashboard metrics: {metrics}")
        return metrics

    def floors_overview(self) -> List[FloorOverview]:
        """
        Summarize rooms per floor, lowest floor first.

        Averages are rounded half-up to whole numbers. A floor whose rooms
        have no room type reports ["Mixed"].
        """
        totals = (
            select(
                Room.floor_level,
                func.count(Room.id),
                func.sum(Room.capacity),
                func.sum(Room.capacity - Room.occupancy),
                func.sum(case((Room.wifi_available.is_(True), 1), else_=0)),
                func.avg(Room.monthly_fee),
            )
            .group_by(Room.floor_level)
            .order_by(Room.floor_level)
        )
        types = select(Room.floor_level, Room.room_type).distinct().order_by(Room.room_type)

        with unit_of_work(self.session_factory) as session:
            rows = session.execute(totals).all()
            room_types = defaultdict(list)
            for floor, room_type in session.execute(types):
                if room_type and room_type.strip():
                    room_types[floor].append(room_type.strip())

        overview = []
        for floor, rooms, beds, vacancies, wifi_rooms, avg_fee in rows:
            beds = int(beds or 0)
            overview.append(
                FloorOverview(
                    floor=int(floor or 0),
                    rooms=rooms,
                    beds=beds,
                    vacancies=max(0, int(vacancies or 0)),
                    wifi_available=bool(wifi_rooms),
                    avg_fee=_round_whole(avg_fee or 0),
                    avg_capacity=int(_round_whole(Decimal(beds) / rooms)) if rooms else 0,
                    room_types=room_types.get(floor) or ["Mixed"],
                )
            )
        return overview


__all__ = ["DashboardMetrics", "FloorOverview", "StatsService"]
