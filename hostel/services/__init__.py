"""Service layer: storage wiring and the occupancy/billing operations."""

from hostel.services.assignment_service import AssignmentService, ReleaseResult, TransferResult
from hostel.services.billing_service import BillingService, BillingSnapshot, FeeStatus, compute_snapshot
from hostel.services.complaint_service import ComplaintService
from hostel.services.db import create_db_engine, create_session_factory, init_db, unit_of_work
from hostel.services.occupancy_ledger import OccupancyLedger
from hostel.services.payment_service import PaymentReceipt, PaymentService
from hostel.services.resident_service import ResidentService
from hostel.services.room_service import RoomService
from hostel.services.stats_service import DashboardMetrics, FloorOverview, StatsService

__all__ = [
    "create_db_engine",
    "create_session_factory",
    "init_db",
    "unit_of_work",
    "OccupancyLedger",
    "AssignmentService",
    "TransferResult",
    "ReleaseResult",
    "BillingService",
    "BillingSnapshot",
    "FeeStatus",
    "compute_snapshot",
    "PaymentService",
    "PaymentReceipt",
    "ResidentService",
    "RoomService",
    "ComplaintService",
    "StatsService",
    "DashboardMetrics",
    "FloorOverview",
]
