"""Dashboard and floor overview routes."""

from fastapi import APIRouter, Depends

from hostel.api.deps import get_stats_service
from hostel.api.schemas import DashboardMetricsResponse, FloorOverviewResponse
from hostel.services import StatsService

router = APIRouter(tags=["stats"])


@router.get("/dashboard/metrics", response_model=DashboardMetricsResponse)
def dashboard_metrics(service: StatsService = Depends(get_stats_service)) -> DashboardMetricsResponse:
    """Residents, rooms, assignments, vacant rooms, pending complaints, payments total."""
    return DashboardMetricsResponse(**service.dashboard_metrics()._asdict())


@router.get("/floors/overview", response_model=list[FloorOverviewResponse])
def floors_overview(service: StatsService = Depends(get_stats_service)) -> list[FloorOverviewResponse]:
    """Room counts, beds, vacancies and average fee per floor."""
    return [FloorOverviewResponse(**floor._asdict()) for floor in service.floors_overview()]
