"""Maintenance endpoints."""
from datetime import date

from fastapi import APIRouter, Depends

from studio_planner.api.routes.dependencies import get_reconciliation_service
from studio_planner.schemas.analytics import ReconciliationResponse
from studio_planner.services.reconciliation import ReconciliationService

router = APIRouter()


@router.post("/reconcile", response_model=ReconciliationResponse)
async def reconcile(
    start_date: date | None = None,
    end_date: date | None = None,
    service: ReconciliationService = Depends(get_reconciliation_service),
):
    """Repair allocations and usage counters left behind by failed follow-up steps."""
    report = await service.reconcile(start_date, end_date)
    return ReconciliationResponse(
        executions_checked=report.executions_checked,
        allocations_marked_executed=report.allocations_marked_executed,
        templates_usage_corrected=report.templates_usage_corrected,
    )
