"""API routes for scheduling templates onto slots."""
from datetime import date

from fastapi import APIRouter, Depends, Query, status

from studio_planner.api.routes.dependencies import get_allocation_service
from studio_planner.models.enums import AllocationStatus
from studio_planner.schemas.allocation import (
    AllocationCreate,
    AllocationResponse,
    AllSlotsAllocationCreate,
    BatchAllocationResponse,
)
from studio_planner.services.allocation import AllocationService

router = APIRouter()


@router.post("", response_model=AllocationResponse, status_code=status.HTTP_201_CREATED)
async def create_allocation(
    data: AllocationCreate,
    service: AllocationService = Depends(get_allocation_service),
):
    return await service.allocate(data.template_id, data.slot_id, data.date, data.assigned_by)


@router.post("/all-slots", response_model=BatchAllocationResponse)
async def allocate_to_all_slots(
    data: AllSlotsAllocationCreate,
    service: AllocationService = Depends(get_allocation_service),
):
    """Allocate a template to every active slot.

    Slots that were already taken are listed in ``skipped``.
    """
    result = await service.allocate_to_all_slots(data.template_id, data.date, data.assigned_by)
    return BatchAllocationResponse(
        created=[AllocationResponse.model_validate(allocation) for allocation in result.created],
        skipped=result.skipped,
        is_complete=result.is_complete,
    )


@router.get("", response_model=list[AllocationResponse])
async def list_allocations(
    start_date: date,
    end_date: date,
    status_filter: AllocationStatus | None = Query(None, alias="status"),
    service: AllocationService = Depends(get_allocation_service),
):
    return await service.list_by_date_range(start_date, end_date, status_filter)


@router.get("/pending", response_model=list[AllocationResponse])
async def list_pending_allocations(
    service: AllocationService = Depends(get_allocation_service),
):
    return await service.list_pending()


@router.get("/{allocation_id}", response_model=AllocationResponse)
async def get_allocation(
    allocation_id: str,
    service: AllocationService = Depends(get_allocation_service),
):
    return await service.get(allocation_id)


@router.post("/{allocation_id}/cancel", response_model=AllocationResponse)
async def cancel_allocation(
    allocation_id: str,
    service: AllocationService = Depends(get_allocation_service),
):
    return await service.cancel(allocation_id)
