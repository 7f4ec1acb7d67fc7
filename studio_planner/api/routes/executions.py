"""API routes for recorded sessions.

Executions are append-only: update and delete routes exist only to answer
with 405.
"""
from datetime import date

from fastapi import APIRouter, Depends, Query, status

from studio_planner.api.routes.dependencies import get_execution_service
from studio_planner.schemas.execution import ExecutionCreate, ExecutionResponse
from studio_planner.services.execution import ExecutionService

router = APIRouter()


@router.post("", response_model=ExecutionResponse, status_code=status.HTTP_201_CREATED)
async def record_execution(
    data: ExecutionCreate,
    service: ExecutionService = Depends(get_execution_service),
):
    execution = await service.record(
        data.template_id,
        data.slot_id,
        data.date,
        instructor=data.instructor,
        notes=data.notes,
    )
    return ExecutionResponse.from_execution(execution)


@router.get("", response_model=list[ExecutionResponse])
async def list_executions(
    start_date: date | None = None,
    end_date: date | None = None,
    slot_id: str | None = None,
    template_id: str | None = None,
    limit: int | None = Query(None, ge=1, le=500),
    service: ExecutionService = Depends(get_execution_service),
):
    if template_id:
        executions = await service.list_by_template(template_id)
    elif start_date or end_date or slot_id:
        executions = await service.list_by_date_range(start_date, end_date, slot_id)
    else:
        executions = await service.list_recent(limit)
    return [ExecutionResponse.from_execution(execution) for execution in executions]


@router.get("/members/{member_id}", response_model=list[ExecutionResponse])
async def list_member_executions(
    member_id: str,
    start_date: date | None = None,
    end_date: date | None = None,
    service: ExecutionService = Depends(get_execution_service),
):
    executions = await service.list_for_member(member_id, start_date, end_date)
    return [ExecutionResponse.from_execution(execution) for execution in executions]


@router.get("/{execution_id}", response_model=ExecutionResponse)
async def get_execution(
    execution_id: str,
    service: ExecutionService = Depends(get_execution_service),
):
    return ExecutionResponse.from_execution(await service.get(execution_id))


@router.api_route("/{execution_id}", methods=["PUT", "PATCH"], include_in_schema=False)
async def update_execution(
    execution_id: str,
    service: ExecutionService = Depends(get_execution_service),
):
    await service.update(execution_id)


@router.delete("/{execution_id}", include_in_schema=False)
async def delete_execution(
    execution_id: str,
    service: ExecutionService = Depends(get_execution_service),
):
    await service.delete(execution_id)
