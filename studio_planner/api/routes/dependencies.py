"""Shared dependencies for API routes."""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from studio_planner.db.database import get_db
from studio_planner.integrations import AttendanceProvider, SlotRegistry, StudioOpsClient, get_studio_ops_client
from studio_planner.services.allocation import AllocationService
from studio_planner.services.analytics import AnalyticsService
from studio_planner.services.execution import ExecutionService
from studio_planner.services.exercise_catalog import ExerciseCatalogService
from studio_planner.services.plan_template import PlanTemplateService
from studio_planner.services.reconciliation import ReconciliationService
from studio_planner.services.usage import UsageService


def get_studio_ops() -> StudioOpsClient:
    return get_studio_ops_client()


def get_attendance_provider() -> AttendanceProvider:
    return get_studio_ops_client()


def get_slot_registry() -> SlotRegistry:
    return get_studio_ops_client()


async def get_catalog_service(db: AsyncSession = Depends(get_db)) -> ExerciseCatalogService:
    return ExerciseCatalogService(db)


async def get_template_service(db: AsyncSession = Depends(get_db)) -> PlanTemplateService:
    return PlanTemplateService(db)


async def get_allocation_service(
    db: AsyncSession = Depends(get_db),
    slot_registry: SlotRegistry = Depends(get_slot_registry),
) -> AllocationService:
    return AllocationService(db, slot_registry)


async def get_execution_service(
    db: AsyncSession = Depends(get_db),
    attendance: AttendanceProvider = Depends(get_attendance_provider),
) -> ExecutionService:
    return ExecutionService(db, attendance)


async def get_usage_service(db: AsyncSession = Depends(get_db)) -> UsageService:
    return UsageService(db)


async def get_analytics_service(db: AsyncSession = Depends(get_db)) -> AnalyticsService:
    return AnalyticsService(db)


async def get_reconciliation_service(db: AsyncSession = Depends(get_db)) -> ReconciliationService:
    return ReconciliationService(db)
