"""API routes for history reports."""
from datetime import date

from fastapi import APIRouter, Depends

from studio_planner.api.routes.dependencies import get_analytics_service
from studio_planner.schemas.analytics import (
    BenefitCoverageEntry,
    BodyRegionFocusEntry,
    ExerciseUsageEntry,
    PlanEffectivenessEntry,
)
from studio_planner.services.analytics import AnalyticsService

router = APIRouter()


@router.get("/exercise-usage", response_model=list[ExerciseUsageEntry])
async def exercise_usage(
    start_date: date | None = None,
    end_date: date | None = None,
    slot_id: str | None = None,
    service: AnalyticsService = Depends(get_analytics_service),
):
    return await service.exercise_usage_report(start_date, end_date, slot_id)


@router.get("/body-region-focus", response_model=list[BodyRegionFocusEntry])
async def body_region_focus(
    start_date: date | None = None,
    end_date: date | None = None,
    slot_id: str | None = None,
    service: AnalyticsService = Depends(get_analytics_service),
):
    return await service.body_region_focus_report(start_date, end_date, slot_id)


@router.get("/benefit-coverage", response_model=list[BenefitCoverageEntry])
async def benefit_coverage(
    start_date: date | None = None,
    end_date: date | None = None,
    slot_id: str | None = None,
    service: AnalyticsService = Depends(get_analytics_service),
):
    return await service.benefit_coverage_report(start_date, end_date, slot_id)


@router.get("/plan-effectiveness", response_model=list[PlanEffectivenessEntry])
async def plan_effectiveness(
    start_date: date | None = None,
    end_date: date | None = None,
    slot_id: str | None = None,
    service: AnalyticsService = Depends(get_analytics_service),
):
    return await service.plan_effectiveness_report(start_date, end_date, slot_id)
