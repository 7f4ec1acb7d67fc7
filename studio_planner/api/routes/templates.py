"""API routes for plan templates."""
from fastapi import APIRouter, Depends, Query, status

from studio_planner.api.routes.dependencies import get_template_service, get_usage_service
from studio_planner.models.enums import DifficultyLevel, SectionType
from studio_planner.schemas.analytics import OveruseWarning
from studio_planner.schemas.plan_template import (
    ItemInsertRequest,
    ItemMoveRequest,
    PlanTemplateCreate,
    PlanTemplateResponse,
    PlanTemplateUpdate,
    TemplateCloneRequest,
    TemplateInsights,
)
from studio_planner.services.plan_template import PlanTemplateService
from studio_planner.services.usage import UsageService

router = APIRouter()


@router.post("", response_model=PlanTemplateResponse, status_code=status.HTTP_201_CREATED)
async def create_template(
    data: PlanTemplateCreate,
    service: PlanTemplateService = Depends(get_template_service),
):
    return await service.create(data)


@router.get("", response_model=list[PlanTemplateResponse])
async def list_templates(
    level: DifficultyLevel | None = None,
    q: str | None = Query(None, description="Search name and guidance note"),
    service: PlanTemplateService = Depends(get_template_service),
):
    if q:
        return await service.search(q)
    if level:
        return await service.list_by_level(level)
    return await service.list_active()


@router.get("/recent", response_model=list[PlanTemplateResponse])
async def list_recently_used_templates(
    limit: int | None = Query(None, ge=1, le=100),
    service: PlanTemplateService = Depends(get_template_service),
):
    return await service.list_recently_used(limit)


@router.get("/popular", response_model=list[PlanTemplateResponse])
async def list_most_used_templates(
    limit: int | None = Query(None, ge=1, le=100),
    service: PlanTemplateService = Depends(get_template_service),
):
    return await service.list_most_used(limit)


@router.get("/{template_id}", response_model=PlanTemplateResponse)
async def get_template(
    template_id: str,
    service: PlanTemplateService = Depends(get_template_service),
):
    return await service.get(template_id)


@router.patch("/{template_id}", response_model=PlanTemplateResponse)
async def update_template(
    template_id: str,
    data: PlanTemplateUpdate,
    service: PlanTemplateService = Depends(get_template_service),
):
    return await service.update(template_id, data, expected_version=data.expected_version)


@router.post("/{template_id}/deactivate", response_model=PlanTemplateResponse)
async def deactivate_template(
    template_id: str,
    expected_version: int | None = Query(None, ge=1),
    service: PlanTemplateService = Depends(get_template_service),
):
    return await service.deactivate(template_id, expected_version)


@router.post("/{template_id}/clone", response_model=PlanTemplateResponse, status_code=status.HTTP_201_CREATED)
async def clone_template(
    template_id: str,
    data: TemplateCloneRequest | None = None,
    service: PlanTemplateService = Depends(get_template_service),
):
    return await service.clone(template_id, data.name if data else None)


@router.post("/{template_id}/items", response_model=PlanTemplateResponse)
async def add_template_item(
    template_id: str,
    data: ItemInsertRequest,
    service: PlanTemplateService = Depends(get_template_service),
):
    return await service.add_item(
        template_id,
        data.section_type,
        data.item,
        position=data.position,
        expected_version=data.expected_version,
    )


@router.delete("/{template_id}/sections/{section_type}/items/{order}", response_model=PlanTemplateResponse)
async def remove_template_item(
    template_id: str,
    section_type: SectionType,
    order: int,
    expected_version: int | None = Query(None, ge=1),
    service: PlanTemplateService = Depends(get_template_service),
):
    return await service.remove_item(template_id, section_type, order, expected_version)


@router.post("/{template_id}/sections/{section_type}/move", response_model=PlanTemplateResponse)
async def move_template_item(
    template_id: str,
    section_type: SectionType,
    data: ItemMoveRequest,
    service: PlanTemplateService = Depends(get_template_service),
):
    return await service.move_item(
        template_id,
        section_type,
        data.from_order,
        data.to_order,
        expected_version=data.expected_version,
    )


@router.get("/{template_id}/overuse", response_model=OveruseWarning)
async def get_overuse_warning(
    template_id: str,
    service: UsageService = Depends(get_usage_service),
):
    """Warn when a template has been used too recently or too often."""
    return await service.get_overuse_warning(template_id)


@router.get("/{template_id}/insights", response_model=TemplateInsights)
async def get_template_insights(
    template_id: str,
    top_n: int | None = Query(None, ge=1, le=20),
    service: PlanTemplateService = Depends(get_template_service),
):
    template = await service.get(template_id)
    return TemplateInsights(
        template_id=template.id,
        dominant_body_regions=await service.get_dominant_body_regions(template, top_n),
        top_benefits=await service.get_top_benefits(template, top_n),
    )
