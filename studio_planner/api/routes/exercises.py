"""API routes for the exercise catalog."""
from fastapi import APIRouter, Depends, Query, status

from studio_planner.api.routes.dependencies import get_catalog_service
from studio_planner.models.enums import BodyRegion, DifficultyLevel, ExerciseCategory
from studio_planner.schemas.exercise import ExerciseCreate, ExerciseResponse
from studio_planner.services.exercise_catalog import ExerciseCatalogService

router = APIRouter()


@router.get("", response_model=list[ExerciseResponse])
async def list_exercises(
    category: ExerciseCategory | None = None,
    region: BodyRegion | None = None,
    difficulty: DifficultyLevel | None = None,
    q: str | None = Query(None, description="Search name and alternate name"),
    service: ExerciseCatalogService = Depends(get_catalog_service),
):
    if q:
        return await service.search(q)
    if category:
        return await service.list_by_category(category)
    if region:
        return await service.list_by_body_region(region)
    if difficulty:
        return await service.list_by_difficulty(difficulty)
    return await service.list_active()


@router.post("", response_model=ExerciseResponse, status_code=status.HTTP_201_CREATED)
async def register_exercise(
    data: ExerciseCreate,
    service: ExerciseCatalogService = Depends(get_catalog_service),
):
    return await service.register(data)


@router.get("/{exercise_id}", response_model=ExerciseResponse)
async def get_exercise(
    exercise_id: str,
    service: ExerciseCatalogService = Depends(get_catalog_service),
):
    return await service.get(exercise_id)


@router.get("/{exercise_id}/sequence", response_model=list[ExerciseResponse])
async def expand_exercise_sequence(
    exercise_id: str,
    service: ExerciseCatalogService = Depends(get_catalog_service),
):
    return await service.expand_sequence(exercise_id)


@router.delete("/{exercise_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_exercise(
    exercise_id: str,
    service: ExerciseCatalogService = Depends(get_catalog_service),
):
    await service.remove(exercise_id)
