"""
ExerciseCatalogService - read-mostly access to the exercise catalog.

Plan templates and executions refer to exercises by id. This service resolves
those ids, expands compound flows and registers new entries after checking
that any child sequence is well formed.
"""
from collections.abc import Iterable, Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from studio_planner.core.exceptions import NotFoundError, ValidationError
from studio_planner.core.logging import get_logger
from studio_planner.models.enums import BodyRegion, DifficultyLevel, ExerciseCategory
from studio_planner.models.exercise import Exercise
from studio_planner.repositories.exercise_repository import ExerciseRepository
from studio_planner.schemas.exercise import ExerciseCreate
from studio_planner.services.base import BaseService

logger = get_logger(__name__)

# Shown wherever a historical record points at an exercise the catalog no longer has
UNKNOWN_EXERCISE_LABEL = "unknown/deleted"

MIN_COMPOUND_STEPS = 2


def label_for(exercise_id: str, catalog: Mapping[str, Exercise]) -> str:
    exercise = catalog.get(exercise_id)
    return exercise.name if exercise else UNKNOWN_EXERCISE_LABEL


class ExerciseCatalogService(BaseService):
    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self._repo = ExerciseRepository(session)

    async def get(self, exercise_id: str) -> Exercise:
        exercise = await self._repo.get(exercise_id)
        if not exercise:
            raise NotFoundError("Exercise", f"Exercise {exercise_id} not found", {"id": exercise_id})
        return exercise

    async def get_many(self, exercise_ids: Iterable[str]) -> dict[str, Exercise]:
        """Map id to exercise for every id that still exists."""
        exercises = await self._repo.list_by_ids(list(exercise_ids))
        return {exercise.id: exercise for exercise in exercises}

    async def label_for(self, exercise_id: str) -> str:
        exercise = await self._repo.get(exercise_id)
        return exercise.name if exercise else UNKNOWN_EXERCISE_LABEL

    async def list_active(self) -> list[Exercise]:
        return await self._repo.list_active()

    async def list_by_category(self, category: ExerciseCategory) -> list[Exercise]:
        return await self._repo.list_by_category(category)

    async def list_by_difficulty(self, difficulty: DifficultyLevel) -> list[Exercise]:
        return await self._repo.list_by_difficulty(difficulty)

    async def list_by_body_region(self, region: BodyRegion) -> list[Exercise]:
        """Active exercises tagged with ``region`` as a primary or secondary target."""
        exercises = await self._repo.list_active()
        return [
            exercise for exercise in exercises
            if region in exercise.primary_region_tags or region in exercise.secondary_region_tags
        ]

    async def search(self, text: str) -> list[Exercise]:
        text = text.strip()
        if not text:
            return []
        return await self._repo.search(text)

    async def expand_sequence(self, exercise_id: str) -> list[Exercise]:
        """Ordered child exercises of a compound flow.

        Children removed from the catalog since the flow was registered are
        left out.
        """
        exercise = await self.get(exercise_id)
        if not exercise.is_compound:
            raise ValidationError("exercise_id", f"{exercise_id} is not a compound flow")

        child_ids = exercise.child_sequence or []
        children = await self.get_many(child_ids)
        return [children[child_id] for child_id in child_ids if child_id in children]

    async def register(self, data: ExerciseCreate) -> Exercise:
        if await self._repo.get(data.id):
            raise ValidationError("id", f"Exercise {data.id} already exists")

        child_ids = data.child_sequence or []
        if data.category == ExerciseCategory.COMPOUND_FLOW:
            if len(child_ids) < MIN_COMPOUND_STEPS:
                raise ValidationError(
                    "child_sequence",
                    f"A compound flow needs at least {MIN_COMPOUND_STEPS} steps",
                )
            known = await self.get_many(child_ids)
            missing = [child_id for child_id in child_ids if child_id not in known]
            if missing:
                raise ValidationError(
                    "child_sequence",
                    "Unknown exercises in sequence",
                    {"field": "child_sequence", "missing": missing},
                )
        elif child_ids:
            raise ValidationError("child_sequence", "Only compound flows may declare a sequence")

        exercise = Exercise(**data.model_dump(mode="json"))
        await self._repo.create(exercise)
        logger.info("exercise_registered", exercise_id=exercise.id, category=data.category.value)
        return exercise

    async def remove(self, exercise_id: str) -> None:
        """Hard-delete a catalog entry. Execution snapshots keep their own copy."""
        if not await self._repo.delete(exercise_id):
            raise NotFoundError("Exercise", f"Exercise {exercise_id} not found", {"id": exercise_id})
        logger.info("exercise_removed", exercise_id=exercise_id)
