from __future__ import annotations
from sqlalchemy import select, or_

from studio_planner.models.exercise import Exercise
from studio_planner.models.enums import DifficultyLevel, ExerciseCategory
from studio_planner.repositories.base import Repository


class ExerciseRepository(Repository[Exercise, str]):
    async def get(self, id: str) -> Exercise | None:
        result = await self._session.execute(
            select(Exercise).where(Exercise.id == id)
        )
        return result.scalar_one_or_none()

    async def list_by_ids(self, ids: list[str]) -> list[Exercise]:
        """Fetch multiple exercises by id; unknown ids are simply absent."""
        if not ids:
            return []

        result = await self._session.execute(
            select(Exercise).where(Exercise.id.in_(set(ids)))
        )
        return list(result.scalars().all())

    async def list_active(self) -> list[Exercise]:
        result = await self._session.execute(
            select(Exercise).where(Exercise.is_active.is_(True)).order_by(Exercise.name)
        )
        return list(result.scalars().all())

    async def list_by_category(self, category: ExerciseCategory) -> list[Exercise]:
        result = await self._session.execute(
            select(Exercise)
            .where(Exercise.category == category, Exercise.is_active.is_(True))
            .order_by(Exercise.name)
        )
        return list(result.scalars().all())

    async def list_by_difficulty(self, difficulty: DifficultyLevel) -> list[Exercise]:
        result = await self._session.execute(
            select(Exercise)
            .where(Exercise.difficulty == difficulty, Exercise.is_active.is_(True))
            .order_by(Exercise.name)
        )
        return list(result.scalars().all())

    async def search(self, text: str) -> list[Exercise]:
        term = f"%{text}%"
        result = await self._session.execute(
            select(Exercise)
            .where(
                Exercise.is_active.is_(True),
                or_(Exercise.name.ilike(term), Exercise.alternate_name.ilike(term)),
            )
            .order_by(Exercise.name)
        )
        return list(result.scalars().all())

    async def create(self, entity: Exercise) -> Exercise:
        self._session.add(entity)
        await self._session.flush()
        return entity

    async def delete(self, id: str) -> bool:
        exercise = await self.get(id)
        if exercise:
            await self._session.delete(exercise)
            await self._session.flush()
            return True
        return False
