from __future__ import annotations
from sqlalchemy import select, or_, update

from studio_planner.models.enums import DifficultyLevel
from studio_planner.models.plan_template import PlanTemplate
from studio_planner.repositories.base import Repository


class PlanTemplateRepository(Repository[PlanTemplate, str]):
    async def get(self, id: str) -> PlanTemplate | None:
        result = await self._session.execute(
            select(PlanTemplate).where(PlanTemplate.id == id)
        )
        return result.scalar_one_or_none()

    async def list_by_ids(self, ids: list[str]) -> list[PlanTemplate]:
        if not ids:
            return []
        result = await self._session.execute(
            select(PlanTemplate).where(PlanTemplate.id.in_(set(ids)))
        )
        return list(result.scalars().all())

    async def list_active(self) -> list[PlanTemplate]:
        result = await self._session.execute(
            select(PlanTemplate)
            .where(PlanTemplate.is_active.is_(True))
            .order_by(PlanTemplate.name)
        )
        return list(result.scalars().all())

    async def list_by_level(self, level: DifficultyLevel) -> list[PlanTemplate]:
        result = await self._session.execute(
            select(PlanTemplate)
            .where(PlanTemplate.is_active.is_(True), PlanTemplate.level == level)
            .order_by(PlanTemplate.name)
        )
        return list(result.scalars().all())

    async def search(self, text: str) -> list[PlanTemplate]:
        term = f"%{text}%"
        result = await self._session.execute(
            select(PlanTemplate)
            .where(
                PlanTemplate.is_active.is_(True),
                or_(PlanTemplate.name.ilike(term), PlanTemplate.guidance_note.ilike(term)),
            )
            .order_by(PlanTemplate.name)
        )
        return list(result.scalars().all())

    async def list_recently_used(self, limit: int) -> list[PlanTemplate]:
        result = await self._session.execute(
            select(PlanTemplate)
            .where(PlanTemplate.is_active.is_(True), PlanTemplate.last_used_at.is_not(None))
            .order_by(PlanTemplate.last_used_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def list_most_used(self, limit: int) -> list[PlanTemplate]:
        result = await self._session.execute(
            select(PlanTemplate)
            .where(PlanTemplate.is_active.is_(True))
            .order_by(PlanTemplate.usage_count.desc(), PlanTemplate.name)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def create(self, entity: PlanTemplate) -> PlanTemplate:
        self._session.add(entity)
        await self._session.flush()
        return entity

    async def update(self, id: str, updates: dict) -> PlanTemplate | None:
        template = await self.get(id)
        if template:
            for key, value in updates.items():
                setattr(template, key, value)
            await self._session.flush()
        return template

    async def increment_usage(self, id: str, used_at) -> int:
        """Atomically bump usage_count and stamp last_used_at."""
        result = await self._session.execute(
            update(PlanTemplate)
            .where(PlanTemplate.id == id)
            .values(usage_count=PlanTemplate.usage_count + 1, last_used_at=used_at)
        )
        return result.rowcount
