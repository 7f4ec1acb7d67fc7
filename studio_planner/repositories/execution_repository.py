from __future__ import annotations
from datetime import date, datetime

from sqlalchemy import select, func, and_

from studio_planner.models.execution import Execution
from studio_planner.repositories.base import Repository


class ExecutionRepository(Repository[Execution, str]):
    """Insert-and-read access to execution records.

    There is intentionally no update or delete here.
    """

    async def get(self, id: str) -> Execution | None:
        result = await self._session.execute(
            select(Execution).where(Execution.id == id)
        )
        return result.scalar_one_or_none()

    async def get_for_slot_date(self, slot_id: str, on_date: date) -> Execution | None:
        result = await self._session.execute(
            select(Execution).where(
                and_(Execution.slot_id == slot_id, Execution.date == on_date)
            )
        )
        return result.scalar_one_or_none()

    async def list_by_date_range(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        slot_id: str | None = None,
    ) -> list[Execution]:
        """Executions within an inclusive window, oldest first."""
        query = select(Execution)

        if start_date:
            query = query.where(Execution.date >= start_date)
        if end_date:
            query = query.where(Execution.date <= end_date)
        if slot_id:
            query = query.where(Execution.slot_id == slot_id)

        query = query.order_by(Execution.date, Execution.created_at, Execution.slot_id)
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def list_by_template(self, template_id: str) -> list[Execution]:
        result = await self._session.execute(
            select(Execution)
            .where(Execution.template_id == template_id)
            .order_by(Execution.date.desc())
        )
        return list(result.scalars().all())

    async def list_recent(self, limit: int) -> list[Execution]:
        result = await self._session.execute(
            select(Execution)
            .order_by(Execution.date.desc(), Execution.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_for_template(
        self,
        template_id: str,
        start_date: date,
        end_date: date,
    ) -> int:
        result = await self._session.execute(
            select(func.count(Execution.id)).where(
                Execution.template_id == template_id,
                Execution.date >= start_date,
                Execution.date <= end_date,
            )
        )
        return result.scalar() or 0

    async def usage_by_template(self) -> dict[str, tuple[int, datetime | None]]:
        """Map template id to (execution count, latest record time)."""
        result = await self._session.execute(
            select(
                Execution.template_id,
                func.count(Execution.id),
                func.max(Execution.created_at),
            ).group_by(Execution.template_id)
        )
        return {template_id: (count, latest) for template_id, count, latest in result.all()}

    async def create(self, entity: Execution) -> Execution:
        self._session.add(entity)
        await self._session.flush()
        return entity
