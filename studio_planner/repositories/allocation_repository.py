from __future__ import annotations
from datetime import date

from sqlalchemy import select, and_

from studio_planner.models.allocation import Allocation
from studio_planner.models.enums import AllocationStatus
from studio_planner.repositories.base import Repository


class AllocationRepository(Repository[Allocation, str]):
    async def get(self, id: str) -> Allocation | None:
        result = await self._session.execute(
            select(Allocation).where(Allocation.id == id)
        )
        return result.scalar_one_or_none()

    async def get_active_for_slot_date(self, slot_id: str, on_date: date) -> Allocation | None:
        """The non-cancelled allocation for (slot, date), if any."""
        result = await self._session.execute(
            select(Allocation).where(
                and_(
                    Allocation.slot_id == slot_id,
                    Allocation.date == on_date,
                    Allocation.status != AllocationStatus.CANCELLED,
                )
            )
        )
        return result.scalar_one_or_none()

    async def get_scheduled_for_slot_date(self, slot_id: str, on_date: date) -> Allocation | None:
        result = await self._session.execute(
            select(Allocation).where(
                and_(
                    Allocation.slot_id == slot_id,
                    Allocation.date == on_date,
                    Allocation.status == AllocationStatus.SCHEDULED,
                )
            )
        )
        return result.scalar_one_or_none()

    async def list_by_date_range(
        self,
        start_date: date,
        end_date: date,
        status: AllocationStatus | None = None,
    ) -> list[Allocation]:
        query = select(Allocation).where(
            Allocation.date >= start_date,
            Allocation.date <= end_date,
        )
        if status is not None:
            query = query.where(Allocation.status == status)

        query = query.order_by(Allocation.date, Allocation.slot_id)
        result = await self._session.execute(query)
        return list(result.scalars().all())

    async def list_pending(self, from_date: date) -> list[Allocation]:
        result = await self._session.execute(
            select(Allocation)
            .where(
                Allocation.status == AllocationStatus.SCHEDULED,
                Allocation.date >= from_date,
            )
            .order_by(Allocation.date, Allocation.slot_id)
        )
        return list(result.scalars().all())

    async def create(self, entity: Allocation) -> Allocation:
        self._session.add(entity)
        await self._session.flush()
        return entity

    async def update(self, id: str, updates: dict) -> Allocation | None:
        allocation = await self.get(id)
        if allocation:
            for key, value in updates.items():
                setattr(allocation, key, value)
            await self._session.flush()
        return allocation
