"""
AllocationService - pre-scheduling of plan templates onto (slot, date) pairs.

An allocation moves scheduled -> executed or scheduled -> cancelled and never
leaves a terminal state. At most one non-cancelled allocation may exist for a
(slot, date); the partial unique index on the allocations table is what
guarantees it, the lookup before insert only produces a friendlier error.
"""
from datetime import date

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from studio_planner.core.exceptions import BusinessRuleError, ConflictError
from studio_planner.core.logging import get_logger
from studio_planner.core.metrics import track_allocation, track_allocation_cancelled
from studio_planner.integrations.base import SlotRegistry
from studio_planner.models.allocation import Allocation
from studio_planner.models.enums import AllocationStatus
from studio_planner.models.plan_template import PlanTemplate
from studio_planner.repositories.allocation_repository import AllocationRepository
from studio_planner.schemas.allocation import BatchAllocationResult
from studio_planner.services.base import BaseService

logger = get_logger(__name__)


class AllocationService(BaseService):
    def __init__(self, session: AsyncSession, slot_registry: SlotRegistry | None = None):
        super().__init__(session)
        self._repo = AllocationRepository(session)
        self._slot_registry = slot_registry

    async def allocate(
        self,
        template_id: str,
        slot_id: str,
        on_date: date,
        assigned_by: str | None = None,
    ) -> Allocation:
        await self._get_or_404(PlanTemplate, template_id, f"Plan template {template_id} not found")

        existing = await self._repo.get_active_for_slot_date(slot_id, on_date)
        if existing:
            track_allocation("conflict")
            raise self._slot_taken(slot_id, on_date, existing.id)

        allocation = Allocation(
            template_id=template_id,
            slot_id=slot_id,
            date=on_date,
            assigned_by=assigned_by,
            status=AllocationStatus.SCHEDULED,
        )
        try:
            async with self._session.begin_nested():
                await self._repo.create(allocation)
        except IntegrityError as e:
            # Lost a race with a concurrent allocate for the same slot
            track_allocation("conflict")
            logger.warning("allocation_conflict", slot_id=slot_id, date=str(on_date), error=str(e.orig))
            raise self._slot_taken(slot_id, on_date) from e

        track_allocation("created")
        logger.info(
            "allocation_created",
            allocation_id=allocation.id,
            template_id=template_id,
            slot_id=slot_id,
            date=str(on_date),
        )
        return allocation

    async def allocate_to_all_slots(
        self,
        template_id: str,
        on_date: date,
        assigned_by: str | None = None,
    ) -> BatchAllocationResult:
        """Allocate a template to every active slot on a date.

        Slots that already hold an allocation are skipped and reported in the
        result rather than failing the batch.
        """
        if self._slot_registry is None:
            raise BusinessRuleError("No slot registry configured", code="BR_NO_SLOT_REGISTRY")

        await self._get_or_404(PlanTemplate, template_id, f"Plan template {template_id} not found")

        result = BatchAllocationResult()
        for slot_id in await self._slot_registry.get_active_slots():
            try:
                result.created.append(await self.allocate(template_id, slot_id, on_date, assigned_by))
            except ConflictError:
                result.skipped.append(slot_id)

        logger.info(
            "batch_allocation_completed",
            template_id=template_id,
            date=str(on_date),
            created=len(result.created),
            skipped=result.skipped_count,
        )
        return result

    async def cancel(self, allocation_id: str) -> Allocation:
        allocation = await self.get(allocation_id)

        if allocation.status == AllocationStatus.CANCELLED:
            return allocation
        if allocation.status == AllocationStatus.EXECUTED:
            raise BusinessRuleError(
                f"Allocation {allocation_id} has already been executed",
                code="BR_ALLOCATION_EXECUTED",
                details={"allocation_id": allocation_id, "execution_id": allocation.execution_id},
            )

        await self._repo.update(allocation_id, {"status": AllocationStatus.CANCELLED})
        track_allocation_cancelled()
        logger.info("allocation_cancelled", allocation_id=allocation_id)
        return allocation

    async def mark_executed(self, allocation_id: str, execution_id: str) -> Allocation:
        allocation = await self.get(allocation_id)
        if allocation.status != AllocationStatus.SCHEDULED:
            raise BusinessRuleError(
                f"Allocation {allocation_id} is {allocation.status.value} and cannot be executed",
                code="BR_ALLOCATION_NOT_SCHEDULED",
                details={"allocation_id": allocation_id, "status": allocation.status.value},
            )

        await self._repo.update(
            allocation_id,
            {"status": AllocationStatus.EXECUTED, "execution_id": execution_id},
        )
        logger.info("allocation_executed", allocation_id=allocation_id, execution_id=execution_id)
        return allocation

    async def get(self, allocation_id: str) -> Allocation:
        return await self._get_or_404(Allocation, allocation_id, f"Allocation {allocation_id} not found")

    async def get_active_for_slot_date(self, slot_id: str, on_date: date) -> Allocation | None:
        return await self._repo.get_active_for_slot_date(slot_id, on_date)

    async def get_scheduled_for_slot_date(self, slot_id: str, on_date: date) -> Allocation | None:
        return await self._repo.get_scheduled_for_slot_date(slot_id, on_date)

    async def list_by_date(self, on_date: date) -> list[Allocation]:
        return await self._repo.list_by_date_range(on_date, on_date)

    async def list_by_date_range(
        self,
        start_date: date,
        end_date: date,
        status: AllocationStatus | None = None,
    ) -> list[Allocation]:
        self._check_window(start_date, end_date)
        return await self._repo.list_by_date_range(start_date, end_date, status)

    async def list_pending(self, today: date | None = None) -> list[Allocation]:
        """Scheduled allocations dated today or later."""
        return await self._repo.list_pending(today or date.today())

    @staticmethod
    def _slot_taken(slot_id: str, on_date: date, allocation_id: str | None = None) -> ConflictError:
        details = {"slot_id": slot_id, "date": str(on_date)}
        if allocation_id:
            details["allocation_id"] = allocation_id
        return ConflictError(
            f"Slot {slot_id} already has a plan allocated on {on_date}",
            code="CF_ALLOCATION_EXISTS",
            details=details,
        )
