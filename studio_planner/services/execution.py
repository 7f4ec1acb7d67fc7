"""
ExecutionService - records what was actually practiced in a slot.

Recording an execution:
1. Rejects a second execution for the same (slot, date)
2. Loads the template and asks the attendance collaborator who was present
3. Freezes the template sections, with each exercise's region and benefit
   tags, into a snapshot
4. Inserts the record (unique on slot and date)
5. Records template usage and marks the matching scheduled allocation as
   executed

Step 5 runs after the execution is durable. A failure there is logged and
left for the reconciler; the execution itself stands.
"""
from datetime import date

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from studio_planner.config.settings import get_settings
from studio_planner.core.exceptions import DuplicateExecutionError, ImmutableEntityError, NotFoundError
from studio_planner.core.logging import get_logger
from studio_planner.core.metrics import track_execution, track_followup_failure
from studio_planner.integrations.base import AttendanceProvider, dedupe_members
from studio_planner.models.execution import Execution
from studio_planner.models.plan_template import PlanTemplate
from studio_planner.repositories.execution_repository import ExecutionRepository
from studio_planner.schemas.snapshot import ExecutionSnapshot
from studio_planner.services.allocation import AllocationService
from studio_planner.services.base import BaseService
from studio_planner.services.exercise_catalog import ExerciseCatalogService
from studio_planner.services.plan_template import PlanTemplateService

logger = get_logger(__name__)


class ExecutionService(BaseService):
    def __init__(self, session: AsyncSession, attendance: AttendanceProvider):
        super().__init__(session)
        self._repo = ExecutionRepository(session)
        self._attendance = attendance
        self._catalog = ExerciseCatalogService(session)
        self._templates = PlanTemplateService(session)
        self._allocations = AllocationService(session)

    async def record(
        self,
        template_id: str,
        slot_id: str,
        on_date: date,
        instructor: str | None = None,
        notes: str | None = None,
    ) -> Execution:
        if await self._repo.get_for_slot_date(slot_id, on_date):
            track_execution("duplicate")
            raise DuplicateExecutionError(slot_id, on_date)

        template = await self._session.get(PlanTemplate, template_id)
        if template is None:
            raise NotFoundError("PlanTemplate", f"Plan template {template_id} not found", {"id": template_id})

        member_ids = dedupe_members(await self._attendance.get_present_members(slot_id, on_date))

        catalog = await self._catalog.get_many(item["exercise_id"] for item in template.iter_items())
        snapshot = ExecutionSnapshot.capture(template.sections or [], catalog)

        execution = Execution(
            template_id=template.id,
            template_name=template.name,
            template_level=template.level,
            sections_snapshot=snapshot.to_storage(),
            slot_id=slot_id,
            date=on_date,
            instructor=instructor,
            notes=notes,
            member_ids=member_ids,
            attendee_count=len(member_ids),
        )
        try:
            async with self._session.begin_nested():
                await self._repo.create(execution)
        except IntegrityError as e:
            track_execution("duplicate")
            logger.warning("execution_conflict", slot_id=slot_id, date=str(on_date), error=str(e.orig))
            raise DuplicateExecutionError(slot_id, on_date) from e

        track_execution("recorded")
        logger.info(
            "execution_recorded",
            execution_id=execution.id,
            template_id=template.id,
            slot_id=slot_id,
            date=str(on_date),
            attendee_count=execution.attendee_count,
        )

        await self._record_usage(execution)
        await self._close_allocation(execution)
        return execution

    async def update(self, execution_id: str, *args, **kwargs):
        raise ImmutableEntityError("Execution", "updated", {"execution_id": execution_id})

    async def delete(self, execution_id: str):
        raise ImmutableEntityError("Execution", "deleted", {"execution_id": execution_id})

    async def get(self, execution_id: str) -> Execution:
        return await self._get_or_404(Execution, execution_id, f"Execution {execution_id} not found")

    async def get_for_slot_date(self, slot_id: str, on_date: date) -> Execution | None:
        return await self._repo.get_for_slot_date(slot_id, on_date)

    async def list_by_date(self, on_date: date) -> list[Execution]:
        return await self._repo.list_by_date_range(on_date, on_date)

    async def list_by_date_range(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        slot_id: str | None = None,
    ) -> list[Execution]:
        self._check_window(start_date, end_date)
        return await self._repo.list_by_date_range(start_date, end_date, slot_id)

    async def list_by_template(self, template_id: str) -> list[Execution]:
        return await self._repo.list_by_template(template_id)

    async def list_recent(self, limit: int | None = None) -> list[Execution]:
        return await self._repo.list_recent(limit or get_settings().recent_executions_limit)

    async def list_for_member(
        self,
        member_id: str,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[Execution]:
        """Sessions a member attended, oldest first."""
        self._check_window(start_date, end_date)
        executions = await self._repo.list_by_date_range(start_date, end_date)
        return [execution for execution in executions if member_id in execution.attendees]

    async def _record_usage(self, execution: Execution) -> None:
        try:
            async with self._session.begin_nested():
                await self._templates.record_usage(execution.template_id)
        except Exception as e:
            track_followup_failure("record_usage")
            logger.error(
                "execution_followup_failed",
                step="record_usage",
                execution_id=execution.id,
                template_id=execution.template_id,
                error=str(e),
            )

    async def _close_allocation(self, execution: Execution) -> None:
        try:
            async with self._session.begin_nested():
                allocation = await self._allocations.get_scheduled_for_slot_date(execution.slot_id, execution.date)
                if allocation is not None:
                    await self._allocations.mark_executed(allocation.id, execution.id)
        except Exception as e:
            track_followup_failure("mark_allocation_executed")
            logger.error(
                "execution_followup_failed",
                step="mark_allocation_executed",
                execution_id=execution.id,
                slot_id=execution.slot_id,
                date=str(execution.date),
                error=str(e),
            )
