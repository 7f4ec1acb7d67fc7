"""
ReconciliationService - repairs the follow-up steps of execution recording.

Recording an execution commits the execution first and then, best effort,
bumps template usage and closes the scheduled allocation. If either of those
steps failed, this pass brings allocations and usage statistics back in line
with the execution history. Running it twice changes nothing the second time.
"""
from dataclasses import dataclass
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from studio_planner.core.logging import get_logger
from studio_planner.core.metrics import track_reconciliation_repair
from studio_planner.repositories.allocation_repository import AllocationRepository
from studio_planner.repositories.execution_repository import ExecutionRepository
from studio_planner.repositories.plan_template_repository import PlanTemplateRepository
from studio_planner.services.allocation import AllocationService
from studio_planner.services.base import BaseService

logger = get_logger(__name__)


@dataclass
class ReconciliationReport:
    executions_checked: int = 0
    allocations_marked_executed: int = 0
    templates_usage_corrected: int = 0

    @property
    def repaired(self) -> bool:
        return bool(self.allocations_marked_executed or self.templates_usage_corrected)


class ReconciliationService(BaseService):
    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self._executions = ExecutionRepository(session)
        self._allocation_repo = AllocationRepository(session)
        self._templates = PlanTemplateRepository(session)
        self._allocations = AllocationService(session)

    async def reconcile(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> ReconciliationReport:
        self._check_window(start_date, end_date)
        report = ReconciliationReport()

        executions = await self._executions.list_by_date_range(start_date, end_date)
        report.executions_checked = len(executions)
        for execution in executions:
            allocation = await self._allocation_repo.get_scheduled_for_slot_date(
                execution.slot_id, execution.date
            )
            if allocation is not None:
                await self._allocations.mark_executed(allocation.id, execution.id)
                report.allocations_marked_executed += 1

        # Usage is compared against the full history, not just the window
        usage = await self._executions.usage_by_template()
        templates = await self._templates.list_by_ids(list(usage))
        for template in templates:
            count, latest = usage[template.id]
            updates = {}
            if (template.usage_count or 0) < count:
                updates["usage_count"] = count
            if latest is not None and (template.last_used_at is None or template.last_used_at < latest):
                updates["last_used_at"] = latest
            if updates:
                await self._templates.update(template.id, updates)
                report.templates_usage_corrected += 1
                logger.info("template_usage_reconciled", template_id=template.id, **{
                    key: str(value) for key, value in updates.items()
                })

        track_reconciliation_repair("allocation", report.allocations_marked_executed)
        track_reconciliation_repair("template_usage", report.templates_usage_corrected)
        logger.info(
            "reconciliation_completed",
            executions_checked=report.executions_checked,
            allocations_marked_executed=report.allocations_marked_executed,
            templates_usage_corrected=report.templates_usage_corrected,
        )
        return report
