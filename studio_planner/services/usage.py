"""
UsageService - warns schedulers against repeating a template too often.

Two independent checks, evaluated in order:
- recency: the template was last used within ``overuse_recent_days``
- frequency: it was executed ``overuse_window_max_uses`` times or more in the
  trailing ``overuse_window_days``
"""
from datetime import date, datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from studio_planner.config.settings import Settings, get_settings
from studio_planner.core.logging import get_logger
from studio_planner.models.plan_template import PlanTemplate
from studio_planner.repositories.execution_repository import ExecutionRepository
from studio_planner.schemas.analytics import OveruseWarning
from studio_planner.services.base import BaseService

logger = get_logger(__name__)


def describe_recency(days: int) -> str:
    if days == 0:
        return "Used today"
    return f"Used {days} day{'s' if days != 1 else ''} ago"


class UsageService(BaseService):
    def __init__(self, session: AsyncSession, settings: Settings | None = None):
        super().__init__(session)
        self._executions = ExecutionRepository(session)
        self._settings = settings or get_settings()

    async def get_overuse_warning(self, template_id: str, today: date | None = None) -> OveruseWarning:
        template = await self._get_or_404(PlanTemplate, template_id, f"Plan template {template_id} not found")
        # Same clock as last_used_at (naive UTC)
        today = today or datetime.utcnow().date()

        days_since = None
        if template.last_used_at is not None:
            days_since = max((today - template.last_used_at.date()).days, 0)
            if days_since <= self._settings.overuse_recent_days:
                return OveruseWarning(
                    template_id=template_id,
                    is_overused=True,
                    reason=describe_recency(days_since),
                    days_since_last_use=days_since,
                )

        window_start = today - timedelta(days=self._settings.overuse_window_days)
        recent_uses = await self._executions.count_for_template(template_id, window_start, today)
        if recent_uses >= self._settings.overuse_window_max_uses:
            logger.debug("template_overused", template_id=template_id, recent_uses=recent_uses)
            return OveruseWarning(
                template_id=template_id,
                is_overused=True,
                reason=(
                    f"Used {recent_uses} times in the last "
                    f"{self._settings.overuse_window_days} days"
                ),
                days_since_last_use=days_since,
                recent_use_count=recent_uses,
            )

        return OveruseWarning(
            template_id=template_id,
            is_overused=False,
            days_since_last_use=days_since,
            recent_use_count=recent_uses,
        )
