"""
AnalyticsService - reports derived only from execution snapshots.

Reports never read live template content. Exercise ids are resolved against
the current catalog purely for display; ids the catalog no longer has render
as ``unknown/deleted``. Rankings are by count descending, with ties kept in
the order entries were first encountered.
"""
import math
from collections import Counter, defaultdict
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from studio_planner.config.settings import get_settings
from studio_planner.core.logging import get_logger
from studio_planner.models.enums import BodyRegion
from studio_planner.models.execution import Execution
from studio_planner.repositories.execution_repository import ExecutionRepository
from studio_planner.schemas.analytics import (
    BenefitCoverageEntry,
    BodyRegionFocusEntry,
    ExerciseUsageEntry,
    PlanEffectivenessEntry,
)
from studio_planner.services.base import BaseService
from studio_planner.services.exercise_catalog import ExerciseCatalogService, label_for

logger = get_logger(__name__)


def _percentage(count: int, total: int) -> int:
    """Half-up rounding to a whole percent."""
    if not total:
        return 0
    return math.floor(count * 100 / total + 0.5)


def _ranked(counts: Counter) -> list:
    # most_common keeps insertion order among equal counts
    return counts.most_common()


class AnalyticsService(BaseService):
    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self._executions = ExecutionRepository(session)
        self._catalog = ExerciseCatalogService(session)

    async def _load(
        self,
        start_date: date | None,
        end_date: date | None,
        slot_id: str | None,
    ) -> list[Execution]:
        self._check_window(start_date, end_date)
        executions = await self._executions.list_by_date_range(start_date, end_date, slot_id)
        logger.debug(
            "analytics_window_loaded",
            start_date=str(start_date) if start_date else None,
            end_date=str(end_date) if end_date else None,
            slot_id=slot_id,
            executions=len(executions),
        )
        return executions

    async def exercise_usage_report(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        slot_id: str | None = None,
    ) -> list[ExerciseUsageEntry]:
        """How often each exercise was practiced, with its average duration."""
        executions = await self._load(start_date, end_date, slot_id)

        counts: Counter[str] = Counter()
        durations: dict[str, list[float]] = defaultdict(list)
        for execution in executions:
            for item in execution.snapshot.iter_items():
                counts[item.exercise_id] += 1
                if item.duration_minutes is not None:
                    durations[item.exercise_id].append(item.duration_minutes)

        catalog = await self._catalog.get_many(counts.keys())
        return [
            ExerciseUsageEntry(
                exercise_id=exercise_id,
                label=label_for(exercise_id, catalog),
                count=count,
                avg_duration_minutes=(
                    round(sum(durations[exercise_id]) / len(durations[exercise_id]), 1)
                    if durations[exercise_id] else None
                ),
            )
            for exercise_id, count in _ranked(counts)
        ]

    async def body_region_focus_report(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        slot_id: str | None = None,
    ) -> list[BodyRegionFocusEntry]:
        """Share of all region tags, primary and secondary, in the window."""
        executions = await self._load(start_date, end_date, slot_id)

        primary: Counter[BodyRegion] = Counter()
        secondary: Counter[BodyRegion] = Counter()
        combined: Counter[BodyRegion] = Counter()
        for execution in executions:
            for item in execution.snapshot.iter_items():
                primary.update(item.primary_regions)
                combined.update(item.primary_regions)
                secondary.update(item.secondary_regions)
                combined.update(item.secondary_regions)

        total = sum(combined.values())
        return [
            BodyRegionFocusEntry(
                region=region,
                label=region.label,
                primary_count=primary[region],
                secondary_count=secondary[region],
                count=count,
                percentage=_percentage(count, total),
            )
            for region, count in _ranked(combined)
        ]

    async def benefit_coverage_report(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        slot_id: str | None = None,
    ) -> list[BenefitCoverageEntry]:
        """Number of sessions that touched each benefit."""
        executions = await self._load(start_date, end_date, slot_id)

        counts: Counter[str] = Counter()
        for execution in executions:
            benefits = dict.fromkeys(
                benefit for item in execution.snapshot.iter_items() for benefit in item.benefits
            )
            counts.update(benefits.keys())

        return [BenefitCoverageEntry(label=benefit, count=count) for benefit, count in _ranked(counts)]

    async def plan_effectiveness_report(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        slot_id: str | None = None,
        today: date | None = None,
    ) -> list[PlanEffectivenessEntry]:
        """Per-template attendance and focus, from the executions in the window."""
        executions = await self._load(start_date, end_date, slot_id)
        today = today or date.today()
        top_n = get_settings().dominant_regions_top_n

        by_template: dict[str, list[Execution]] = {}
        for execution in executions:
            by_template.setdefault(execution.template_id, []).append(execution)

        entries = []
        for template_id, runs in by_template.items():
            latest = max(runs, key=lambda e: (e.date, e.created_at))
            regions: Counter[BodyRegion] = Counter()
            for execution in runs:
                for item in execution.snapshot.iter_items():
                    regions.update(item.primary_regions)
                    regions.update(item.secondary_regions)

            total_attendees = sum(execution.attendee_count for execution in runs)
            entries.append(
                PlanEffectivenessEntry(
                    template_id=template_id,
                    label=latest.template_name,
                    level=latest.template_level,
                    count=len(runs),
                    total_attendees=total_attendees,
                    avg_attendees=round(total_attendees / len(runs), 1),
                    days_since_last_use=(today - latest.date).days,
                    dominant_body_regions=[region for region, _ in regions.most_common(top_n)],
                )
            )

        # ties keep first-execution order
        return sorted(entries, key=lambda entry: entry.count, reverse=True)
