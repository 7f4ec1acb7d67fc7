"""Tests for the overuse warning heuristic."""
from datetime import date, datetime, timedelta

import pytest

from studio_planner.config.settings import Settings
from studio_planner.core.exceptions import NotFoundError
from studio_planner.models.execution import Execution
import studio_planner.services.usage as usage_module
from studio_planner.services.plan_template import PlanTemplateService
from studio_planner.services.usage import UsageService, describe_recency

TODAY = date(2026, 3, 30)


async def _add_executions(session, template, days_ago: list[int]):
    for n, offset in enumerate(days_ago):
        session.add(
            Execution(
                template_id=template.id,
                template_name=template.name,
                template_level=template.level,
                sections_snapshot=[],
                slot_id=f"slot-{n}",
                date=TODAY - timedelta(days=offset),
                member_ids=[],
                attendee_count=0,
            )
        )
    await session.flush()


def _used(days_ago: int) -> datetime:
    return datetime.combine(TODAY - timedelta(days=days_ago), datetime.min.time()).replace(hour=8)


@pytest.mark.parametrize(
    "days, expected",
    [(0, "Used today"), (1, "Used 1 day ago"), (3, "Used 3 days ago")],
)
def test_describe_recency(days, expected):
    assert describe_recency(days) == expected


@pytest.mark.asyncio
async def test_unused_template_is_not_overused(async_db_session, template):
    warning = await UsageService(async_db_session).get_overuse_warning(template.id, TODAY)

    assert warning.is_overused is False
    assert warning.reason is None
    assert warning.days_since_last_use is None
    assert warning.recent_use_count == 0


@pytest.mark.asyncio
async def test_used_today(async_db_session, template):
    template.last_used_at = _used(0)
    await async_db_session.flush()

    warning = await UsageService(async_db_session).get_overuse_warning(template.id, TODAY)

    assert warning.is_overused is True
    assert "today" in warning.reason
    assert warning.days_since_last_use == 0


@pytest.mark.asyncio
async def test_used_within_recent_days(async_db_session, template):
    template.last_used_at = _used(2)
    await async_db_session.flush()

    warning = await UsageService(async_db_session).get_overuse_warning(template.id, TODAY)

    assert warning.is_overused is True
    assert warning.reason == "Used 2 days ago"


@pytest.mark.asyncio
async def test_frequent_use_in_window(async_db_session, template):
    template.last_used_at = _used(5)
    await _add_executions(async_db_session, template, [5, 8, 12, 20, 27])

    warning = await UsageService(async_db_session).get_overuse_warning(template.id, TODAY)

    assert warning.is_overused is True
    assert warning.recent_use_count == 5
    assert "5" in warning.reason
    assert warning.days_since_last_use == 5


@pytest.mark.asyncio
async def test_long_unused_with_single_recent_execution(async_db_session, template):
    template.last_used_at = _used(40)
    await _add_executions(async_db_session, template, [25])

    warning = await UsageService(async_db_session).get_overuse_warning(template.id, TODAY)

    assert warning.is_overused is False
    assert warning.recent_use_count == 1
    assert warning.days_since_last_use == 40


@pytest.mark.asyncio
async def test_executions_outside_window_are_ignored(async_db_session, template):
    await _add_executions(async_db_session, template, [31, 35, 40, 45, 50])

    warning = await UsageService(async_db_session).get_overuse_warning(template.id, TODAY)

    assert warning.is_overused is False
    assert warning.recent_use_count == 0


@pytest.mark.asyncio
async def test_thresholds_come_from_settings(async_db_session, template):
    await _add_executions(async_db_session, template, [1, 2])
    settings = Settings(overuse_window_max_uses=2)

    warning = await UsageService(async_db_session, settings).get_overuse_warning(template.id, TODAY)

    assert warning.is_overused is True
    assert warning.recent_use_count == 2


@pytest.mark.asyncio
async def test_unknown_template(async_db_session, catalog):
    with pytest.raises(NotFoundError):
        await UsageService(async_db_session).get_overuse_warning("missing", TODAY)


@pytest.mark.asyncio
@pytest.mark.parametrize("days_ago, overused", [(3, True), (4, False)])
async def test_recency_boundary(async_db_session, template, days_ago, overused):
    template.last_used_at = _used(days_ago)
    await async_db_session.flush()

    warning = await UsageService(async_db_session).get_overuse_warning(template.id, TODAY)

    assert warning.is_overused is overused
    assert warning.days_since_last_use == days_ago
    if overused:
        assert warning.reason == "Used 3 days ago"


class _LateEveningUtc(datetime):
    """Clock fixed at 20:00 UTC, already the next day east of UTC."""

    @classmethod
    def utcnow(cls):
        return datetime(2026, 10, 16, 20, 0)


@pytest.mark.asyncio
async def test_default_today_follows_usage_clock(async_db_session, template, monkeypatch):
    await PlanTemplateService(async_db_session).record_usage(template.id, datetime(2026, 10, 16, 20, 0))
    await async_db_session.refresh(template)
    monkeypatch.setattr(usage_module, "datetime", _LateEveningUtc)

    warning = await UsageService(async_db_session).get_overuse_warning(template.id)

    assert warning.is_overused is True
    assert warning.days_since_last_use == 0
    assert "today" in warning.reason
