"""Tests for recording executions and keeping them immutable."""
from datetime import date
from unittest.mock import AsyncMock

import pytest

from conftest import FakeAttendance
from studio_planner.core.exceptions import DuplicateExecutionError, ImmutableEntityError, NotFoundError
from studio_planner.models.enums import AllocationStatus, BodyRegion, SectionType
from studio_planner.schemas.plan_template import PlanTemplateUpdate, SectionItem, TemplateSection
from studio_planner.services.allocation import AllocationService
from studio_planner.services.execution import ExecutionService
from studio_planner.services.plan_template import PlanTemplateService

DAY = date(2026, 3, 2)
SLOT = "slot-morning"
MEMBERS = [f"member-{n}" for n in range(1, 8)]


@pytest.fixture
def attendance() -> FakeAttendance:
    # Scanner double-reads are common; member-3 appears twice
    return FakeAttendance({(SLOT, DAY): MEMBERS[:3] + ["member-3"] + MEMBERS[3:]})


@pytest.mark.asyncio
async def test_record_links_attendance_and_allocation(async_db_session, template, attendance):
    allocations = AllocationService(async_db_session)
    allocation = await allocations.allocate(template.id, SLOT, DAY)
    service = ExecutionService(async_db_session, attendance)

    execution = await service.record(template.id, SLOT, DAY, instructor="Asha")

    assert execution.attendee_count == 7
    assert list(execution.attendees) == MEMBERS
    assert execution.template_name == "Morning Flow"
    assert attendance.calls == [(SLOT, DAY)]

    await async_db_session.refresh(allocation)
    assert allocation.status == AllocationStatus.EXECUTED
    assert allocation.execution_id == execution.id

    await async_db_session.refresh(template)
    assert template.usage_count == 1
    assert template.last_used_at is not None


@pytest.mark.asyncio
async def test_record_without_allocation(async_db_session, template, attendance):
    service = ExecutionService(async_db_session, attendance)

    execution = await service.record(template.id, SLOT, DAY)

    assert execution.id
    assert await AllocationService(async_db_session).get_active_for_slot_date(SLOT, DAY) is None


@pytest.mark.asyncio
async def test_record_unknown_template(async_db_session, catalog, attendance):
    service = ExecutionService(async_db_session, attendance)

    with pytest.raises(NotFoundError):
        await service.record("missing", SLOT, DAY)


@pytest.mark.asyncio
async def test_second_record_for_slot_date_rejected(async_db_session, template, attendance):
    service = ExecutionService(async_db_session, attendance)
    await service.record(template.id, SLOT, DAY)

    with pytest.raises(DuplicateExecutionError):
        await service.record(template.id, SLOT, DAY)

    assert len(await service.list_by_date(DAY)) == 1


@pytest.mark.asyncio
async def test_unique_constraint_catches_race(async_db_session, template, attendance):
    service = ExecutionService(async_db_session, attendance)
    first = await service.record(template.id, SLOT, DAY)
    service._repo.get_for_slot_date = AsyncMock(return_value=None)

    with pytest.raises(DuplicateExecutionError):
        await service.record(template.id, SLOT, DAY)

    assert (await service.get(first.id)).id == first.id


@pytest.mark.asyncio
async def test_snapshot_survives_template_edit(async_db_session, template, attendance):
    service = ExecutionService(async_db_session, attendance)
    execution = await service.record(template.id, SLOT, DAY)
    before = execution.snapshot

    await PlanTemplateService(async_db_session).update(
        template.id,
        PlanTemplateUpdate(
            sections=[
                TemplateSection(
                    section_type=SectionType.WARM_UP,
                    items=[SectionItem(exercise_id="shavasana")],
                )
            ]
        ),
    )
    reloaded = await service.get(execution.id)

    assert reloaded.snapshot == before
    assert reloaded.snapshot.exercise_ids == [
        "tadasana",
        "bhujangasana",
        "trikonasana",
        "anulom_vilom",
        "shavasana",
    ]


@pytest.mark.asyncio
async def test_snapshot_captures_catalog_tags(async_db_session, template, attendance, catalog):
    service = ExecutionService(async_db_session, attendance)
    execution = await service.record(template.id, SLOT, DAY)

    catalog["tadasana"].primary_regions = ["feet"]
    await async_db_session.flush()

    first_item = next((await service.get(execution.id)).snapshot.iter_items())
    assert first_item.exercise_id == "tadasana"
    assert first_item.primary_regions == (BodyRegion.SPINE,)
    assert first_item.benefits == ("posture", "balance")


@pytest.mark.asyncio
async def test_update_and_delete_always_rejected(async_db_session, template, attendance):
    service = ExecutionService(async_db_session, attendance)
    execution = await service.record(template.id, SLOT, DAY)

    with pytest.raises(ImmutableEntityError):
        await service.update(execution.id, notes="changed")
    with pytest.raises(ImmutableEntityError):
        await service.delete(execution.id)


@pytest.mark.asyncio
async def test_orm_update_rejected(async_db_session, template, attendance):
    service = ExecutionService(async_db_session, attendance)
    execution = await service.record(template.id, SLOT, DAY)

    execution.notes = "rewritten"
    with pytest.raises(ImmutableEntityError):
        await async_db_session.flush()


@pytest.mark.asyncio
async def test_orm_delete_rejected(async_db_session, template, attendance):
    service = ExecutionService(async_db_session, attendance)
    execution = await service.record(template.id, SLOT, DAY)

    await async_db_session.delete(execution)
    with pytest.raises(ImmutableEntityError):
        await async_db_session.flush()


@pytest.mark.asyncio
async def test_usage_failure_does_not_undo_execution(async_db_session, template, attendance):
    service = ExecutionService(async_db_session, attendance)
    service._templates.record_usage = AsyncMock(side_effect=RuntimeError("db hiccup"))

    execution = await service.record(template.id, SLOT, DAY)

    assert (await service.get_for_slot_date(SLOT, DAY)).id == execution.id
    await async_db_session.refresh(template)
    assert template.usage_count == 0


@pytest.mark.asyncio
async def test_allocation_failure_does_not_undo_execution(async_db_session, template, attendance):
    allocation = await AllocationService(async_db_session).allocate(template.id, SLOT, DAY)
    service = ExecutionService(async_db_session, attendance)
    service._allocations.mark_executed = AsyncMock(side_effect=RuntimeError("lock timeout"))

    execution = await service.record(template.id, SLOT, DAY)

    assert execution.id
    await async_db_session.refresh(allocation)
    assert allocation.status == AllocationStatus.SCHEDULED


@pytest.mark.asyncio
async def test_lookups(async_db_session, template):
    attendance = FakeAttendance({
        ("slot-a", date(2026, 3, 1)): ["m-1", "m-2"],
        ("slot-b", date(2026, 3, 1)): ["m-2"],
        ("slot-a", date(2026, 3, 3)): ["m-1"],
    })
    service = ExecutionService(async_db_session, attendance)
    first = await service.record(template.id, "slot-a", date(2026, 3, 1))
    second = await service.record(template.id, "slot-b", date(2026, 3, 1))
    third = await service.record(template.id, "slot-a", date(2026, 3, 3))

    assert {e.id for e in await service.list_by_date(date(2026, 3, 1))} == {first.id, second.id}
    assert [e.id for e in await service.list_by_date_range(slot_id="slot-a")] == [first.id, third.id]
    assert len(await service.list_by_template(template.id)) == 3
    assert (await service.list_recent(1))[0].id == third.id
    assert [e.id for e in await service.list_for_member("m-1")] == [first.id, third.id]
    assert {e.id for e in await service.list_for_member("m-2", end_date=date(2026, 3, 2))} == {
        first.id,
        second.id,
    }


def test_attendance_provider_is_required(async_db_session):
    with pytest.raises(TypeError):
        ExecutionService(async_db_session)
