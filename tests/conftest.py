"""Shared fixtures: in-memory database, fake collaborators and a seeded catalog."""
import os

os.environ.setdefault("PLANNER_DATABASE_URL", "sqlite+aiosqlite://")

from datetime import date

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from studio_planner.db.database import Base, enable_sqlite_savepoints
from studio_planner.integrations.base import AttendanceProvider, SlotRegistry
from studio_planner.models import Exercise, ExerciseCategory, SectionType
from studio_planner.schemas.plan_template import PlanTemplateCreate, SectionItem, TemplateSection
from studio_planner.services.plan_template import PlanTemplateService


class FakeAttendance(AttendanceProvider):
    def __init__(self, present: dict[tuple[str, date], list[str]] | None = None):
        self.present = present or {}
        self.calls: list[tuple[str, date]] = []

    async def get_present_members(self, slot_id: str, on_date: date) -> list[str]:
        self.calls.append((slot_id, on_date))
        return list(self.present.get((slot_id, on_date), []))


class FakeSlotRegistry(SlotRegistry):
    def __init__(self, slots: list[str]):
        self.slots = slots

    async def get_active_slots(self) -> list[str]:
        return list(self.slots)


@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_savepoints(engine)

    import studio_planner.models  # noqa: F401
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def async_db_session(db_engine) -> AsyncSession:
    session_maker = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session


@pytest.fixture
def attendance() -> FakeAttendance:
    return FakeAttendance()


@pytest.fixture
def slot_registry() -> FakeSlotRegistry:
    return FakeSlotRegistry(["slot-morning", "slot-noon", "slot-evening"])


@pytest_asyncio.fixture
async def catalog(async_db_session: AsyncSession) -> dict[str, Exercise]:
    """Five exercises covering postures, breathing and relaxation."""
    exercises = [
        Exercise(
            id="tadasana",
            name="Mountain Pose",
            category=ExerciseCategory.POSTURE,
            primary_regions=["spine"],
            secondary_regions=["ankles"],
            benefits=["posture", "balance"],
        ),
        Exercise(
            id="bhujangasana",
            name="Cobra Pose",
            category=ExerciseCategory.POSTURE,
            primary_regions=["spine", "lower_back"],
            secondary_regions=["chest", "shoulders"],
            benefits=["flexibility", "posture"],
        ),
        Exercise(
            id="trikonasana",
            name="Triangle Pose",
            category=ExerciseCategory.POSTURE,
            primary_regions=["hips", "hamstrings"],
            secondary_regions=["spine"],
            benefits=["flexibility", "balance"],
        ),
        Exercise(
            id="anulom_vilom",
            name="Alternate Nostril Breathing",
            category=ExerciseCategory.BREATHING_TECHNIQUE,
            primary_regions=["respiratory"],
            secondary_regions=["nervous_system"],
            benefits=["calm", "lung capacity"],
        ),
        Exercise(
            id="shavasana",
            name="Corpse Pose",
            category=ExerciseCategory.RELAXATION,
            primary_regions=["nervous_system"],
            secondary_regions=[],
            benefits=["calm", "recovery"],
        ),
    ]
    async_db_session.add_all(exercises)
    await async_db_session.flush()
    return {exercise.id: exercise for exercise in exercises}


def morning_flow_request(name: str = "Morning Flow") -> PlanTemplateCreate:
    return PlanTemplateCreate(
        name=name,
        guidance_note="Keep the breath slow",
        sections=[
            TemplateSection(
                section_type=SectionType.RELAXATION,
                items=[SectionItem(exercise_id="shavasana", duration_minutes=10)],
            ),
            TemplateSection(
                section_type=SectionType.WARM_UP,
                items=[SectionItem(exercise_id="tadasana")],
            ),
            TemplateSection(
                section_type=SectionType.MAIN_SEQUENCE,
                items=[
                    SectionItem(exercise_id="bhujangasana", duration_minutes=2),
                    SectionItem(exercise_id="trikonasana", duration_minutes=3),
                ],
            ),
            TemplateSection(
                section_type=SectionType.BREATHING,
                items=[SectionItem(exercise_id="anulom_vilom", duration_minutes=5)],
            ),
        ],
    )


@pytest_asyncio.fixture
async def template(async_db_session: AsyncSession, catalog):
    return await PlanTemplateService(async_db_session).create(morning_flow_request())
