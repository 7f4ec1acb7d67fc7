"""Exercise catalog model."""
from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, Enum as SAEnum, Index, String

from studio_planner.db.database import Base
from studio_planner.models.enums import (
    BodyRegion,
    BreathingCue,
    DifficultyLevel,
    ExerciseCategory,
)


def enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class Exercise(Base):
    """A single catalog entry: posture, breathing technique, flow, etc.

    Compound flows reference their steps through ``child_sequence``, an ordered
    list of other exercise ids. Plan templates and executions refer to
    exercises by id only.
    """
    __tablename__ = "exercises"

    id = Column(String(50), primary_key=True)
    name = Column(String(200), nullable=False)
    alternate_name = Column(String(200), nullable=True)
    category = Column(
        SAEnum(ExerciseCategory, native_enum=False, length=40, values_callable=enum_values),
        nullable=False,
    )
    difficulty = Column(
        SAEnum(DifficultyLevel, native_enum=False, length=20, values_callable=enum_values),
        nullable=False,
        default=DifficultyLevel.BEGINNER,
    )

    # Controlled vocabulary (BodyRegion values)
    primary_regions = Column(JSON, nullable=False, default=list)
    secondary_regions = Column(JSON, nullable=False, default=list)

    # Free-form tags
    benefits = Column(JSON, nullable=False, default=list)
    contraindications = Column(JSON, nullable=True)

    breathing_cue = Column(
        SAEnum(BreathingCue, native_enum=False, length=20, values_callable=enum_values),
        nullable=True,
    )
    child_sequence = Column(JSON, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_exercises_category", "category"),
        Index("ix_exercises_is_active", "is_active"),
    )

    def __repr__(self):
        return f"<Exercise(id={self.id}, name={self.name!r}, category={self.category})>"

    @property
    def is_compound(self) -> bool:
        return self.category == ExerciseCategory.COMPOUND_FLOW

    @property
    def primary_region_tags(self) -> list[BodyRegion]:
        return [BodyRegion(r) for r in (self.primary_regions or [])]

    @property
    def secondary_region_tags(self) -> list[BodyRegion]:
        return [BodyRegion(r) for r in (self.secondary_regions or [])]
