"""Exercise catalog schemas."""
from pydantic import BaseModel, ConfigDict, Field

from studio_planner.models.enums import (
    BodyRegion,
    BreathingCue,
    DifficultyLevel,
    ExerciseCategory,
)


class ExerciseCreate(BaseModel):
    id: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=200)
    alternate_name: str | None = None
    category: ExerciseCategory
    difficulty: DifficultyLevel = DifficultyLevel.BEGINNER
    primary_regions: list[BodyRegion] = Field(default_factory=list)
    secondary_regions: list[BodyRegion] = Field(default_factory=list)
    benefits: list[str] = Field(default_factory=list)
    contraindications: list[str] | None = None
    breathing_cue: BreathingCue | None = None
    child_sequence: list[str] | None = None
    is_active: bool = True


class ExerciseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    alternate_name: str | None
    category: ExerciseCategory
    difficulty: DifficultyLevel
    primary_regions: list[BodyRegion]
    secondary_regions: list[BodyRegion]
    benefits: list[str]
    child_sequence: list[str] | None
    is_active: bool
