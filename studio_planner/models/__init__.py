"""ORM models."""
from studio_planner.models.allocation import Allocation
from studio_planner.models.enums import (
    AllocationStatus,
    BodyRegion,
    BreathingCue,
    DifficultyLevel,
    ExerciseCategory,
    IntensityLevel,
    SectionType,
)
from studio_planner.models.execution import Execution
from studio_planner.models.exercise import Exercise
from studio_planner.models.plan_template import PlanTemplate

__all__ = [
    "Allocation",
    "AllocationStatus",
    "BodyRegion",
    "BreathingCue",
    "DifficultyLevel",
    "Exercise",
    "ExerciseCategory",
    "Execution",
    "IntensityLevel",
    "PlanTemplate",
    "SectionType",
]
