"""Usage and analytics report schemas."""
from pydantic import BaseModel

from studio_planner.models.enums import BodyRegion, DifficultyLevel


class OveruseWarning(BaseModel):
    template_id: str
    is_overused: bool
    reason: str | None = None
    days_since_last_use: int | None = None
    recent_use_count: int | None = None


class ExerciseUsageEntry(BaseModel):
    exercise_id: str
    label: str
    count: int
    avg_duration_minutes: float | None = None


class BodyRegionFocusEntry(BaseModel):
    region: BodyRegion
    label: str
    primary_count: int
    secondary_count: int
    count: int
    percentage: int


class BenefitCoverageEntry(BaseModel):
    label: str
    count: int


class PlanEffectivenessEntry(BaseModel):
    template_id: str
    label: str
    level: DifficultyLevel
    count: int
    total_attendees: int
    avg_attendees: float
    days_since_last_use: int | None
    dominant_body_regions: list[BodyRegion]


class ReconciliationResponse(BaseModel):
    executions_checked: int
    allocations_marked_executed: int
    templates_usage_corrected: int
