"""Execution request/response schemas."""
from datetime import date, datetime

from pydantic import BaseModel, Field

from studio_planner.models.enums import DifficultyLevel
from studio_planner.schemas.snapshot import SnapshotSection


class ExecutionCreate(BaseModel):
    template_id: str = Field(..., min_length=1)
    slot_id: str = Field(..., min_length=1)
    date: date
    instructor: str | None = None
    notes: str | None = None


class ExecutionResponse(BaseModel):
    id: str
    template_id: str
    template_name: str
    template_level: DifficultyLevel
    snapshot: list[SnapshotSection]
    slot_id: str
    date: date
    instructor: str | None
    notes: str | None
    member_ids: list[str]
    attendee_count: int
    created_at: datetime

    @classmethod
    def from_execution(cls, execution) -> "ExecutionResponse":
        return cls(
            id=execution.id,
            template_id=execution.template_id,
            template_name=execution.template_name,
            template_level=execution.template_level,
            snapshot=list(execution.snapshot.sections),
            slot_id=execution.slot_id,
            date=execution.date,
            instructor=execution.instructor,
            notes=execution.notes,
            member_ids=list(execution.attendees),
            attendee_count=execution.attendee_count,
            created_at=execution.created_at,
        )
