"""Allocation request/response schemas."""
from dataclasses import dataclass, field
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from studio_planner.models.allocation import Allocation
from studio_planner.models.enums import AllocationStatus


class AllocationCreate(BaseModel):
    template_id: str = Field(..., min_length=1)
    slot_id: str = Field(..., min_length=1)
    date: date
    assigned_by: str | None = None


class AllSlotsAllocationCreate(BaseModel):
    template_id: str = Field(..., min_length=1)
    date: date
    assigned_by: str | None = None


class AllocationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    template_id: str
    slot_id: str
    date: date
    assigned_by: str | None
    status: AllocationStatus
    execution_id: str | None
    created_at: datetime
    updated_at: datetime


class BatchAllocationResponse(BaseModel):
    created: list[AllocationResponse]
    skipped: list[str]
    is_complete: bool


@dataclass
class BatchAllocationResult:
    """Outcome of scheduling one template across every active slot.

    ``skipped`` lists slot ids that already held a non-cancelled allocation.
    Callers must inspect it; an empty list means the batch fully applied.
    """
    created: list[Allocation] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.skipped

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)
