"""Plan template request/response schemas."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from studio_planner.models.enums import BodyRegion, DifficultyLevel, IntensityLevel, SectionType


class SectionItem(BaseModel):
    exercise_id: str = Field(..., min_length=1)
    order: int | None = Field(default=None, ge=1, description="Position within the section; renumbered densely on save")
    intensity: IntensityLevel | None = None
    notes: str | None = None
    reps: int | None = Field(default=None, ge=1)
    duration_minutes: float | None = Field(default=None, gt=0)


class TemplateSection(BaseModel):
    section_type: SectionType
    items: list[SectionItem] = Field(default_factory=list)


class PlanTemplateCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    guidance_note: str | None = None
    level: DifficultyLevel = DifficultyLevel.INTERMEDIATE
    sections: list[TemplateSection] = Field(default_factory=list)
    created_by: str | None = None


class PlanTemplateUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    guidance_note: str | None = None
    level: DifficultyLevel | None = None
    sections: list[TemplateSection] | None = None
    is_active: bool | None = None
    expected_version: int | None = Field(
        default=None,
        ge=1,
        description="Version the caller last read; a mismatch rejects the write",
    )


class TemplateCloneRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)


class ItemInsertRequest(BaseModel):
    section_type: SectionType
    item: SectionItem
    position: int | None = Field(default=None, ge=1, description="1-based insert position; appends when omitted")
    expected_version: int | None = Field(default=None, ge=1)


class ItemMoveRequest(BaseModel):
    from_order: int = Field(..., ge=1)
    to_order: int = Field(..., ge=1)
    expected_version: int | None = Field(default=None, ge=1)


class SectionItemResponse(BaseModel):
    exercise_id: str
    order: int
    intensity: IntensityLevel | None = None
    notes: str | None = None
    reps: int | None = None
    duration_minutes: float | None = None


class TemplateSectionResponse(BaseModel):
    section_type: SectionType
    order: int
    items: list[SectionItemResponse]


class PlanTemplateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    guidance_note: str | None
    level: DifficultyLevel
    version: int
    sections: list[TemplateSectionResponse]
    created_by: str | None
    last_used_at: datetime | None
    usage_count: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class RegionTally(BaseModel):
    region: BodyRegion
    label: str
    count: int


class BenefitTally(BaseModel):
    benefit: str
    count: int


class TemplateInsights(BaseModel):
    template_id: str
    dominant_body_regions: list[RegionTally]
    top_benefits: list[BenefitTally]
