"""Frozen value types for the content captured in an execution record."""
from collections.abc import Iterator, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from studio_planner.models.enums import BodyRegion, IntensityLevel, SectionType


class SnapshotItem(BaseModel):
    """One practiced exercise, with the catalog tags it carried at record time."""
    model_config = ConfigDict(frozen=True)

    exercise_id: str
    order: int = Field(ge=1)
    intensity: IntensityLevel | None = None
    notes: str | None = None
    reps: int | None = None
    duration_minutes: float | None = None
    primary_regions: tuple[BodyRegion, ...] = ()
    secondary_regions: tuple[BodyRegion, ...] = ()
    benefits: tuple[str, ...] = ()


class SnapshotSection(BaseModel):
    model_config = ConfigDict(frozen=True)

    section_type: SectionType
    order: int
    items: tuple[SnapshotItem, ...] = ()


class ExecutionSnapshot(BaseModel):
    """Structurally independent copy of a template's sections.

    Built from plain data at record time and re-parsed from storage on every
    read, so no caller ever holds a reference into the stored JSON.
    """
    model_config = ConfigDict(frozen=True)

    sections: tuple[SnapshotSection, ...] = ()

    @classmethod
    def capture(
        cls,
        template_sections: list[dict[str, Any]],
        catalog: Mapping[str, Any],
    ) -> "ExecutionSnapshot":
        """Copy template sections, enriching each item with catalog tags.

        Exercises missing from ``catalog`` are captured without tags.
        """
        sections = []
        for section in sorted(template_sections, key=lambda s: s.get("order", 0)):
            items = []
            for item in sorted(section.get("items", []), key=lambda i: i.get("order", 0)):
                exercise = catalog.get(item["exercise_id"])
                items.append(
                    SnapshotItem(
                        exercise_id=item["exercise_id"],
                        order=item["order"],
                        intensity=item.get("intensity"),
                        notes=item.get("notes"),
                        reps=item.get("reps"),
                        duration_minutes=item.get("duration_minutes"),
                        primary_regions=tuple(exercise.primary_regions or ()) if exercise else (),
                        secondary_regions=tuple(exercise.secondary_regions or ()) if exercise else (),
                        benefits=tuple(exercise.benefits or ()) if exercise else (),
                    )
                )
            sections.append(
                SnapshotSection(
                    section_type=section["section_type"],
                    order=section.get("order", SectionType(section["section_type"]).display_order),
                    items=tuple(items),
                )
            )
        return cls(sections=tuple(sections))

    @classmethod
    def from_storage(cls, data: list[dict[str, Any]] | None) -> "ExecutionSnapshot":
        return cls.model_validate({"sections": data or []})

    def to_storage(self) -> list[dict[str, Any]]:
        return self.model_dump(mode="json")["sections"]

    def iter_items(self) -> Iterator[SnapshotItem]:
        for section in self.sections:
            yield from section.items

    @property
    def exercise_ids(self) -> list[str]:
        return [item.exercise_id for item in self.iter_items()]
