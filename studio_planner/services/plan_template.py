"""
PlanTemplateService - authoring and usage bookkeeping for plan templates.

Responsible for:
- Creating, editing, cloning and deactivating templates
- Keeping section items in a dense 1..N order after every edit
- Rejecting edits made against a stale version when the caller supplies one
- Recording usage (count and last-used time) on behalf of the execution recorder
- Deriving dominant body regions and top benefits from the catalog
"""
import copy
from collections import Counter
from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from studio_planner.config.settings import get_settings
from studio_planner.core.exceptions import ConflictError, NotFoundError, ValidationError
from studio_planner.core.logging import get_logger
from studio_planner.models.enums import BodyRegion, DifficultyLevel, SectionType
from studio_planner.models.plan_template import PlanTemplate
from studio_planner.repositories.plan_template_repository import PlanTemplateRepository
from studio_planner.schemas.plan_template import (
    BenefitTally,
    PlanTemplateCreate,
    PlanTemplateUpdate,
    RegionTally,
    SectionItem,
    TemplateSection,
)
from studio_planner.services.base import BaseService
from studio_planner.services.exercise_catalog import ExerciseCatalogService

logger = get_logger(__name__)

COPY_SUFFIX = " (Copy)"

# Columns a partial update may omit but never clear
REQUIRED_FIELDS = ("name", "level", "sections", "is_active")


def _item_to_dict(item: SectionItem, order: int) -> dict[str, Any]:
    data = item.model_dump(mode="json", exclude={"order"})
    data["order"] = order
    return data


def normalize_sections(sections: list[TemplateSection]) -> list[dict[str, Any]]:
    """Convert request sections into the stored JSON shape.

    Sections are placed in their fixed display order and items are renumbered
    1..N, honouring any explicit ``order`` first and input position second.
    """
    seen: set[SectionType] = set()
    for section in sections:
        if section.section_type in seen:
            raise ValidationError(
                "sections",
                f"Section {section.section_type.value} appears more than once",
            )
        seen.add(section.section_type)

    normalized = []
    for section in sorted(sections, key=lambda s: s.section_type.display_order):
        ranked = sorted(
            enumerate(section.items),
            key=lambda pair: (pair[1].order if pair[1].order is not None else float("inf"), pair[0]),
        )
        normalized.append({
            "section_type": section.section_type.value,
            "order": section.section_type.display_order,
            "items": [_item_to_dict(item, position) for position, (_, item) in enumerate(ranked, start=1)],
        })
    return normalized


def _renumber(items: list[dict[str, Any]]) -> None:
    for position, item in enumerate(items, start=1):
        item["order"] = position


def _find_section(sections: list[dict[str, Any]], section_type: SectionType) -> dict[str, Any] | None:
    for section in sections:
        if section["section_type"] == section_type.value:
            return section
    return None


def _sorted_items(section: dict[str, Any]) -> list[dict[str, Any]]:
    return sorted(section.get("items", []), key=lambda i: i["order"])


class PlanTemplateService(BaseService):
    """
    Single authoritative store for plan templates.

    ``version`` starts at 1 and increases with every mutating edit. Callers
    may pass the version they last read; a mismatch raises ConflictError.
    Usage statistics are only ever written by ``record_usage``.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self._repo = PlanTemplateRepository(session)
        self._catalog = ExerciseCatalogService(session)

    async def get(self, template_id: str) -> PlanTemplate:
        return await self._get_or_404(PlanTemplate, template_id, f"Plan template {template_id} not found")

    async def create(self, data: PlanTemplateCreate) -> PlanTemplate:
        sections = normalize_sections(data.sections)
        await self._ensure_exercises_exist(sections)

        template = PlanTemplate(
            name=data.name,
            guidance_note=data.guidance_note,
            level=data.level,
            version=1,
            sections=sections,
            created_by=data.created_by,
            usage_count=0,
            last_used_at=None,
            is_active=True,
        )
        await self._repo.create(template)
        logger.info("template_created", template_id=template.id, name=template.name)
        return template

    async def update(
        self,
        template_id: str,
        data: PlanTemplateUpdate,
        expected_version: int | None = None,
    ) -> PlanTemplate:
        template = await self.get(template_id)
        self._check_version(template, expected_version)

        cleared = [f for f in REQUIRED_FIELDS if f in data.model_fields_set and getattr(data, f) is None]
        if cleared:
            raise ValidationError(cleared[0], "may not be null", {"fields": cleared})

        updates = data.model_dump(exclude_unset=True, exclude={"expected_version", "sections"})
        if data.sections is not None:
            sections = normalize_sections(data.sections)
            await self._ensure_exercises_exist(sections)
            updates["sections"] = sections

        return await self._apply_edit(template, updates)

    async def clone(self, template_id: str, new_name: str | None = None) -> PlanTemplate:
        source = await self.get(template_id)
        clone = PlanTemplate(
            name=new_name or f"{source.name}{COPY_SUFFIX}",
            guidance_note=source.guidance_note,
            level=source.level,
            version=1,
            sections=copy.deepcopy(source.sections or []),
            created_by=source.created_by,
            usage_count=0,
            last_used_at=None,
            is_active=True,
        )
        await self._repo.create(clone)
        logger.info("template_cloned", source_id=source.id, template_id=clone.id)
        return clone

    async def record_usage(self, template_id: str, used_at: datetime | None = None) -> None:
        """Increment usage_count and stamp last_used_at. Does not bump version."""
        updated = await self._repo.increment_usage(template_id, used_at or datetime.utcnow())
        if not updated:
            raise NotFoundError("PlanTemplate", f"Plan template {template_id} not found", {"id": template_id})

    async def add_item(
        self,
        template_id: str,
        section_type: SectionType,
        item: SectionItem,
        position: int | None = None,
        expected_version: int | None = None,
    ) -> PlanTemplate:
        """Insert an item at a 1-based position, creating the section if needed."""
        template = await self.get(template_id)
        self._check_version(template, expected_version)
        await self._ensure_exercises_exist([{"items": [{"exercise_id": item.exercise_id}]}])

        sections = copy.deepcopy(template.sections or [])
        section = _find_section(sections, section_type)
        if section is None:
            section = {"section_type": section_type.value, "order": section_type.display_order, "items": []}
            sections.append(section)
            sections.sort(key=lambda s: s["order"])

        items = _sorted_items(section)
        index = len(items) if position is None else min(position, len(items) + 1) - 1
        items.insert(index, _item_to_dict(item, 0))
        _renumber(items)
        section["items"] = items

        return await self._apply_edit(template, {"sections": sections})

    async def remove_item(
        self,
        template_id: str,
        section_type: SectionType,
        order: int,
        expected_version: int | None = None,
    ) -> PlanTemplate:
        template = await self.get(template_id)
        self._check_version(template, expected_version)

        sections = copy.deepcopy(template.sections or [])
        section = _find_section(sections, section_type)
        items = _sorted_items(section) if section else []
        if not 1 <= order <= len(items):
            raise NotFoundError(
                "SectionItem",
                f"No item at position {order} in {section_type.value}",
                {"template_id": template_id, "section_type": section_type.value, "order": order},
            )

        del items[order - 1]
        _renumber(items)
        section["items"] = items

        return await self._apply_edit(template, {"sections": sections})

    async def move_item(
        self,
        template_id: str,
        section_type: SectionType,
        from_order: int,
        to_order: int,
        expected_version: int | None = None,
    ) -> PlanTemplate:
        template = await self.get(template_id)
        self._check_version(template, expected_version)

        sections = copy.deepcopy(template.sections or [])
        section = _find_section(sections, section_type)
        items = _sorted_items(section) if section else []
        for field_name, value in (("from_order", from_order), ("to_order", to_order)):
            if not 1 <= value <= len(items):
                raise ValidationError(field_name, f"Position {value} is outside 1..{len(items)}")

        items.insert(to_order - 1, items.pop(from_order - 1))
        _renumber(items)
        section["items"] = items

        return await self._apply_edit(template, {"sections": sections})

    async def deactivate(self, template_id: str, expected_version: int | None = None) -> PlanTemplate:
        template = await self.get(template_id)
        self._check_version(template, expected_version)
        return await self._apply_edit(template, {"is_active": False})

    async def list_active(self) -> list[PlanTemplate]:
        return await self._repo.list_active()

    async def list_by_level(self, level: DifficultyLevel) -> list[PlanTemplate]:
        return await self._repo.list_by_level(level)

    async def search(self, text: str) -> list[PlanTemplate]:
        text = text.strip()
        if not text:
            return []
        return await self._repo.search(text)

    async def list_recently_used(self, limit: int | None = None) -> list[PlanTemplate]:
        return await self._repo.list_recently_used(limit or get_settings().recently_used_templates_limit)

    async def list_most_used(self, limit: int | None = None) -> list[PlanTemplate]:
        return await self._repo.list_most_used(limit or get_settings().recently_used_templates_limit)

    async def get_dominant_body_regions(
        self,
        template: PlanTemplate,
        top_n: int | None = None,
    ) -> list[RegionTally]:
        """Most frequent primary and secondary regions across the template's exercises.

        Ties keep the order in which regions were first encountered.
        """
        top_n = top_n or get_settings().dominant_regions_top_n
        catalog = await self._catalog.get_many(item["exercise_id"] for item in template.iter_items())

        tally: Counter[BodyRegion] = Counter()
        for item in template.iter_items():
            exercise = catalog.get(item["exercise_id"])
            if exercise is None:
                continue
            tally.update(exercise.primary_region_tags)
            tally.update(exercise.secondary_region_tags)

        return [
            RegionTally(region=region, label=region.label, count=count)
            for region, count in tally.most_common(top_n)
        ]

    async def get_top_benefits(
        self,
        template: PlanTemplate,
        top_n: int | None = None,
    ) -> list[BenefitTally]:
        top_n = top_n or get_settings().top_benefits_top_n
        catalog = await self._catalog.get_many(item["exercise_id"] for item in template.iter_items())

        tally: Counter[str] = Counter()
        for item in template.iter_items():
            exercise = catalog.get(item["exercise_id"])
            if exercise is not None:
                tally.update(exercise.benefits or [])

        return [BenefitTally(benefit=benefit, count=count) for benefit, count in tally.most_common(top_n)]

    def _check_version(self, template: PlanTemplate, expected_version: int | None) -> None:
        if expected_version is not None and expected_version != template.version:
            logger.warning(
                "template_version_conflict",
                template_id=template.id,
                expected_version=expected_version,
                current_version=template.version,
            )
            raise ConflictError(
                f"Plan template {template.id} was modified (version {template.version}, "
                f"expected {expected_version})",
                code="CF_TEMPLATE_STALE",
                details={"current_version": template.version, "expected_version": expected_version},
            )

    async def _apply_edit(self, template: PlanTemplate, updates: dict[str, Any]) -> PlanTemplate:
        updates["version"] = template.version + 1
        await self._repo.update(template.id, updates)
        logger.info(
            "template_updated",
            template_id=template.id,
            version=template.version,
            fields=sorted(k for k in updates if k != "version"),
        )
        return template

    async def _ensure_exercises_exist(self, sections: list[dict[str, Any]]) -> None:
        exercise_ids = [item["exercise_id"] for section in sections for item in section.get("items", [])]
        known = await self._catalog.get_many(exercise_ids)
        missing = sorted({exercise_id for exercise_id in exercise_ids if exercise_id not in known})
        if missing:
            raise ValidationError(
                "sections",
                f"Unknown exercises: {', '.join(missing)}",
                {"field": "sections", "missing": missing},
            )
