"""Plan template model."""
from datetime import datetime
from uuid import uuid4

from sqlalchemy import JSON, Boolean, Column, DateTime, Enum as SAEnum, Index, Integer, String, Text

from studio_planner.db.database import Base
from studio_planner.models.enums import DifficultyLevel
from studio_planner.models.exercise import enum_values


class PlanTemplate(Base):
    """Reusable session template.

    ``sections`` holds a JSON list of
    ``{"section_type", "order", "items": [{"exercise_id", "order", ...}]}``.
    Items are kept in a dense 1..N order within each section.
    """
    __tablename__ = "plan_templates"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name = Column(String(200), nullable=False)
    guidance_note = Column(Text, nullable=True)
    level = Column(
        SAEnum(DifficultyLevel, native_enum=False, length=20, values_callable=enum_values),
        nullable=False,
        default=DifficultyLevel.INTERMEDIATE,
    )
    version = Column(Integer, nullable=False, default=1)
    sections = Column(JSON, nullable=False, default=list)
    created_by = Column(String(255), nullable=True)

    # Usage statistics, written only by record_usage
    last_used_at = Column(DateTime, nullable=True)
    usage_count = Column(Integer, nullable=False, default=0)

    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_plan_templates_level", "level"),
        Index("ix_plan_templates_is_active", "is_active"),
        Index("ix_plan_templates_last_used_at", "last_used_at"),
    )

    def __repr__(self):
        return f"<PlanTemplate(id={self.id}, name={self.name!r}, version={self.version})>"

    def iter_items(self):
        """Yield every item dict across sections in display order."""
        for section in sorted(self.sections or [], key=lambda s: s.get("order", 0)):
            for item in sorted(section.get("items", []), key=lambda i: i.get("order", 0)):
                yield item
