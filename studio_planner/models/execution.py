"""Immutable record of a conducted session."""
from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    Enum as SAEnum,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    event,
)

from studio_planner.core.exceptions import ImmutableEntityError
from studio_planner.core.logging import get_logger
from studio_planner.db.database import Base
from studio_planner.models.enums import DifficultyLevel
from studio_planner.models.exercise import enum_values

logger = get_logger(__name__)


class Execution(Base):
    """What was actually practiced in a (slot, date).

    Template name and level are denormalized and the sections are stored as a
    snapshot, so the record survives later template or catalog changes. Rows
    are inserted once and never updated or deleted.
    """
    __tablename__ = "executions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    template_id = Column(String(36), nullable=False, index=True)
    template_name = Column(String(200), nullable=False)
    template_level = Column(
        SAEnum(DifficultyLevel, native_enum=False, length=20, values_callable=enum_values),
        nullable=False,
    )
    sections_snapshot = Column(JSON, nullable=False)
    slot_id = Column(String(36), nullable=False)
    date = Column(Date, nullable=False, index=True)
    instructor = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    member_ids = Column(JSON, nullable=False, default=list)
    attendee_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("slot_id", "date", name="uq_executions_slot_date"),
        Index("ix_executions_template_date", "template_id", "date"),
    )

    def __repr__(self):
        return f"<Execution(id={self.id}, slot_id={self.slot_id}, date={self.date})>"

    @property
    def snapshot(self):
        """Fresh frozen copy of the recorded sections."""
        from studio_planner.schemas.snapshot import ExecutionSnapshot

        return ExecutionSnapshot.from_storage(self.sections_snapshot)

    @property
    def attendees(self) -> tuple[str, ...]:
        return tuple(self.member_ids or ())


@event.listens_for(Execution, "before_update")
def _reject_execution_update(mapper, connection, target):
    logger.error("execution_mutation_attempted", operation="update", execution_id=target.id)
    raise ImmutableEntityError("Execution", "updated", {"execution_id": target.id})


@event.listens_for(Execution, "before_delete")
def _reject_execution_delete(mapper, connection, target):
    logger.error("execution_mutation_attempted", operation="delete", execution_id=target.id)
    raise ImmutableEntityError("Execution", "deleted", {"execution_id": target.id})
