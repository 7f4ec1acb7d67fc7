"""Allocation of a plan template to a slot and date."""
from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, Date, DateTime, Enum as SAEnum, ForeignKey, Index, String, text

from studio_planner.db.database import Base
from studio_planner.models.enums import AllocationStatus
from studio_planner.models.exercise import enum_values

_ACTIVE_ONLY = text("status != 'cancelled'")


class Allocation(Base):
    """Pre-scheduled assignment of a template to a (slot, date).

    At most one non-cancelled allocation may exist per (slot, date); the
    partial unique index enforces this in storage.
    """
    __tablename__ = "allocations"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    template_id = Column(
        String(36),
        ForeignKey("plan_templates.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    slot_id = Column(String(36), nullable=False)
    date = Column(Date, nullable=False, index=True)
    assigned_by = Column(String(255), nullable=True)
    status = Column(
        SAEnum(AllocationStatus, native_enum=False, length=20, values_callable=enum_values),
        nullable=False,
        default=AllocationStatus.SCHEDULED,
    )
    execution_id = Column(String(36), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index(
            "uq_allocations_active_slot_date",
            "slot_id",
            "date",
            unique=True,
            postgresql_where=_ACTIVE_ONLY,
            sqlite_where=_ACTIVE_ONLY,
        ),
        Index("ix_allocations_status", "status"),
    )

    def __repr__(self):
        return (
            f"<Allocation(id={self.id}, slot_id={self.slot_id}, date={self.date}, "
            f"status={self.status})>"
        )
