"""create_planner_tables

Revision ID: 5c1e7a9d3b20
Revises:
Create Date: 2026-10-17 09:12:44.318205

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = '5c1e7a9d3b20'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

LEVELS = ('beginner', 'intermediate', 'advanced')
CATEGORIES = (
    'posture',
    'breathing_technique',
    'cleansing_technique',
    'general_exercise',
    'relaxation',
    'compound_flow',
)


def _enum(name: str, values: tuple[str, ...], length: int) -> sa.Enum:
    return sa.Enum(*values, name=name, native_enum=False, length=length)


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'exercises',
        sa.Column('id', sa.String(length=50), primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('alternate_name', sa.String(length=200), nullable=True),
        sa.Column('category', _enum('exercisecategory', CATEGORIES, 40), nullable=False),
        sa.Column('difficulty', _enum('difficultylevel', LEVELS, 20), nullable=False),
        sa.Column('primary_regions', sa.JSON(), nullable=False),
        sa.Column('secondary_regions', sa.JSON(), nullable=False),
        sa.Column('benefits', sa.JSON(), nullable=False),
        sa.Column('contraindications', sa.JSON(), nullable=True),
        sa.Column('breathing_cue', _enum('breathingcue', ('inhale', 'exhale', 'hold'), 20), nullable=True),
        sa.Column('child_sequence', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_exercises_category', 'exercises', ['category'])
    op.create_index('ix_exercises_is_active', 'exercises', ['is_active'])

    op.create_table(
        'plan_templates',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('guidance_note', sa.Text(), nullable=True),
        sa.Column('level', _enum('difficultylevel', LEVELS, 20), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('sections', sa.JSON(), nullable=False),
        sa.Column('created_by', sa.String(length=255), nullable=True),
        sa.Column('last_used_at', sa.DateTime(), nullable=True),
        sa.Column('usage_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_plan_templates_level', 'plan_templates', ['level'])
    op.create_index('ix_plan_templates_is_active', 'plan_templates', ['is_active'])
    op.create_index('ix_plan_templates_last_used_at', 'plan_templates', ['last_used_at'])

    op.create_table(
        'allocations',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column(
            'template_id',
            sa.String(length=36),
            sa.ForeignKey('plan_templates.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('slot_id', sa.String(length=36), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('assigned_by', sa.String(length=255), nullable=True),
        sa.Column(
            'status',
            _enum('allocationstatus', ('scheduled', 'executed', 'cancelled'), 20),
            nullable=False,
            server_default='scheduled',
        ),
        sa.Column('execution_id', sa.String(length=36), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_allocations_template_id', 'allocations', ['template_id'])
    op.create_index('ix_allocations_date', 'allocations', ['date'])
    op.create_index('ix_allocations_status', 'allocations', ['status'])
    # One live allocation per slot and date; cancelled rows do not count
    op.create_index(
        'uq_allocations_active_slot_date',
        'allocations',
        ['slot_id', 'date'],
        unique=True,
        postgresql_where=sa.text("status != 'cancelled'"),
        sqlite_where=sa.text("status != 'cancelled'"),
    )

    op.create_table(
        'executions',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('template_id', sa.String(length=36), nullable=False),
        sa.Column('template_name', sa.String(length=200), nullable=False),
        sa.Column('template_level', _enum('difficultylevel', LEVELS, 20), nullable=False),
        sa.Column('sections_snapshot', sa.JSON(), nullable=False),
        sa.Column('slot_id', sa.String(length=36), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('instructor', sa.String(length=255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('member_ids', sa.JSON(), nullable=False),
        sa.Column('attendee_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('slot_id', 'date', name='uq_executions_slot_date'),
    )
    op.create_index('ix_executions_template_id', 'executions', ['template_id'])
    op.create_index('ix_executions_date', 'executions', ['date'])
    op.create_index('ix_executions_template_date', 'executions', ['template_id', 'date'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('executions')
    op.drop_index('uq_allocations_active_slot_date', table_name='allocations')
    op.drop_table('allocations')
    op.drop_table('plan_templates')
    op.drop_table('exercises')
