"""
Initial migration - create the dashboard tables.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18

Creates user, candidate and stage_history.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables."""

    # ===== USER TABLE =====
    op.create_table(
        'user',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('role', sa.String(50), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_user'),
        sa.UniqueConstraint('email', name='uq_user_email'),
    )
    op.create_index('ix_user_created_at', 'user', ['created_at'])

    # ===== CANDIDATE TABLE =====
    op.create_table(
        'candidate',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('full_name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(20), nullable=False),
        sa.Column('gender', sa.String(20), nullable=True),
        sa.Column('city', sa.String(100), nullable=False),
        sa.Column('designation', sa.String(100), nullable=True),
        sa.Column('company', sa.String(100), nullable=True),
        sa.Column('experience', sa.String(50), nullable=True),
        sa.Column('qualification', sa.String(100), nullable=True),
        sa.Column('industry', sa.String(100), nullable=True),
        sa.Column('current_ctc', sa.String(50), nullable=True),
        sa.Column('expected_ctc', sa.String(50), nullable=True),
        sa.Column('notice_period', sa.String(50), nullable=True),
        sa.Column('position_name', sa.String(100), nullable=True),
        sa.Column('client_name', sa.String(100), nullable=True),
        sa.Column('date_of_sharing', sa.Date(), nullable=True),
        sa.Column('resume_url', sa.String(1000), nullable=True),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('stage', sa.String(50), nullable=False, server_default='Screening'),
        sa.Column('created_by', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_candidate'),
        sa.ForeignKeyConstraint(
            ['created_by'], ['user.id'],
            name='fk_candidate_created_by_user',
            ondelete='SET NULL',
        ),
    )
    op.create_index('ix_candidate_email', 'candidate', ['email'])
    op.create_index('ix_candidate_phone', 'candidate', ['phone'])
    op.create_index('ix_candidate_stage', 'candidate', ['stage'])
    op.create_index('ix_candidate_created_by', 'candidate', ['created_by'])
    op.create_index('ix_candidate_created_at', 'candidate', ['created_at'])

    # ===== STAGE HISTORY TABLE =====
    op.create_table(
        'stage_history',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('candidate_id', sa.Uuid(), nullable=False),
        sa.Column('old_stage', sa.String(50), nullable=True),
        sa.Column('new_stage', sa.String(50), nullable=False),
        sa.Column('changed_by', sa.Uuid(), nullable=True),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_stage_history'),
        sa.ForeignKeyConstraint(
            ['candidate_id'], ['candidate.id'],
            name='fk_stage_history_candidate_id_candidate',
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['changed_by'], ['user.id'],
            name='fk_stage_history_changed_by_user',
            ondelete='SET NULL',
        ),
    )
    op.create_index('ix_stage_history_candidate_id', 'stage_history', ['candidate_id'])
    op.create_index('ix_stage_history_created_at', 'stage_history', ['created_at'])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('stage_history')
    op.drop_table('candidate')
    op.drop_table('user')
