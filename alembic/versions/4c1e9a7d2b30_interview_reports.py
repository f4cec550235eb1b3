"""interview_reports

Revision ID: 4c1e9a7d2b30
Revises: 
Create Date: 2026-10-19 10:12:41.118204

Production-safe migration: Only creates tables that do not exist yet.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '4c1e9a7d2b30'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def upgrade() -> None:
    if not table_exists('interview_sessions'):
        op.create_table('interview_sessions',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.String(), nullable=True),
            sa.Column('user_name', sa.String(), nullable=True),
            sa.Column('job_role', sa.String(), nullable=True),
            sa.Column('interviewers', sa.JSON(), nullable=True),
            sa.Column('rounds', sa.JSON(), nullable=True),
            sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
            sa.Column('ended_at', sa.DateTime(timezone=True), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_interview_sessions_id'), 'interview_sessions', ['id'], unique=False)
        op.create_index(op.f('ix_interview_sessions_user_name'), 'interview_sessions', ['user_name'], unique=False)
        op.create_index(op.f('ix_interview_sessions_job_role'), 'interview_sessions', ['job_role'], unique=False)

    if not table_exists('interview_messages'):
        op.create_table('interview_messages',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('session_id', sa.Integer(), nullable=False),
            sa.Column('role', sa.String(), nullable=True),
            sa.Column('sender', sa.String(), nullable=True),
            sa.Column('speaker', sa.String(), nullable=True),
            sa.Column('interviewer', sa.String(), nullable=True),
            sa.Column('round', sa.Integer(), nullable=True),
            sa.Column('turn', sa.Integer(), nullable=True),
            sa.Column('type', sa.String(), nullable=True),
            sa.Column('text', sa.Text(), nullable=True),
            sa.Column('raw', sa.JSON(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.ForeignKeyConstraint(['session_id'], ['interview_sessions.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_interview_messages_id'), 'interview_messages', ['id'], unique=False)
        op.create_index(op.f('ix_interview_messages_session_id'), 'interview_messages', ['session_id'], unique=False)
        op.create_index(op.f('ix_interview_messages_created_at'), 'interview_messages', ['created_at'], unique=False)
        op.create_index('idx_message_session_created', 'interview_messages', ['session_id', 'created_at'], unique=False)

    if not table_exists('interview_reports'):
        op.create_table('interview_reports',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('session_id', sa.Integer(), nullable=False),
            sa.Column('total_score', sa.Float(), nullable=False),
            sa.Column('pass_band', sa.String(length=16), nullable=False),
            sa.Column('basic', sa.JSON(), nullable=False),
            sa.Column('summary', sa.JSON(), nullable=False),
            sa.Column('rounds', sa.JSON(), nullable=False),
            sa.Column('skills', sa.JSON(), nullable=False),
            sa.Column('viz', sa.JSON(), nullable=False),
            sa.Column('extra', sa.JSON(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['session_id'], ['interview_sessions.id'], ondelete='CASCADE'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_interview_reports_id'), 'interview_reports', ['id'], unique=False)
        op.create_index(op.f('ix_interview_reports_session_id'), 'interview_reports', ['session_id'], unique=True)
        op.create_index(op.f('ix_interview_reports_total_score'), 'interview_reports', ['total_score'], unique=False)


def downgrade() -> None:
    op.drop_table('interview_reports')
    op.drop_table('interview_messages')
    op.drop_table('interview_sessions')
