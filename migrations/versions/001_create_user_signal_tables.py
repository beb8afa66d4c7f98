"""Create app users, statistics, taste profiles and user signals

Revision ID: 001_user_signal_tables
Revises:
Create Date: 2026-10-19

app_users and user_statistics are shadow rows provisioned on first
authenticated request; user_signals and user_taste_profiles reference them.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB


# revision identifiers, used by Alembic.
revision: str = '001_user_signal_tables'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'app_users',
        sa.Column('id', sa.String(128), primary_key=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )

    op.create_table(
        'user_statistics',
        sa.Column('user_id', sa.String(128), sa.ForeignKey('app_users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('brew_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('recipe_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('scan_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('coffee_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )

    op.create_table(
        'user_signals',
        sa.Column('user_id', sa.String(128), sa.ForeignKey('app_users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('coffee_id', sa.String(), primary_key=True),
        sa.Column('coffee_name', sa.String(), nullable=False),
        sa.Column('scans', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('repeats', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('favorites', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('ignores', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('consumed', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_feedback', sa.String(), nullable=True),
        sa.Column('last_feedback_reason', sa.String(), nullable=True),
        sa.Column('last_seen', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_user_signals_updated_at', 'user_signals', ['updated_at'])

    op.create_table(
        'user_taste_profiles',
        sa.Column('user_id', sa.String(128), sa.ForeignKey('app_users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('sweetness', sa.Float(), nullable=False),
        sa.Column('acidity', sa.Float(), nullable=False),
        sa.Column('bitterness', sa.Float(), nullable=False),
        sa.Column('body', sa.Float(), nullable=False),
        sa.Column('flavor_notes', JSONB, nullable=True),
        sa.Column('milk_preferences', JSONB, nullable=True),
        sa.Column('caffeine_sensitivity', sa.String(), nullable=True, server_default='medium'),
        sa.Column('preferred_strength', sa.String(), nullable=True, server_default='balanced'),
        sa.Column('preference_confidence', sa.Float(), nullable=True, server_default='0.35'),
        sa.Column('quiz_version', sa.String(), nullable=True),
        sa.Column('quiz_answers', JSONB, nullable=True),
        sa.Column('taste_vector', JSONB, nullable=True),
        sa.Column('consistency_score', sa.Float(), nullable=True),
        sa.Column('ai_recommendation', sa.String(), nullable=True),
        sa.Column('manual_input', sa.String(), nullable=True),
        sa.Column('last_recalculated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
    )


def downgrade() -> None:
    op.drop_table('user_taste_profiles')
    op.drop_index('ix_user_signals_updated_at', table_name='user_signals')
    op.drop_table('user_signals')
    op.drop_table('user_statistics')
    op.drop_table('app_users')
