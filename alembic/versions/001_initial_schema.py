"""Initial schema: user, media_item, watch_entry

Revision ID: 001
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MEDIA_TYPES = ('MOVIE', 'TV', 'ANIME')
WATCH_STATUSES = ('PLANNED', 'WATCHING', 'COMPLETED', 'ON_HOLD', 'DROPPED')


def upgrade() -> None:
    """Create the account, media cache and watchlist tables."""

    # Create user table
    op.create_table(
        'user',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(320), nullable=False),
        sa.Column('username', sa.String(32), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('token_version', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('reset_token_hash', sa.String(64), nullable=True),
        sa.Column('reset_token_expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('email', name='uq_user_email'),
        sa.UniqueConstraint('username', name='uq_user_username'),
    )

    # Create media_item table
    op.create_table(
        'media_item',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('external_id', sa.String(64), nullable=False),
        sa.Column('source', sa.String(32), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('poster_url', sa.Text(), nullable=True),
        sa.Column('backdrop_url', sa.Text(), nullable=True),
        sa.Column('media_type', sa.Enum(*MEDIA_TYPES, name='media_type'), nullable=False),
        sa.Column('total_seasons', sa.Integer(), nullable=True),
        sa.Column('total_episodes', sa.Integer(), nullable=True),
        sa.Column('release_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('external_id', name='uq_media_item_external_id'),
    )

    # Create watch_entry table
    op.create_table(
        'watch_entry',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('media_item_id', sa.String(36), nullable=False),
        sa.Column('status', sa.Enum(*WATCH_STATUSES, name='watch_status'), nullable=False),
        sa.Column('rating', sa.SmallInteger(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('last_watched_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['media_item_id'], ['media_item.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'media_item_id', name='uq_watch_entry_user_media'),
        sa.CheckConstraint(
            'rating IS NULL OR (rating >= 1 AND rating <= 10)',
            name='ck_watch_entry_rating',
        ),
    )
    op.create_index('idx_watch_entry_user', 'watch_entry', ['user_id'])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index('idx_watch_entry_user', table_name='watch_entry')
    op.drop_table('watch_entry')
    op.drop_table('media_item')
    op.drop_table('user')

    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        sa.Enum(name='watch_status').drop(bind, checkfirst=True)
        sa.Enum(name='media_type').drop(bind, checkfirst=True)
