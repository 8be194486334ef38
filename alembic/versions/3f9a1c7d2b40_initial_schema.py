"""initial schema

Revision ID: 3f9a1c7d2b40
Revises: 
Create Date: 2026-10-19 10:12:05.118442

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f9a1c7d2b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create channels and channel_snapshots."""

    # ── channels ───────────────────────────────────────────────────────
    op.create_table(
        'channels',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('channel_name', sa.String(255), nullable=False),
        sa.Column('influencer_name', sa.String(255), nullable=True),
        sa.Column('country', sa.String(8), nullable=True),
        sa.Column('custom_url', sa.Text(), nullable=True),
        sa.Column('avatar_url', sa.Text(), nullable=True),
        sa.Column('custom_category', sa.String(255), nullable=True),
        sa.Column('youtube_join_date', sa.Date(), nullable=True),
        sa.Column('last_sync', sa.TIMESTAMP(), nullable=True),
        sa.Column('is_my_channel', sa.Boolean(), nullable=False,
                  server_default=sa.false()),
        sa.Column('is_hidden', sa.Boolean(), nullable=False,
                  server_default=sa.false()),
        sa.Column('is_pinned', sa.Boolean(), nullable=False,
                  server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_channels')),
    )
    op.create_index('idx_channels_last_sync', 'channels', ['last_sync'])

    # ── channel_snapshots ──────────────────────────────────────────────
    op.create_table(
        'channel_snapshots',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('channel_id', sa.String(64), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('subscribers', sa.BigInteger(), nullable=False,
                  server_default='0'),
        sa.Column('views', sa.BigInteger(), nullable=False,
                  server_default='0'),
        sa.Column('videos', sa.Integer(), nullable=False,
                  server_default='0'),
        sa.Column('time_registered', sa.String(8), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(), nullable=True,
                  server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_channel_snapshots')),
        sa.ForeignKeyConstraint(['channel_id'], ['channels.id'],
                                name=op.f('fk_channel_snapshots_channel_id_channels'),
                                ondelete='CASCADE'),
        sa.UniqueConstraint('channel_id', 'date',
                            name='uq_snapshots_channel_date'),
    )
    op.create_index('idx_snapshots_channel_id', 'channel_snapshots', ['channel_id'])


def downgrade() -> None:
    op.drop_index('idx_snapshots_channel_id', table_name='channel_snapshots')
    op.drop_table('channel_snapshots')
    op.drop_index('idx_channels_last_sync', table_name='channels')
    op.drop_table('channels')
