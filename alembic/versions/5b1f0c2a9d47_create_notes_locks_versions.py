"""Create notes, note_locks and note_versions tables

Revision ID: 5b1f0c2a9d47
Revises:
Create Date: 2025-09-20 10:12:31.402118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '5b1f0c2a9d47'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'notes',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('owner_username', sa.String(length=50), nullable=False),
        sa.Column('visibility', sa.String(length=20), nullable=False, server_default='private'),
        sa.Column('read_grants', postgresql.ARRAY(sa.String(length=100)), nullable=False, server_default='{}'),
        sa.Column('write_grants', postgresql.ARRAY(sa.String(length=100)), nullable=False, server_default='{}'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('length(title) <= 200', name='ck_notes_title_len'),
        sa.CheckConstraint(
            "visibility IN ('private', 'shared_read', 'shared_write')", name='ck_notes_visibility'
        ),
    )
    op.create_index('idx_notes_owner_username', 'notes', ['owner_username'])

    op.create_table(
        'note_locks',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            'note_id',
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey('notes.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('locked_by', sa.String(length=50), nullable=False),
        sa.Column('locked_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('note_id', name='uq_note_locks_note_id'),
    )
    op.create_index('idx_note_locks_expires_at', 'note_locks', ['expires_at'])

    op.create_table(
        'note_versions',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            'note_id',
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey('notes.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('version_number', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_by', sa.String(length=50), nullable=False),
        sa.Column('change_description', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('note_id', 'version_number', name='uq_note_versions_note_number'),
        sa.CheckConstraint('version_number >= 1', name='ck_note_versions_positive'),
    )
    op.create_index('idx_note_versions_note_id', 'note_versions', ['note_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_note_versions_note_id', table_name='note_versions')
    op.drop_table('note_versions')
    op.drop_index('idx_note_locks_expires_at', table_name='note_locks')
    op.drop_table('note_locks')
    op.drop_index('idx_notes_owner_username', table_name='notes')
    op.drop_table('notes')
