"""create_contact_submissions

Revision ID: 5c1e9a7d2b40
Revises:
Create Date: 2026-10-17 10:05:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c1e9a7d2b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the contact_submissions table."""
    op.create_table(
        'contact_submissions',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('ip_address', sa.String(length=64), nullable=False),
        sa.Column('user_agent', sa.String(length=512), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='unread'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('length(name) BETWEEN 1 AND 100', name='ck_contact_name_length'),
        sa.CheckConstraint('length(message) BETWEEN 1 AND 1000', name='ck_contact_message_length'),
        sa.CheckConstraint("status IN ('unread', 'read', 'replied')", name='contact_status'),
    )
    op.create_index(op.f('ix_contact_submissions_email'), 'contact_submissions', ['email'], unique=False)
    op.create_index(op.f('ix_contact_submissions_created_at'), 'contact_submissions', ['created_at'], unique=False)


def downgrade() -> None:
    """Drop the contact_submissions table."""
    op.drop_index(op.f('ix_contact_submissions_created_at'), table_name='contact_submissions')
    op.drop_index(op.f('ix_contact_submissions_email'), table_name='contact_submissions')
    op.drop_table('contact_submissions')
