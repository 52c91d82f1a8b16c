"""Create incidents table

Revision ID: 202610190000
Revises:
Create Date: 2026-10-19 00:00:00.000000

Changes:
- Create incidents table
- Add indexes for the listing filters and default sort
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '202610190000'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Apply migration changes."""

    op.create_table(
        'incidents',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('service', sa.String(100), nullable=False),
        sa.Column('severity', sa.String(10), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('owner', sa.String(100), nullable=True),
        sa.Column('summary', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )

    # ------------------------------
    # Indexes for filtering and sorting
    # ------------------------------
    op.create_index('ix_incidents_service', 'incidents', ['service'], unique=False)
    op.create_index('ix_incidents_severity', 'incidents', ['severity'], unique=False)
    op.create_index('ix_incidents_status', 'incidents', ['status'], unique=False)
    op.create_index(
        'ix_incidents_status_created',
        'incidents',
        ['status', 'created_at'],
        unique=False
    )


def downgrade() -> None:
    """Revert migration changes."""

    op.drop_index('ix_incidents_status_created', table_name='incidents')
    op.drop_index('ix_incidents_status', table_name='incidents')
    op.drop_index('ix_incidents_severity', table_name='incidents')
    op.drop_index('ix_incidents_service', table_name='incidents')
    op.drop_table('incidents')
